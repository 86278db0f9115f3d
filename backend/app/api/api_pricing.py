import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..schemas.pricing import (
    LanguageOut,
    OnboardingPhaseOut,
    PricingRatesOut,
    QuoteBreakdown,
    QuoteEstimateIn,
    QuoteEstimateOut,
    RatePlanOut,
    WorkflowStepOut,
)
from ..services.pricing import ModifierSet, calculate_service_cost
from ..services.pricing_config import PricingConfig
from ..services.pricing_errors import PricingError, UnknownLanguage
from ..services.reference_data import (
    UnknownWorkflow,
    get_language,
    get_workflow,
    list_languages,
    onboarding_phases,
)
from ..utils import error_response
from .dependencies import get_pricing_config

router = APIRouter(tags=["pricing"])
logger = logging.getLogger(__name__)


@router.post("/quotes/estimate", response_model=QuoteEstimateOut)
def estimate_quote(
    body: QuoteEstimateIn,
    config: PricingConfig = Depends(get_pricing_config),
):
    """Price a prospective booking without persisting anything.

    Every pricing input error is a client error and maps to a 400.
    """
    language_code = None
    try:
        if body.language:
            lang = get_language(body.language)
            if not lang.is_bookable:
                raise UnknownLanguage(f"Language {lang.code} is not yet offered", value=body.language)
            language_code = lang.code
        result = calculate_service_cost(
            body.service_type,
            body.quantity,
            ModifierSet(
                is_rush=body.is_rush,
                is_after_hours=body.is_after_hours,
                is_holiday=body.is_holiday,
                travel_miles=body.travel_miles,
            ),
            config=config,
        )
    except PricingError as exc:
        raise error_response(str(exc), exc.field_errors, status.HTTP_400_BAD_REQUEST)

    logger.info(
        "quote.estimate service_type=%s subtotal=%s currency=%s",
        result.service_type.value,
        result.subtotal,
        result.currency,
    )

    return QuoteEstimateOut(
        service_type=result.service_type.value,
        subtotal=result.subtotal,
        commission=result.commission,
        interpreter_earnings=result.interpreter_earnings,
        total=result.total,
        currency=result.currency,
        language=language_code,
        breakdown=QuoteBreakdown(
            unit=result.unit.value,
            requested_quantity=result.requested_quantity,
            billed_quantity=result.billed_quantity,
            unit_rate=result.unit_rate,
            base_amount=result.base_amount,
            applied_multipliers=list(result.applied_multipliers),
            travel_fee=result.travel_fee,
            commission_rate=result.commission_rate,
        ),
    )


@router.get("/pricing/rates", response_model=PricingRatesOut)
def read_rates(config: PricingConfig = Depends(get_pricing_config)):
    """Return the active rate card, commission split and modifier constants."""
    plans = []
    for stype, plan in config.rate_plans.items():
        plans.append(
            RatePlanOut(
                service_type=stype.value,
                unit=plan.unit.value,
                rate=plan.rate,
                minimum=plan.minimum,
                currency=plan.currency,
                commission_rate=config.get_commission_rate(stype),
                commission_is_default=stype not in config.commission_rates,
                travel_eligible=config.is_travel_eligible(stype),
            )
        )
    m = config.modifiers
    return PricingRatesOut(
        rate_plans=plans,
        default_commission_rate=config.default_commission_rate,
        modifiers={
            "rush_multiplier": m.rush_multiplier,
            "after_hours_multiplier": m.after_hours_multiplier,
            "holiday_multiplier": m.holiday_multiplier,
            "free_travel_radius_miles": m.free_travel_radius_miles,
            "travel_rate_per_mile": m.travel_rate_per_mile,
        },
    )


@router.get("/reference/languages", response_model=List[LanguageOut], tags=["reference"])
def read_languages(include_planned: bool = False):
    return [LanguageOut(**lang.as_dict()) for lang in list_languages(include_planned=include_planned)]


@router.get("/reference/booking-workflow/{flow}", response_model=List[WorkflowStepOut], tags=["reference"])
def read_booking_workflow(flow: str):
    try:
        steps = get_workflow(flow)
    except UnknownWorkflow:
        raise error_response(
            "Workflow not found",
            {"flow": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return [WorkflowStepOut(**step.as_dict()) for step in steps]


@router.get("/reference/onboarding", response_model=List[OnboardingPhaseOut], tags=["reference"])
def read_onboarding():
    return [OnboardingPhaseOut(**phase.as_dict()) for phase in onboarding_phases()]
