from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class QuoteEstimateIn(BaseModel):
    service_type: str
    # minutes, hours or words depending on the service's billing unit
    quantity: Decimal
    is_rush: bool = False
    is_after_hours: bool = False
    is_holiday: bool = False
    travel_miles: Decimal = Field(Decimal("0"))
    language: Optional[str] = None  # e.g. es-mx


class QuoteBreakdown(BaseModel):
    unit: str
    requested_quantity: Decimal
    billed_quantity: Decimal
    unit_rate: Decimal
    base_amount: Decimal
    applied_multipliers: List[str]
    travel_fee: Decimal
    commission_rate: Decimal


class QuoteEstimateOut(BaseModel):
    service_type: str
    subtotal: Decimal
    commission: Decimal
    interpreter_earnings: Decimal
    total: Decimal
    currency: str
    language: Optional[str] = None
    breakdown: QuoteBreakdown


class RatePlanOut(BaseModel):
    service_type: str
    unit: str
    rate: Decimal
    minimum: Decimal
    currency: str
    commission_rate: Decimal
    commission_is_default: bool
    travel_eligible: bool


class PricingRatesOut(BaseModel):
    rate_plans: List[RatePlanOut]
    default_commission_rate: Decimal
    modifiers: Dict[str, Decimal]


class LanguageOut(BaseModel):
    code: str
    name: str
    tier: str
    priority: int
    interpreters_available: int = 0
    specialties: List[str] = []
    status: str
    target_launch: Optional[str] = None


class WorkflowStepOut(BaseModel):
    step: int
    name: str
    description: str
    required_fields: List[str] = []
    optional_fields: List[str] = []
    options: Dict[str, Any] = {}


class OnboardingPhaseOut(BaseModel):
    phase: int
    name: str
    requirements: Dict[str, Any]
