"""Service-cost calculator for interpretation bookings.

:func:`calculate_service_cost` turns a service type, a requested quantity
(minutes, hours or words depending on the service) and a :class:`ModifierSet`
into a :class:`PricingResult`: the client-facing subtotal and its split into
platform commission and interpreter earnings.

The calculation is pure and deterministic. All arithmetic is done in
``Decimal`` and only the returned money fields are rounded (ROUND_HALF_UP to
the currency's minor unit), so ``commission + interpreter_earnings`` always
equals ``subtotal`` exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, Overflow, localcontext
from typing import Any

from .pricing_config import (
    DEFAULT_PRICING_CONFIG,
    BillingUnit,
    PricingConfig,
    ServiceType,
    coerce_service_type,
)
from .pricing_errors import InvalidModifier, InvalidQuantity, InvalidTravelDistance, PricingError

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")

# Inputs are capped at 10**30 and priced with 60 significant digits, enough
# for the exact subtotal and its cents with any realistic rate card.
_MAX_INPUT_EXPONENT = 30
_WORKING_PRECISION = 60


@dataclass(frozen=True)
class ModifierSet:
    """Situational price modifiers for a single booking."""

    is_rush: bool = False
    is_after_hours: bool = False
    is_holiday: bool = False
    travel_miles: Decimal | float | int = _ZERO

    def __post_init__(self) -> None:
        for name in ("is_rush", "is_after_hours", "is_holiday"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidModifier(f"{name} must be true or false, got {value!r}", field=name, value=value)


@dataclass(frozen=True)
class PricingResult:
    subtotal: Decimal
    commission: Decimal
    interpreter_earnings: Decimal
    total: Decimal
    service_type: ServiceType
    unit: BillingUnit
    requested_quantity: Decimal
    billed_quantity: Decimal
    unit_rate: Decimal
    base_amount: Decimal
    travel_fee: Decimal
    applied_multipliers: tuple[str, ...]
    commission_rate: Decimal
    currency: str

    def as_snapshot(self) -> dict[str, Any]:
        """Return the full breakdown as a JSON-safe dict for storing on a job."""
        return {
            "service_type": self.service_type.value,
            "unit": self.unit.value,
            "requested_quantity": str(self.requested_quantity),
            "billed_quantity": str(self.billed_quantity),
            "unit_rate": str(self.unit_rate),
            "base_amount": str(self.base_amount),
            "applied_multipliers": list(self.applied_multipliers),
            "travel_fee": str(self.travel_fee),
            "subtotal": str(self.subtotal),
            "commission_rate": str(self.commission_rate),
            "commission": str(self.commission),
            "interpreter_earnings": str(self.interpreter_earnings),
            "total": str(self.total),
            "currency": self.currency,
        }


def _non_negative_decimal(value: Any, error: type[PricingError], label: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise error(f"{label} must be a number, got {value!r}", value=value)
    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise error(f"{label} must be a number, got {value!r}", value=value)
    if not dec.is_finite():
        raise error(f"{label} must be finite, got {value!r}", value=value)
    if dec < 0:
        raise error(f"{label} must be >= 0, got {value!r}", value=value)
    if dec and dec.adjusted() >= _MAX_INPUT_EXPONENT:
        raise error(f"{label} is too large to price, got {value!r}", value=value)
    return dec


def calculate_service_cost(
    service_type: ServiceType | str,
    requested_quantity: Decimal | float | int | str,
    modifiers: ModifierSet | None = None,
    *,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> PricingResult:
    """Price a booking and split it into commission and interpreter earnings.

    Parameters
    ----------
    service_type:
        A :class:`ServiceType` or its string value.
    requested_quantity:
        Raw duration or word count in the service's billing unit. Quantities
        below the plan minimum are billed at the minimum.
    modifiers:
        Rush / after-hours / holiday flags and travel distance. Travel miles
        are accepted for every service type; callers pass 0 for remote work.
    config:
        Rate and commission tables to price against.

    Raises
    ------
    UnknownServiceType, InvalidQuantity, InvalidTravelDistance
        On the first invalid input; nothing is computed in that case.
        Inputs of 10**30 or more are rejected as too large to price.
    """
    stype = coerce_service_type(service_type)
    plan = config.get_rate_plan(stype)
    quantity = _non_negative_decimal(requested_quantity, InvalidQuantity, "quantity")
    mods = modifiers if modifiers is not None else ModifierSet()
    travel_miles = _non_negative_decimal(mods.travel_miles, InvalidTravelDistance, "travel_miles")

    rates = config.modifiers
    cent = config.minor_unit
    try:
        with localcontext() as ctx:
            ctx.prec = _WORKING_PRECISION
            billed_quantity = max(quantity, plan.minimum)
            base = plan.rate * billed_quantity

            subtotal = base
            applied: list[str] = []
            if mods.is_rush:
                subtotal *= rates.rush_multiplier
                applied.append("rush")
            if mods.is_after_hours:
                subtotal *= rates.after_hours_multiplier
                applied.append("after_hours")
            if mods.is_holiday:
                subtotal *= rates.holiday_multiplier
                applied.append("holiday")

            travel_fee = max(_ZERO, travel_miles - rates.free_travel_radius_miles) * rates.travel_rate_per_mile
            subtotal += travel_fee

            commission_rate = config.get_commission_rate(stype)
            commission = subtotal * commission_rate

            subtotal_out = subtotal.quantize(cent, rounding=ROUND_HALF_UP)
            commission_out = commission.quantize(cent, rounding=ROUND_HALF_UP)
            # Derived from the rounded figures so the split always sums to the subtotal.
            earnings_out = subtotal_out - commission_out
            base_out = base.quantize(cent, rounding=ROUND_HALF_UP)
            travel_fee_out = travel_fee.quantize(cent, rounding=ROUND_HALF_UP)
    except (InvalidOperation, Overflow) as exc:
        raise InvalidQuantity(
            f"quantity {requested_quantity!r} is too large to price", value=requested_quantity
        ) from exc

    result = PricingResult(
        subtotal=subtotal_out,
        commission=commission_out,
        interpreter_earnings=earnings_out,
        total=subtotal_out,
        service_type=stype,
        unit=plan.unit,
        requested_quantity=quantity,
        billed_quantity=billed_quantity,
        unit_rate=plan.rate,
        base_amount=base_out,
        travel_fee=travel_fee_out,
        applied_multipliers=tuple(applied),
        commission_rate=commission_rate,
        currency=plan.currency,
    )
    logger.debug(
        "Service cost computed",
        extra={
            "service_type": stype.value,
            "billed_quantity": str(billed_quantity),
            "multipliers": applied,
            "subtotal": str(subtotal_out),
            "commission": str(commission_out),
        },
    )
    return result
