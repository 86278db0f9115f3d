"""Rate and commission tables for interpretation services.

Rates live here as data so pricing can change without touching the
calculator in :mod:`app.services.pricing`. A :class:`PricingConfig` is built
once (either the built-in :data:`DEFAULT_PRICING_CONFIG` or a JSON document
named by ``PRICING_CONFIG_PATH``) and passed to the calculator; it is never
mutated afterwards.

Commission lookup is kept separate from rate lookup so commission policy can
evolve independently of list prices. A service type without an explicit
commission entry falls back to ``default_commission_rate`` (20%).
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .pricing_errors import InvalidPricingConfig, UnknownServiceType

logger = logging.getLogger(__name__)

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


class ServiceType(str, Enum):
    PHONE_INTERPRETATION = "phone_interpretation"
    VIDEO_INTERPRETATION = "video_interpretation"
    IN_PERSON_GENERAL = "in_person_general"
    IN_PERSON_LEGAL = "in_person_legal"
    IN_PERSON_MEDICAL = "in_person_medical"
    AI_AVATAR = "ai_avatar"
    DOCUMENT_TRANSLATION = "document_translation"


class BillingUnit(str, Enum):
    MINUTE = "minute"
    HOUR = "hour"
    WORD = "word"


# Service types where an interpreter travels to the client.
TRAVEL_SERVICE_TYPES = frozenset(
    {
        ServiceType.IN_PERSON_GENERAL,
        ServiceType.IN_PERSON_LEGAL,
        ServiceType.IN_PERSON_MEDICAL,
    }
)


def coerce_service_type(value: Any) -> ServiceType:
    """Return the :class:`ServiceType` for ``value`` or raise ``UnknownServiceType``."""
    if isinstance(value, ServiceType):
        return value
    if isinstance(value, str):
        try:
            return ServiceType(value.strip().lower())
        except ValueError:
            pass
    raise UnknownServiceType(f"Unknown service type: {value!r}", value=value)


def _config_decimal(value: Any, name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidPricingConfig(f"{name} must be a number, got {value!r}", value=value)
    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidPricingConfig(f"{name} must be a number, got {value!r}", value=value)
    if not dec.is_finite():
        raise InvalidPricingConfig(f"{name} must be finite, got {value!r}", value=value)
    return dec


@dataclass(frozen=True)
class RatePlan:
    """Billing unit, price per unit and the minimum billable quantity."""

    unit: BillingUnit
    rate: Decimal
    minimum: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        try:
            unit = BillingUnit(self.unit)
        except (ValueError, TypeError):
            raise InvalidPricingConfig(f"unit must be one of minute/hour/word, got {self.unit!r}", value=self.unit)
        rate = _config_decimal(self.rate, "rate")
        minimum = _config_decimal(self.minimum, "minimum")
        if rate <= 0:
            raise InvalidPricingConfig(f"rate must be positive, got {rate}", value=rate)
        if minimum < 0:
            raise InvalidPricingConfig(f"minimum must be >= 0, got {minimum}", value=minimum)
        currency = str(self.currency or "").strip().upper()
        if not _CURRENCY_RE.match(currency):
            raise InvalidPricingConfig(f"currency must be an ISO 4217 code, got {self.currency!r}", value=self.currency)
        object.__setattr__(self, "unit", unit)
        object.__setattr__(self, "rate", rate)
        object.__setattr__(self, "minimum", minimum)
        object.__setattr__(self, "currency", currency)

    def as_dict(self) -> dict[str, str]:
        return {
            "unit": self.unit.value,
            "rate": str(self.rate),
            "minimum": str(self.minimum),
            "currency": self.currency,
        }


@dataclass(frozen=True)
class ModifierRates:
    """Situational multipliers and the travel surcharge constants."""

    rush_multiplier: Decimal = Decimal("1.5")  # +50% for <24hr requests
    after_hours_multiplier: Decimal = Decimal("1.25")  # +25% after 6pm/weekends
    holiday_multiplier: Decimal = Decimal("2.0")  # +100% major holidays
    free_travel_radius_miles: Decimal = Decimal("25")
    travel_rate_per_mile: Decimal = Decimal("0.65")

    def __post_init__(self) -> None:
        for name in (
            "rush_multiplier",
            "after_hours_multiplier",
            "holiday_multiplier",
        ):
            value = _config_decimal(getattr(self, name), name)
            if value <= 0:
                raise InvalidPricingConfig(f"{name} must be positive, got {value}", value=value)
            object.__setattr__(self, name, value)
        for name in ("free_travel_radius_miles", "travel_rate_per_mile"):
            value = _config_decimal(getattr(self, name), name)
            if value < 0:
                raise InvalidPricingConfig(f"{name} must be >= 0, got {value}", value=value)
            object.__setattr__(self, name, value)

    def as_dict(self) -> dict[str, str]:
        return {
            "rush_multiplier": str(self.rush_multiplier),
            "after_hours_multiplier": str(self.after_hours_multiplier),
            "holiday_multiplier": str(self.holiday_multiplier),
            "free_travel_radius_miles": str(self.free_travel_radius_miles),
            "travel_rate_per_mile": str(self.travel_rate_per_mile),
        }


@dataclass(frozen=True, eq=False)
class PricingConfig:
    rate_plans: Mapping[ServiceType, RatePlan]
    commission_rates: Mapping[ServiceType, Decimal]
    modifiers: ModifierRates = field(default_factory=ModifierRates)
    default_commission_rate: Decimal = Decimal("0.20")
    minor_unit_places: int = 2

    def __post_init__(self) -> None:
        plans: dict[ServiceType, RatePlan] = {}
        for key, plan in dict(self.rate_plans).items():
            try:
                stype = coerce_service_type(key)
            except UnknownServiceType:
                raise InvalidPricingConfig(f"rate plan for unknown service type {key!r}", value=key)
            if not isinstance(plan, RatePlan):
                raise InvalidPricingConfig(f"rate plan for {stype.value} must be a RatePlan", value=plan)
            plans[stype] = plan

        commissions: dict[ServiceType, Decimal] = {}
        for key, raw in dict(self.commission_rates).items():
            try:
                stype = coerce_service_type(key)
            except UnknownServiceType:
                raise InvalidPricingConfig(f"commission rate for unknown service type {key!r}", value=key)
            commissions[stype] = self._commission_fraction(raw, f"commission_rates.{stype.value}")

        default_rate = self._commission_fraction(self.default_commission_rate, "default_commission_rate")

        places = self.minor_unit_places
        if isinstance(places, bool) or not isinstance(places, int) or not 0 <= places <= 4:
            raise InvalidPricingConfig(f"minor_unit_places must be an integer in 0..4, got {places!r}", value=places)
        if not isinstance(self.modifiers, ModifierRates):
            raise InvalidPricingConfig("modifiers must be a ModifierRates instance", value=self.modifiers)

        object.__setattr__(self, "rate_plans", MappingProxyType(plans))
        object.__setattr__(self, "commission_rates", MappingProxyType(commissions))
        object.__setattr__(self, "default_commission_rate", default_rate)

    @staticmethod
    def _commission_fraction(value: Any, name: str) -> Decimal:
        rate = _config_decimal(value, name)
        if not Decimal("0") < rate < Decimal("1"):
            raise InvalidPricingConfig(f"{name} must be between 0 and 1 exclusive, got {rate}", value=rate)
        return rate

    @property
    def minor_unit(self) -> Decimal:
        """Smallest currency amount, e.g. ``Decimal("0.01")`` for USD."""
        return Decimal(1).scaleb(-self.minor_unit_places)

    def get_rate_plan(self, service_type: ServiceType | str) -> RatePlan:
        stype = coerce_service_type(service_type)
        plan = self.rate_plans.get(stype)
        if plan is None:
            raise UnknownServiceType(f"No rate plan configured for {stype.value}", value=service_type)
        return plan

    def get_commission_rate(self, service_type: ServiceType | str) -> Decimal:
        """Return the commission fraction, or the default for uncommissioned types."""
        stype = coerce_service_type(service_type)
        rate = self.commission_rates.get(stype)
        if rate is None:
            logger.debug(
                "No commission entry for %s; using default rate %s",
                stype.value,
                self.default_commission_rate,
            )
            return self.default_commission_rate
        return rate

    def is_travel_eligible(self, service_type: ServiceType | str) -> bool:
        return coerce_service_type(service_type) in TRAVEL_SERVICE_TYPES

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-safe dict; :meth:`from_mapping` accepts the same shape."""
        return {
            "rate_plans": {stype.value: plan.as_dict() for stype, plan in self.rate_plans.items()},
            "commission_rates": {stype.value: str(rate) for stype, rate in self.commission_rates.items()},
            "default_commission_rate": str(self.default_commission_rate),
            "modifiers": self.modifiers.as_dict(),
            "minor_unit_places": self.minor_unit_places,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, default_currency: str = "USD") -> "PricingConfig":
        """Build a config from a parsed JSON document."""
        if not isinstance(data, Mapping):
            raise InvalidPricingConfig("pricing config must be a JSON object", value=data)
        raw_plans = data.get("rate_plans")
        if not isinstance(raw_plans, Mapping) or not raw_plans:
            raise InvalidPricingConfig("rate_plans must be a non-empty object", value=raw_plans)

        plans: dict[str, RatePlan] = {}
        for key, row in raw_plans.items():
            if not isinstance(row, Mapping):
                raise InvalidPricingConfig(f"rate plan for {key!r} must be an object", value=row)
            plans[key] = RatePlan(
                unit=row.get("unit"),
                rate=row.get("rate"),
                minimum=row.get("minimum", 0),
                currency=row.get("currency") or default_currency,
            )

        raw_commissions = data.get("commission_rates") or {}
        if not isinstance(raw_commissions, Mapping):
            raise InvalidPricingConfig("commission_rates must be an object", value=raw_commissions)

        raw_modifiers = data.get("modifiers") or {}
        if not isinstance(raw_modifiers, Mapping):
            raise InvalidPricingConfig("modifiers must be an object", value=raw_modifiers)
        known = set(ModifierRates.__dataclass_fields__)
        unknown = sorted(set(raw_modifiers) - known)
        if unknown:
            raise InvalidPricingConfig(f"unknown modifier keys: {', '.join(unknown)}", value=unknown)

        kwargs: dict[str, Any] = {
            "rate_plans": plans,
            "commission_rates": dict(raw_commissions),
            "modifiers": ModifierRates(**raw_modifiers),
        }
        if "default_commission_rate" in data:
            kwargs["default_commission_rate"] = data["default_commission_rate"]
        if "minor_unit_places" in data:
            kwargs["minor_unit_places"] = data["minor_unit_places"]
        return cls(**kwargs)


def load_pricing_config(path: str | Path, *, default_currency: str = "USD") -> PricingConfig:
    """Read a JSON pricing document from ``path``."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise InvalidPricingConfig(f"cannot read pricing config {p}: {exc}", value=str(p)) from exc
    except json.JSONDecodeError as exc:
        raise InvalidPricingConfig(f"pricing config {p} is not valid JSON: {exc}", value=str(p)) from exc
    config = PricingConfig.from_mapping(data, default_currency=default_currency)
    logger.info(
        "Loaded pricing config from %s",
        p,
        extra={"service_types": [s.value for s in config.rate_plans]},
    )
    return config


def _usd(unit: BillingUnit, rate: str, minimum: str) -> RatePlan:
    return RatePlan(unit=unit, rate=Decimal(rate), minimum=Decimal(minimum), currency="USD")


DEFAULT_RATE_PLANS: Mapping[ServiceType, RatePlan] = MappingProxyType(
    {
        ServiceType.PHONE_INTERPRETATION: _usd(BillingUnit.MINUTE, "2.50", "10"),
        ServiceType.VIDEO_INTERPRETATION: _usd(BillingUnit.MINUTE, "3.00", "15"),
        ServiceType.IN_PERSON_GENERAL: _usd(BillingUnit.HOUR, "75.00", "2"),
        ServiceType.IN_PERSON_LEGAL: _usd(BillingUnit.HOUR, "95.00", "2"),
        ServiceType.IN_PERSON_MEDICAL: _usd(BillingUnit.HOUR, "90.00", "2"),
        ServiceType.AI_AVATAR: _usd(BillingUnit.MINUTE, "1.50", "1"),
        ServiceType.DOCUMENT_TRANSLATION: _usd(BillingUnit.WORD, "0.12", "50"),
    }
)

# in_person_general has no entry and is priced at the default commission.
DEFAULT_COMMISSION_RATES: Mapping[ServiceType, Decimal] = MappingProxyType(
    {
        ServiceType.PHONE_INTERPRETATION: Decimal("0.20"),
        ServiceType.VIDEO_INTERPRETATION: Decimal("0.20"),
        ServiceType.IN_PERSON_LEGAL: Decimal("0.25"),
        ServiceType.IN_PERSON_MEDICAL: Decimal("0.25"),
        ServiceType.AI_AVATAR: Decimal("0.15"),  # lower due to automation
        ServiceType.DOCUMENT_TRANSLATION: Decimal("0.30"),
    }
)

DEFAULT_PRICING_CONFIG = PricingConfig(
    rate_plans=DEFAULT_RATE_PLANS,
    commission_rates=DEFAULT_COMMISSION_RATES,
)
