import json
import logging
from decimal import Decimal

import pytest

from app.services.pricing_config import (
    DEFAULT_PRICING_CONFIG,
    BillingUnit,
    ModifierRates,
    PricingConfig,
    RatePlan,
    ServiceType,
    load_pricing_config,
)
from app.services.pricing_errors import InvalidPricingConfig, UnknownServiceType


def test_every_service_type_has_a_rate_plan():
    for stype in ServiceType:
        plan = DEFAULT_PRICING_CONFIG.get_rate_plan(stype)
        assert plan.rate > 0
        assert plan.minimum >= 0
        assert plan.currency == "USD"


def test_rate_plan_lookup_by_string():
    plan = DEFAULT_PRICING_CONFIG.get_rate_plan("document_translation")
    assert plan == RatePlan(unit=BillingUnit.WORD, rate=Decimal("0.12"), minimum=Decimal("50"))


def test_rate_plan_unknown_service_type():
    with pytest.raises(UnknownServiceType):
        DEFAULT_PRICING_CONFIG.get_rate_plan("in_person_standard")


def test_commission_rates_from_table():
    cfg = DEFAULT_PRICING_CONFIG
    assert cfg.get_commission_rate("phone_interpretation") == Decimal("0.20")
    assert cfg.get_commission_rate("in_person_legal") == Decimal("0.25")
    assert cfg.get_commission_rate("in_person_medical") == Decimal("0.25")
    assert cfg.get_commission_rate("ai_avatar") == Decimal("0.15")
    assert cfg.get_commission_rate("document_translation") == Decimal("0.30")


def test_commission_falls_back_to_default(caplog):
    caplog.set_level(logging.DEBUG, logger="app.services.pricing_config")
    assert ServiceType.IN_PERSON_GENERAL not in DEFAULT_PRICING_CONFIG.commission_rates
    rate = DEFAULT_PRICING_CONFIG.get_commission_rate(ServiceType.IN_PERSON_GENERAL)
    assert rate == DEFAULT_PRICING_CONFIG.default_commission_rate == Decimal("0.20")
    assert any("in_person_general" in r.getMessage() for r in caplog.records)


def test_commission_unknown_service_type():
    with pytest.raises(UnknownServiceType):
        DEFAULT_PRICING_CONFIG.get_commission_rate("emergency_services")


def test_custom_default_commission_rate():
    cfg = PricingConfig(
        rate_plans={ServiceType.AI_AVATAR: RatePlan(unit="minute", rate="1.50", minimum="1")},
        commission_rates={},
        default_commission_rate="0.12",
    )
    assert cfg.get_commission_rate("ai_avatar") == Decimal("0.12")


def test_modifier_defaults():
    m = DEFAULT_PRICING_CONFIG.modifiers
    assert m.rush_multiplier == Decimal("1.5")
    assert m.after_hours_multiplier == Decimal("1.25")
    assert m.holiday_multiplier == Decimal("2.0")
    assert m.free_travel_radius_miles == Decimal("25")
    assert m.travel_rate_per_mile == Decimal("0.65")


def test_travel_eligibility():
    cfg = DEFAULT_PRICING_CONFIG
    assert cfg.is_travel_eligible("in_person_general")
    assert cfg.is_travel_eligible(ServiceType.IN_PERSON_MEDICAL)
    assert not cfg.is_travel_eligible("phone_interpretation")
    assert not cfg.is_travel_eligible("document_translation")


def test_config_tables_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_PRICING_CONFIG.rate_plans[ServiceType.AI_AVATAR] = None  # type: ignore[index]
    with pytest.raises(TypeError):
        DEFAULT_PRICING_CONFIG.commission_rates[ServiceType.IN_PERSON_GENERAL] = Decimal("0.5")  # type: ignore[index]
    with pytest.raises(AttributeError):
        DEFAULT_PRICING_CONFIG.default_commission_rate = Decimal("0.5")  # type: ignore[misc]


def test_rate_plan_rejects_bad_values():
    with pytest.raises(InvalidPricingConfig):
        RatePlan(unit="minute", rate="0", minimum="10")
    with pytest.raises(InvalidPricingConfig):
        RatePlan(unit="minute", rate="2.50", minimum="-1")
    with pytest.raises(InvalidPricingConfig):
        RatePlan(unit="second", rate="2.50", minimum="1")
    with pytest.raises(InvalidPricingConfig):
        RatePlan(unit="minute", rate="NaN", minimum="1")
    with pytest.raises(InvalidPricingConfig):
        RatePlan(unit="minute", rate="2.50", minimum="1", currency="dollars")


def test_commission_rate_must_be_a_fraction():
    plan = RatePlan(unit="hour", rate="75", minimum="2")
    for bad in ("0", "1", "1.2", "-0.1"):
        with pytest.raises(InvalidPricingConfig):
            PricingConfig(
                rate_plans={ServiceType.IN_PERSON_GENERAL: plan},
                commission_rates={ServiceType.IN_PERSON_GENERAL: bad},
            )


def test_modifier_rates_validation():
    with pytest.raises(InvalidPricingConfig):
        ModifierRates(rush_multiplier=Decimal("0"))
    with pytest.raises(InvalidPricingConfig):
        ModifierRates(travel_rate_per_mile=Decimal("-0.65"))


def test_as_dict_shape():
    data = DEFAULT_PRICING_CONFIG.as_dict()
    assert data["rate_plans"]["phone_interpretation"] == {
        "unit": "minute",
        "rate": "2.50",
        "minimum": "10",
        "currency": "USD",
    }
    assert "in_person_general" not in data["commission_rates"]
    assert data["default_commission_rate"] == "0.20"
    assert data["modifiers"]["travel_rate_per_mile"] == "0.65"
    assert data["minor_unit_places"] == 2


def test_from_mapping_rebuilds_default_tables():
    rebuilt = PricingConfig.from_mapping(json.loads(json.dumps(DEFAULT_PRICING_CONFIG.as_dict())))
    assert dict(rebuilt.rate_plans) == dict(DEFAULT_PRICING_CONFIG.rate_plans)
    assert dict(rebuilt.commission_rates) == dict(DEFAULT_PRICING_CONFIG.commission_rates)
    assert rebuilt.modifiers == DEFAULT_PRICING_CONFIG.modifiers


def test_from_mapping_uses_default_currency_and_modifiers():
    cfg = PricingConfig.from_mapping(
        {
            "rate_plans": {"video_interpretation": {"unit": "minute", "rate": 4, "minimum": 10}},
            "commission_rates": {"video_interpretation": 0.22},
        },
        default_currency="CAD",
    )
    plan = cfg.get_rate_plan("video_interpretation")
    assert plan.currency == "CAD"
    assert plan.rate == Decimal("4")
    assert cfg.get_commission_rate("video_interpretation") == Decimal("0.22")
    assert cfg.modifiers == ModifierRates()


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(InvalidPricingConfig):
        PricingConfig.from_mapping({"rate_plans": {"sign_language": {"unit": "hour", "rate": 80}}})
    with pytest.raises(InvalidPricingConfig):
        PricingConfig.from_mapping(
            {
                "rate_plans": {"ai_avatar": {"unit": "minute", "rate": 1.5}},
                "commission_rates": {"rush_services": 0.35},
            }
        )
    with pytest.raises(InvalidPricingConfig):
        PricingConfig.from_mapping(
            {
                "rate_plans": {"ai_avatar": {"unit": "minute", "rate": 1.5}},
                "modifiers": {"weekend_multiplier": 1.1},
            }
        )
    with pytest.raises(InvalidPricingConfig):
        PricingConfig.from_mapping({"rate_plans": {}})


def test_load_pricing_config_from_file(tmp_path):
    path = tmp_path / "pricing.json"
    path.write_text(
        json.dumps(
            {
                "rate_plans": {"phone_interpretation": {"unit": "minute", "rate": "3.10", "minimum": "5"}},
                "commission_rates": {"phone_interpretation": "0.18"},
                "modifiers": {"rush_multiplier": "1.75"},
            }
        )
    )
    cfg = load_pricing_config(path)
    assert cfg.get_rate_plan("phone_interpretation").rate == Decimal("3.10")
    assert cfg.modifiers.rush_multiplier == Decimal("1.75")
    assert cfg.modifiers.holiday_multiplier == Decimal("2.0")


def test_load_pricing_config_bad_json(tmp_path):
    path = tmp_path / "pricing.json"
    path.write_text("{not json")
    with pytest.raises(InvalidPricingConfig):
        load_pricing_config(path)


def test_load_pricing_config_missing_file(tmp_path):
    with pytest.raises(InvalidPricingConfig):
        load_pricing_config(tmp_path / "missing.json")
