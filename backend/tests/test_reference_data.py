import pytest

from app.services import reference_data
from app.services.pricing_errors import UnknownLanguage


def test_get_language_is_case_insensitive():
    lang = reference_data.get_language(" ES-MX ")
    assert lang.name == "Spanish (Mexican)"
    assert lang.tier == "primary"
    assert lang.interpreters_available == 15
    assert "legal" in lang.specialties


def test_unknown_language():
    with pytest.raises(UnknownLanguage) as exc:
        reference_data.get_language("klingon")
    assert exc.value.field_errors == {"language": "unsupported"}


def test_planned_languages_are_not_bookable():
    assert reference_data.is_bookable_language("es-gt")
    assert not reference_data.is_bookable_language("pt-br")
    assert not reference_data.is_bookable_language("fr")
    assert not reference_data.is_bookable_language("de")
    assert reference_data.get_language("pt-br").target_launch == "Q3_2024"


def test_list_languages_orders_by_priority():
    active = reference_data.list_languages()
    assert [lang.code for lang in active] == ["es-mx", "es-us", "es-co", "es-gt", "es-sv"]
    everything = reference_data.list_languages(include_planned=True)
    assert len(everything) == len(reference_data.LANGUAGES)
    assert [lang.code for lang in everything][-2:] == ["fr", "pt-br"]


def test_client_workflow_steps_are_sequential():
    steps = reference_data.get_workflow("client_flow")
    assert [s.step for s in steps] == [1, 2, 3, 4, 5]
    assert steps[0].required_fields == ("service_type", "language_pair", "specialty")
    assert steps[3].options["fallback"] == "manual_assignment"


def test_rush_workflow_falls_back_to_avatar():
    steps = reference_data.get_workflow("rush_flow")
    assert len(steps) == 3
    assert steps[1].options["fallback"] == "ai_avatar_offer"


def test_unknown_workflow():
    with pytest.raises(reference_data.UnknownWorkflow):
        reference_data.get_workflow("vip_flow")


def test_onboarding_phases():
    phases = reference_data.onboarding_phases()
    assert [p.name for p in phases] == [
        "application",
        "assessment",
        "training",
        "voice_recording",
        "activation",
    ]
    assessment = phases[1].as_dict()
    assert assessment["requirements"]["language_test"]["passing_score"] == 85
    assert assessment["requirements"]["language_test"]["includes"] == [
        "sight_translation",
        "consecutive",
        "simultaneous",
    ]
