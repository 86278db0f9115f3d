"""Static business tables: language tiers, booking workflows, onboarding.

Pure reference data consumed by the booking UI and by request validation
(e.g. checking that a quoted language is actually offered). Everything here
is immutable for the lifetime of the process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .pricing_errors import UnknownLanguage

ACTIVE = "active"
PLANNED = "planned"


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    tier: str
    priority: int
    interpreters_available: int = 0
    specialties: tuple[str, ...] = ()
    status: str = ACTIVE
    target_launch: str | None = None

    @property
    def is_bookable(self) -> bool:
        return self.status == ACTIVE

    def as_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "tier": self.tier,
            "priority": self.priority,
            "interpreters_available": self.interpreters_available,
            "specialties": list(self.specialties),
            "status": self.status,
            "target_launch": self.target_launch,
        }


@dataclass(frozen=True)
class WorkflowStep:
    step: int
    name: str
    description: str
    required_fields: tuple[str, ...] = ()
    optional_fields: tuple[str, ...] = ()
    # Free-form flags such as max_wait_time, fallback or notifications.
    options: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "name": self.name,
            "description": self.description,
            "required_fields": list(self.required_fields),
            "optional_fields": list(self.optional_fields),
            "options": dict(self.options),
        }


@dataclass(frozen=True)
class OnboardingPhase:
    phase: int
    name: str
    requirements: Mapping[str, Any]

    def as_dict(self) -> dict[str, Any]:
        return {"phase": self.phase, "name": self.name, "requirements": _plain(self.requirements)}


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    return value


class UnknownWorkflow(KeyError):
    pass


LANGUAGES: tuple[Language, ...] = (
    # Tier 1: always available
    Language("es-mx", "Spanish (Mexican)", "primary", 1, 15, ("legal", "medical", "business", "general")),
    Language("es-us", "Spanish (US Regional)", "primary", 1, 12, ("legal", "medical", "business", "general")),
    # Tier 2: regional Spanish
    Language("es-gt", "Spanish (Guatemalan)", "secondary", 2, 8, ("general", "medical", "human_services")),
    Language("es-sv", "Spanish (Salvadoran)", "secondary", 2, 6, ("general", "legal", "human_services")),
    Language("es-co", "Spanish (Colombian)", "secondary", 2, 5, ("general", "business")),
    # Tier 3: future expansion
    Language("pt-br", "Portuguese (Brazilian)", "expansion", 3, status=PLANNED, target_launch="Q3_2024"),
    Language("fr", "French", "expansion", 3, status=PLANNED, target_launch="Q4_2024"),
)

_LANGUAGES_BY_CODE: Mapping[str, Language] = {lang.code: lang for lang in LANGUAGES}


def get_language(code: str) -> Language:
    key = (code or "").strip().lower()
    lang = _LANGUAGES_BY_CODE.get(key)
    if lang is None:
        raise UnknownLanguage(f"Unsupported language: {code!r}", value=code)
    return lang


def is_bookable_language(code: str) -> bool:
    try:
        return get_language(code).is_bookable
    except UnknownLanguage:
        return False


def list_languages(include_planned: bool = False) -> list[Language]:
    langs = [lang for lang in LANGUAGES if include_planned or lang.is_bookable]
    return sorted(langs, key=lambda lang: (lang.priority, lang.code))


BOOKING_WORKFLOWS: Mapping[str, tuple[WorkflowStep, ...]] = {
    "client_flow": (
        WorkflowStep(
            1,
            "service_selection",
            "Choose service type and specialty",
            ("service_type", "language_pair", "specialty"),
            options={"estimated_time": "2 minutes"},
        ),
        WorkflowStep(
            2,
            "scheduling",
            "Select date, time, and duration",
            ("preferred_date", "preferred_time", "duration"),
            options={"auto_suggestions": True},
        ),
        WorkflowStep(
            3,
            "details",
            "Provide context and special requirements",
            ("context", "location_or_method"),
            ("special_requirements", "materials"),
        ),
        WorkflowStep(
            4,
            "interpreter_assignment",
            "System matches and assigns interpreter",
            options={"automated": True, "fallback": "manual_assignment", "max_wait_time": "15 minutes"},
        ),
        WorkflowStep(
            5,
            "confirmation",
            "Final confirmation and payment processing",
            ("payment_method",),
            options={"notifications": ["email", "sms"]},
        ),
    ),
    # Express booking for <2 hour needs
    "rush_flow": (
        WorkflowStep(
            1,
            "immediate_request",
            "Express booking for <2 hour needs",
            ("service_type", "urgency_level"),
            options={"rush_fee": "automatic"},
        ),
        WorkflowStep(
            2,
            "instant_matching",
            "Immediate interpreter search",
            options={"max_wait_time": "5 minutes", "fallback": "ai_avatar_offer"},
        ),
        WorkflowStep(
            3,
            "express_confirmation",
            "Rapid confirmation process",
            options={"payment": "auto_charge", "notifications": "immediate"},
        ),
    ),
}


def get_workflow(name: str) -> tuple[WorkflowStep, ...]:
    try:
        return BOOKING_WORKFLOWS[name]
    except KeyError:
        raise UnknownWorkflow(name) from None


INTERPRETER_ONBOARDING: tuple[OnboardingPhase, ...] = (
    OnboardingPhase(
        1,
        "application",
        {
            "required_documents": (
                "resume_cv",
                "certification_copies",
                "references_list",
                "background_check_authorization",
                "language_proficiency_proof",
            ),
            "required_certifications": (
                "state_certification",
                "court_interpretation_cert",
                "medical_interpretation_cert",
                "continuing_education_credits",
            ),
            "experience_requirements": {
                "minimum_years": 2,
                "preferred_years": 5,
                "specialty_experience": "preferred",
            },
        },
    ),
    OnboardingPhase(
        2,
        "assessment",
        {
            "language_test": {
                "type": "oral_and_written",
                "duration": "90 minutes",
                "passing_score": 85,
                "includes": ("sight_translation", "consecutive", "simultaneous"),
            },
            "specialty_tests": {
                "legal": "terminology_and_procedure",
                "medical": "anatomy_and_terminology",
                "business": "financial_and_corporate_terms",
            },
        },
    ),
    OnboardingPhase(
        3,
        "training",
        {
            "modules": (
                "platform_navigation",
                "booking_system_usage",
                "client_communication_protocols",
                "technical_setup_video_calls",
                "ai_avatar_collaboration",
                "confidentiality_requirements",
            ),
            "duration": "8 hours",
            "completion_required": True,
        },
    ),
    OnboardingPhase(
        4,
        "voice_recording",
        {
            "required_samples": (
                "common_phrases_150",
                "legal_terminology_100",
                "medical_terminology_100",
                "business_phrases_75",
                "conversational_samples_200",
            ),
            "quality_requirements": {
                "format": "WAV 44.1kHz 16-bit",
                "environment": "quiet_studio_quality",
                "duration_per_sample": "2-10 seconds",
            },
        },
    ),
    OnboardingPhase(
        5,
        "activation",
        {
            "background_check": "required",
            "reference_verification": "required",
            "trial_assignments": 3,
            "probation_period": "30 days",
            "full_activation": "after_successful_probation",
        },
    ),
)


def onboarding_phases() -> tuple[OnboardingPhase, ...]:
    return INTERPRETER_ONBOARDING
