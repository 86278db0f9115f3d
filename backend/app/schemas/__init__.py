from .pricing import (
    QuoteEstimateIn,
    QuoteEstimateOut,
    QuoteBreakdown,
    RatePlanOut,
    PricingRatesOut,
    LanguageOut,
    WorkflowStepOut,
    OnboardingPhaseOut,
)
