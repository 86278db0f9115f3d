"""Input-validation errors raised by the pricing layer.

All of these describe bad client input (or bad configuration data), never a
transient fault, so none of them is retryable. The HTTP layer maps every
``PricingError`` to a 400 using ``field`` and ``code`` as the field error.
"""

from __future__ import annotations


class PricingError(ValueError):
    field: str = "request"
    code: str = "invalid"

    def __init__(self, message: str, *, value: object = None) -> None:
        super().__init__(message)
        self.value = value

    @property
    def field_errors(self) -> dict[str, str]:
        return {self.field: self.code}


class UnknownServiceType(PricingError):
    field = "service_type"
    code = "unknown"


class InvalidQuantity(PricingError):
    field = "quantity"


class InvalidTravelDistance(PricingError):
    field = "travel_miles"


class UnknownLanguage(PricingError):
    field = "language"
    code = "unsupported"


class InvalidPricingConfig(PricingError):
    field = "pricing_config"


class InvalidModifier(PricingError):
    field = "modifiers"

    def __init__(self, message: str, *, field: str | None = None, value: object = None) -> None:
        super().__init__(message, value=value)
        if field is not None:
            self.field = field
