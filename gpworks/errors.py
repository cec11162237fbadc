"""
Domain errors raised by the computation core.

Every core function is pure: invalid input raises, it is never clamped.
The web/persistence layer turns these into form messages.
"""

import math
from typing import Optional


class ValidationError(ValueError):
    """Invalid input to the estimate/billing core."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class VerificationError(ValidationError):
    """A bill deduction was verified twice."""


def require_non_negative(value, field: str) -> float:
    """Coerce to float and reject negatives, non-numbers and inf/NaN."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValidationError(f"expected a number, got {value!r}", field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"expected a number, got {value!r}", field)
    if not math.isfinite(number):
        raise ValidationError(f"expected a finite number, got {value!r}", field)
    if number < 0:
        raise ValidationError(f"must not be negative (got {number})", field)
    return number
