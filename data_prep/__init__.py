"""
Data preparation — turning caller-side amounts into ProjectionInputs, and validation.
"""

from .builder import (
    canonical_frequency,
    monthly_amount,
    total_monthly,
    inputs_from_percentages,
)
from .validators import ValidationResult, validate_inputs, ensure_valid

__all__ = [
    "canonical_frequency",
    "monthly_amount",
    "total_monthly",
    "inputs_from_percentages",
    "ValidationResult",
    "validate_inputs",
    "ensure_valid",
]
