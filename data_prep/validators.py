"""
Validation for projection inputs before they enter the engine.

Catches problems early:
- Negative balances or monthly flows
- A zero or negative horizon
- Negative volatility or withdrawal rate
- Rates that look like percentages instead of fractions (warning only)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from core.config import PLAUSIBLE_RETURN_RANGE, PLAUSIBLE_VOLATILITY_MAX
from core.errors import InvalidInputError
from core.schema import MONETARY_FIELDS, ProjectionInputs

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for one set of inputs."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_inputs(
    inputs: ProjectionInputs,
    *,
    n_paths: Optional[int] = None,
) -> ValidationResult:
    """
    Run all checks on a ProjectionInputs record.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    Pass n_paths when the stochastic branch will run.
    """
    result = ValidationResult()

    # --- Non-finite numbers poison everything downstream ---
    for name, value in inputs.to_dict().items():
        if isinstance(value, (int, float)) and not math.isfinite(value):
            result.errors.append(f"{name} is not a finite number ({value!r}).")
    if result.errors:
        return result

    # --- Balances and flows ---
    for name in MONETARY_FIELDS:
        value = getattr(inputs, name)
        if value < 0:
            result.errors.append(f"{name} must be >= 0, got {value}.")

    # --- Horizon ---
    years = inputs.projection_years
    if isinstance(years, bool) or not isinstance(years, (int, np.integer)):
        result.errors.append(f"projection_years must be an integer, got {years!r}.")
    elif inputs.projection_years < 1:
        result.errors.append(f"projection_years must be >= 1, got {inputs.projection_years}.")

    if n_paths is not None and n_paths < 1:
        result.errors.append(f"n_paths must be >= 1, got {n_paths}.")

    # --- Assumptions ---
    if inputs.volatility < 0:
        result.errors.append(f"volatility must be >= 0, got {inputs.volatility}.")
    elif inputs.volatility > PLAUSIBLE_VOLATILITY_MAX:
        result.warnings.append(
            f"volatility {inputs.volatility} exceeds {PLAUSIBLE_VOLATILITY_MAX:.0%} — "
            f"check if it is in percent vs decimal form."
        )

    if inputs.safe_withdrawal_rate < 0:
        result.errors.append(f"safe_withdrawal_rate must be >= 0, got {inputs.safe_withdrawal_rate}.")
    elif inputs.safe_withdrawal_rate > 1.0:
        result.warnings.append(
            f"safe_withdrawal_rate {inputs.safe_withdrawal_rate} withdraws more than the whole balance each year."
        )

    if inputs.inflation_rate <= -1.0:
        result.errors.append(f"inflation_rate must be > -1, got {inputs.inflation_rate}.")

    lo, hi = PLAUSIBLE_RETURN_RANGE
    if not lo <= inputs.expected_annual_return <= hi:
        result.warnings.append(
            f"expected_annual_return {inputs.expected_annual_return} is outside [{lo}, {hi}] — "
            f"check if it is in percent vs decimal form."
        )
    if inputs.inflation_rate > hi:
        result.warnings.append(f"inflation_rate {inputs.inflation_rate} looks like a percentage.")
    elif -1.0 < inputs.inflation_rate < lo:
        result.warnings.append(
            f"inflation_rate {inputs.inflation_rate} is below {lo}; real values may not be representable."
        )

    # --- Ages ---
    if inputs.current_age < 0:
        result.errors.append(f"current_age must be >= 0, got {inputs.current_age}.")
    if inputs.retirement_age < inputs.current_age:
        result.warnings.append(
            f"retirement_age {inputs.retirement_age} is below current_age {inputs.current_age}; "
            f"the simulator starts in drawdown."
        )

    return result


def ensure_valid(
    inputs: ProjectionInputs,
    *,
    n_paths: Optional[int] = None,
    log_warnings: bool = True,
) -> ValidationResult:
    """Raise InvalidInputError on any blocking problem; log the warnings otherwise."""
    result = validate_inputs(inputs, n_paths=n_paths)
    if not result.is_valid:
        raise InvalidInputError(result.summary())
    if log_warnings:
        for w in result.warnings:
            logger.warning("Degenerate assumption: %s", w)
    return result
