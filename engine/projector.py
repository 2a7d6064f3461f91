"""
Deterministic projector — one nominal/real net-worth trajectory at a fixed return.

Yearly update (years 1..projection_years), in this order:
  1. Investment growth on the PRE-contribution balance, then add the year's
     contributions (contributions earn nothing in the year they are made)
  2. Cash grows by leftover income (only when net income is known)
  3. Debt amortizes by the annual payment, never below 0
  4. Net worth = cash + physical assets + investments - debt (may go negative)
  5. Real net worth = nominal / (1 + inflation)^year

Physical assets are held flat; there is no appreciation model.
"""

from __future__ import annotations

import logging
from typing import List

from core.schema import ProjectionInputs, Trajectory, YearPoint
from core.utils import deflate, ensure_finite
from data_prep.validators import ensure_valid

logger = logging.getLogger(__name__)


def amortize(debt: float, annual_payment: float) -> float:
    """Apply one year of payments. Lands on exactly 0, never below."""
    if debt <= 0:
        return 0.0
    payment = min(debt, annual_payment)
    return max(0.0, debt - payment)


def project(inputs: ProjectionInputs, *, log_warnings: bool = True) -> Trajectory:
    """
    Run the deterministic projection.

    Parameters
    ----------
    inputs : ProjectionInputs
        Validated up front; InvalidInputError is raised before any year is computed.
    log_warnings : bool
        Log degenerate-assumption warnings. Callers that already logged them pass False.

    Returns
    -------
    Trajectory with projection_years + 1 points (year 0 = today).

    Raises
    ------
    InvalidInputError
        Negative balances/flows, projection_years < 1, negative volatility, ...
    NumericOverflowError
        Compounding left the finite float range.
    """
    ensure_valid(inputs, log_warnings=log_warnings)

    r = inputs.expected_annual_return
    annual_contribution = inputs.annual_contribution
    annual_debt_payment = inputs.annual_debt_payment
    annual_saving = inputs.annual_saving
    physical = inputs.current_physical_assets

    cash = inputs.current_cash
    investments = inputs.current_investments
    debt = inputs.current_debt
    contributed = 0.0
    total_growth = 0.0

    start = cash + physical + investments - debt
    points: List[YearPoint] = [
        YearPoint(
            year=0,
            age=inputs.current_age,
            net_worth_nominal=start,
            net_worth_real=start,
            investments_balance=investments,
            debt_balance=debt,
            cumulative_contributed=0.0,
            cumulative_growth=0.0,
        )
    ]

    for y in range(1, inputs.projection_years + 1):
        growth = investments * r
        investments = investments + growth + annual_contribution

        cash += annual_saving
        debt = amortize(debt, annual_debt_payment)

        contributed += annual_contribution
        total_growth += growth

        nominal = ensure_finite(cash + physical + investments - debt, "Net worth", year=y)
        real = deflate(nominal, inputs.inflation_rate, y)

        points.append(
            YearPoint(
                year=y,
                age=inputs.current_age + y,
                net_worth_nominal=nominal,
                net_worth_real=ensure_finite(real, "Real net worth", year=y),
                investments_balance=investments,
                debt_balance=debt,
                cumulative_contributed=contributed,
                cumulative_growth=ensure_finite(total_growth, "Cumulative growth", year=y),
            )
        )

    logger.debug(
        "Projected %d years: net worth %.2f -> %.2f (real %.2f)",
        inputs.projection_years, start, points[-1].net_worth_nominal, points[-1].net_worth_real,
    )
    return Trajectory(points=tuple(points))
