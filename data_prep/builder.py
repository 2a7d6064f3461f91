"""
Build ProjectionInputs from the shapes callers usually hold.

Account screens store recurring amounts at mixed frequencies and show
assumptions as percentages (7 for 7%). The engine wants monthly amounts and
fractions; these helpers do that conversion and nothing else.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from core.schema import ProjectionInputs
from core.utils import age_on

Number = Union[int, float]

_FREQUENCY_ALIASES: Dict[str, str] = {
    "monthly": "monthly",
    "month": "monthly",
    "m": "monthly",
    "quarterly": "quarterly",
    "quarter": "quarterly",
    "q": "quarterly",
    "yearly": "yearly",
    "annual": "yearly",
    "annually": "yearly",
    "year": "yearly",
    "y": "yearly",
}

_MONTHS_PER_PERIOD: Dict[str, int] = {
    "monthly": 1,
    "quarterly": 3,
    "yearly": 12,
}


def canonical_frequency(frequency: Optional[str]) -> str:
    """Normalize a frequency label; missing means monthly."""
    if frequency is None:
        return "monthly"
    key = str(frequency).strip().lower()
    try:
        return _FREQUENCY_ALIASES[key]
    except KeyError:
        raise ValueError(
            f"Unknown frequency {frequency!r}; expected one of {sorted(set(_FREQUENCY_ALIASES.values()))}."
        ) from None


def monthly_amount(amount: Number, frequency: Optional[str] = "monthly") -> float:
    """Convert a recurring amount to its monthly equivalent (yearly / 12, quarterly / 3)."""
    return float(amount) / _MONTHS_PER_PERIOD[canonical_frequency(frequency)]


def total_monthly(items: Iterable[Union[Mapping, Tuple[Number, str]]]) -> float:
    """
    Sum recurring items into one monthly figure.

    Items are either (amount, frequency) tuples or mappings with "amount" and
    optional "frequency" keys. Missing amounts count as 0.
    """
    total = 0.0
    for item in items:
        if isinstance(item, Mapping):
            amount = item.get("amount") or 0.0
            freq = item.get("frequency") or "monthly"
        else:
            amount, freq = item
        total += monthly_amount(amount, freq)
    return total


def inputs_from_percentages(
    *,
    current_cash: Number = 0.0,
    current_physical_assets: Number = 0.0,
    current_investments: Number = 0.0,
    current_debt: Number = 0.0,
    monthly_expenses: Number = 0.0,
    monthly_debt_payment: Number = 0.0,
    monthly_investment_contribution: Number = 0.0,
    monthly_net_income: Number = 0.0,
    expected_return_pct: Number = 7.0,
    inflation_pct: Number = 2.5,
    volatility_pct: Number = 15.0,
    withdrawal_rate_pct: Number = 4.0,
    projection_years: int = 30,
    retirement_age: int = 65,
    current_age: Optional[int] = None,
    birth_date: Optional[date] = None,
    as_of: Optional[date] = None,
) -> ProjectionInputs:
    """
    Build ProjectionInputs from percent-valued assumptions.

    Age comes from `current_age` or, failing that, from `birth_date` at the
    explicit `as_of` date. There is no "today" default: pass as_of.
    """
    if current_age is None:
        if birth_date is None:
            current_age = 0
        elif as_of is None:
            raise ValueError("birth_date requires an explicit as_of date.")
        else:
            current_age = age_on(birth_date, as_of)

    return ProjectionInputs(
        current_cash=float(current_cash),
        current_physical_assets=float(current_physical_assets),
        current_investments=float(current_investments),
        current_debt=float(current_debt),
        monthly_expenses=float(monthly_expenses),
        monthly_debt_payment=float(monthly_debt_payment),
        monthly_investment_contribution=float(monthly_investment_contribution),
        monthly_net_income=float(monthly_net_income),
        expected_annual_return=float(expected_return_pct) / 100.0,
        inflation_rate=float(inflation_pct) / 100.0,
        volatility=float(volatility_pct) / 100.0,
        projection_years=int(projection_years),
        current_age=int(current_age),
        retirement_age=int(retirement_age),
        safe_withdrawal_rate=float(withdrawal_rate_pct) / 100.0,
    )
