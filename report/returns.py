"""
Annualized return helpers for holdings.

Two measures:
  annualized_return — single purchase, single current value: (value / cost)^(1 / years) - 1
  xirr              — any dated cash-flow series: the rate r solving Σ a_i / (1 + r)^t_i = 0

Both take the valuation date explicitly; nothing here reads the wall clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

import numpy as np
from scipy import optimize

from core.utils import year_fraction

logger = logging.getLogger(__name__)

# Below ~4 days a holding is too recent to annualize meaningfully.
MIN_YEARS_TO_ANNUALIZE = 0.01

# brentq search interval for xirr when Newton fails to converge
XIRR_BRACKET = (-0.9999, 10.0)


@dataclass(frozen=True)
class CashFlow:
    """Negative amount = money in (purchase), positive = money out (sale / current value)."""
    when: date
    amount: float


def holding_period_years(purchase_date, as_of) -> float:
    return year_fraction(purchase_date, as_of)


def annualized_return(cost: float, value: float, years: float) -> Optional[float]:
    """
    Compound annual growth rate of a single-cashflow holding.

    Returns None when it cannot be annualized: cost <= 0, value / cost <= 0,
    or the holding is younger than MIN_YEARS_TO_ANNUALIZE.
    """
    if cost <= 0:
        return None
    if years < MIN_YEARS_TO_ANNUALIZE:
        return None
    ratio = value / cost
    if ratio <= 0:
        return None
    return ratio ** (1.0 / years) - 1.0


def holding_annualized_return(
    *,
    quantity: float,
    purchase_price: float,
    current_price: float,
    purchase_date,
    as_of,
) -> Optional[float]:
    """annualized_return for a position bought once at purchase_price."""
    cost = quantity * purchase_price
    value = quantity * current_price
    return annualized_return(cost, value, holding_period_years(purchase_date, as_of))


def xirr(cash_flows: Sequence[CashFlow], guess: float = 0.1) -> Optional[float]:
    """
    Money-weighted annualized return of dated cash flows.

    Needs at least two flows with both signs. Newton's method from `guess`
    first, then a bracketed search; None when no rate in the bracket zeroes
    the net present value.
    """
    if len(cash_flows) < 2:
        return None

    flows = sorted(cash_flows, key=lambda cf: cf.when)
    amounts = np.array([cf.amount for cf in flows], dtype=float)
    if not (amounts < 0).any() or not (amounts > 0).any():
        return None

    t0 = flows[0].when
    t = np.array([year_fraction(t0, cf.when) for cf in flows], dtype=float)

    def npv(rate: float) -> float:
        return float(np.sum(amounts / np.power(1.0 + rate, t)))

    def d_npv(rate: float) -> float:
        return float(np.sum(-t * amounts / np.power(1.0 + rate, t + 1.0)))

    try:
        with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
            rate = optimize.newton(npv, guess, fprime=d_npv, tol=1e-10, maxiter=100)
        if np.isfinite(rate) and rate > -1.0 and abs(npv(rate)) < 1e-6 * max(1.0, np.abs(amounts).sum()):
            return float(rate)
    except (RuntimeError, ZeroDivisionError, OverflowError):
        logger.debug("xirr: Newton did not converge from guess %s, trying bracket", guess)

    lo, hi = XIRR_BRACKET
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        f_lo, f_hi = npv(lo), npv(hi)
    if not (np.isfinite(f_lo) and np.isfinite(f_hi)) or f_lo * f_hi > 0:
        return None
    return float(optimize.brentq(npv, lo, hi, xtol=1e-12))
