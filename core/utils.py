from __future__ import annotations

import math

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from .errors import NumericOverflowError

DAYS_PER_YEAR = 365.25


def deflate(nominal: float, inflation_rate: float, year: int) -> float:
    """Express a year-`year` amount in year-0 purchasing power."""
    try:
        factor = (1.0 + inflation_rate) ** year
    except OverflowError:
        raise NumericOverflowError(
            f"Inflation factor (1 + {inflation_rate})^{year} overflows.", year=year
        ) from None
    if factor == 0.0:
        raise NumericOverflowError(
            f"Inflation factor (1 + {inflation_rate})^{year} underflows to 0.", year=year
        )
    return nominal / factor


def ensure_finite(value: float, what: str, *, year: int | None = None) -> float:
    if not math.isfinite(value):
        where = f" at year {year}" if year is not None else ""
        raise NumericOverflowError(f"{what} is not finite{where} ({value!r}).", year=year)
    return value


def ensure_finite_array(values: np.ndarray, what: str) -> np.ndarray:
    finite = np.isfinite(values)
    if not finite.all():
        # first offending year (column) across all paths
        bad_year = int(np.argwhere(~finite)[:, -1].min())
        raise NumericOverflowError(f"{what} is not finite at year {bad_year}.", year=bad_year)
    return values


def year_fraction(start, end) -> float:
    """Elapsed years between two dates on a 365.25-day year."""
    s = pd.Timestamp(start)
    e = pd.Timestamp(end)
    return (e - s).days / DAYS_PER_YEAR


def age_on(birth_date, as_of) -> int:
    """Completed years of age at `as_of`."""
    b = pd.Timestamp(birth_date)
    a = pd.Timestamp(as_of)
    if a < b:
        raise ValueError(f"as_of {a.date()} is before birth date {b.date()}.")
    return relativedelta(a.to_pydatetime(), b.to_pydatetime()).years
