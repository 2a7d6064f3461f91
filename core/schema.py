"""
Data model shared by the projector, the simulator and the report layer.

Everything here is immutable: inputs are built once per run and results are
read-only once produced. Monetary values are plain floats in the caller's
currency; rates are fractions (0.07, not 7).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

# Fields that must be non-negative.
MONETARY_FIELDS: Tuple[str, ...] = (
    "current_cash",
    "current_physical_assets",
    "current_investments",
    "current_debt",
    "monthly_expenses",
    "monthly_debt_payment",
    "monthly_investment_contribution",
    "monthly_net_income",
)


@dataclass(frozen=True)
class ProjectionInputs:
    """
    Flat, already-aggregated household numbers plus economic assumptions.

    The engine does not know where these came from (brokerage holdings, income
    schedules, loan statements...). Build one with data_prep.builder if the
    numbers arrive as percentages or mixed-frequency amounts.
    """

    # balances
    current_cash: float = 0.0
    current_physical_assets: float = 0.0
    current_investments: float = 0.0
    current_debt: float = 0.0

    # monthly flows
    monthly_expenses: float = 0.0
    monthly_debt_payment: float = 0.0
    monthly_investment_contribution: float = 0.0
    monthly_net_income: float = 0.0  # 0 = savings flow unknown, cash never grows

    # assumptions
    expected_annual_return: float = 0.07
    inflation_rate: float = 0.025
    volatility: float = 0.15
    projection_years: int = 30

    # retirement regime (simulator only)
    current_age: int = 0
    retirement_age: int = 65
    safe_withdrawal_rate: float = 0.04

    @property
    def retirement_year_offset(self) -> int:
        return max(0, int(self.retirement_age) - int(self.current_age))

    @property
    def annual_contribution(self) -> float:
        return self.monthly_investment_contribution * 12

    @property
    def annual_debt_payment(self) -> float:
        return self.monthly_debt_payment * 12

    @property
    def annual_saving(self) -> float:
        """Leftover income added to cash each working year; 0 when income is unknown."""
        if self.monthly_net_income <= 0:
            return 0.0
        leftover = (
            self.monthly_net_income
            - self.monthly_expenses
            - self.monthly_investment_contribution
            - self.monthly_debt_payment
        )
        return max(0.0, leftover * 12)

    @property
    def starting_net_worth(self) -> float:
        return (
            self.current_cash
            + self.current_physical_assets
            + self.current_investments
            - self.current_debt
        )

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class YearPoint:
    """One year of the deterministic projection. Year 0 is today's snapshot."""
    year: int
    age: int
    net_worth_nominal: float
    net_worth_real: float
    investments_balance: float
    debt_balance: float
    cumulative_contributed: float
    cumulative_growth: float


@dataclass(frozen=True)
class Trajectory:
    """Year-indexed sequence of YearPoint, length projection_years + 1."""

    points: Tuple[YearPoint, ...]

    def __post_init__(self):
        for i, p in enumerate(self.points):
            if p.year != i:
                raise ValueError(f"Trajectory point {i} has year={p.year}; points must be indexed by year.")

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[YearPoint]:
        return iter(self.points)

    def __getitem__(self, year: int) -> YearPoint:
        return self.points[year]

    @property
    def horizon(self) -> int:
        return len(self.points) - 1

    @property
    def final(self) -> YearPoint:
        return self.points[-1]

    @property
    def net_worth_nominal(self) -> np.ndarray:
        return np.array([p.net_worth_nominal for p in self.points], dtype=float)

    @property
    def net_worth_real(self) -> np.ndarray:
        return np.array([p.net_worth_real for p in self.points], dtype=float)

    @property
    def debt(self) -> np.ndarray:
        return np.array([p.debt_balance for p in self.points], dtype=float)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "year": p.year,
                    "age": p.age,
                    "net_worth_nominal": p.net_worth_nominal,
                    "net_worth_real": p.net_worth_real,
                    "investments": p.investments_balance,
                    "debt": p.debt_balance,
                    "cumulative_contributed": p.cumulative_contributed,
                    "cumulative_growth": p.cumulative_growth,
                }
                for p in self.points
            ]
        )


@dataclass(frozen=True)
class Milestone:
    target_net_worth: float
    year_reached: Optional[int]
    age_reached: Optional[int] = None

    @property
    def reached(self) -> bool:
        return self.year_reached is not None


def percentile_label(q: float) -> str:
    """0.1 -> 'p10', 0.5 -> 'p50'."""
    return f"p{int(round(q * 100)):02d}"


@dataclass(frozen=True, eq=False)
class SimulationPercentiles:
    """
    Fan-chart bands: one row per year, one column per percentile level.

    Each column is computed independently across paths at that year, so the
    p50 column is NOT a simulated path and should not be drawn as one.
    """

    levels: Tuple[float, ...]
    values: np.ndarray  # shape (projection_years + 1, len(levels))
    n_paths: int

    @property
    def years(self) -> np.ndarray:
        return np.arange(self.values.shape[0])

    @property
    def labels(self) -> List[str]:
        return [percentile_label(q) for q in self.levels]

    def __getitem__(self, label: str) -> np.ndarray:
        try:
            col = self.labels.index(label)
        except ValueError:
            raise KeyError(f"No percentile column {label!r}; available: {self.labels}") from None
        return self.values[:, col]

    @property
    def p10(self) -> np.ndarray:
        return self["p10"]

    @property
    def p25(self) -> np.ndarray:
        return self["p25"]

    @property
    def p50(self) -> np.ndarray:
        return self["p50"]

    @property
    def p75(self) -> np.ndarray:
        return self["p75"]

    @property
    def p90(self) -> np.ndarray:
        return self["p90"]

    def band(self, year: int) -> Dict[str, float]:
        row = {"year": int(year)}
        row.update({lab: float(v) for lab, v in zip(self.labels, self.values[year])})
        return row

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame(self.values, columns=self.labels)
        df.insert(0, "year", self.years)
        return df
