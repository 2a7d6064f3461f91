"""
Projection insights — plain statements derived from the deterministic trajectory.

Translates the final year of the projection into the numbers a household reads first:
  "How much did compounding earn?"        → total growth vs total contributed
  "What does inflation take?"             → nominal - real, purchasing power erosion
  "Is the plan underwater?"               → negative net worth anywhere on the horizon
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from core.schema import Trajectory


@dataclass
class ProjectionInsights:
    """Structured summary of one deterministic projection."""
    horizon_years: int

    final_net_worth_nominal: float
    final_net_worth_real: float
    total_contributed: float
    total_growth: float

    inflation_impact: float                 # nominal - real at the horizon
    purchasing_power_erosion: Optional[float]  # 1 - real / nominal; None if nominal <= 0
    growth_to_contribution_ratio: Optional[float]  # None if nothing was contributed

    first_negative_year: Optional[int]
    debt_at_horizon: float

    flags: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a display-friendly table."""
        rows = [
            {"Metric": "Horizon", "Value": f"{self.horizon_years}", "Unit": "years"},
            {"Metric": "Final Net Worth (nominal)", "Value": f"{self.final_net_worth_nominal:,.0f}", "Unit": ""},
            {"Metric": "Final Net Worth (real)", "Value": f"{self.final_net_worth_real:,.0f}", "Unit": ""},
            {"Metric": "Total Contributed", "Value": f"{self.total_contributed:,.0f}", "Unit": ""},
            {"Metric": "Total Growth", "Value": f"{self.total_growth:,.0f}", "Unit": ""},
            {"Metric": "Inflation Impact", "Value": f"{self.inflation_impact:,.0f}", "Unit": ""},
            {
                "Metric": "Purchasing Power Erosion",
                "Value": f"{self.purchasing_power_erosion:.0%}" if self.purchasing_power_erosion is not None else "N/A",
                "Unit": "",
            },
            {
                "Metric": "Growth / Contributions",
                "Value": f"{self.growth_to_contribution_ratio:.0%}" if self.growth_to_contribution_ratio is not None else "N/A",
                "Unit": "",
            },
            {"Metric": "Debt at Horizon", "Value": f"{self.debt_at_horizon:,.0f}", "Unit": ""},
        ]
        if self.flags:
            rows.append({"Metric": "FLAGS", "Value": " | ".join(self.flags), "Unit": ""})
        return pd.DataFrame(rows)


def summarize_projection(trajectory: Trajectory) -> ProjectionInsights:
    """Derive ProjectionInsights from a trajectory produced by engine.project()."""
    final = trajectory.final
    nominal = final.net_worth_nominal
    real = final.net_worth_real

    erosion = 1.0 - real / nominal if nominal > 0 else None
    ratio = final.cumulative_growth / final.cumulative_contributed if final.cumulative_contributed > 0 else None

    first_negative = next((p.year for p in trajectory if p.net_worth_nominal < 0), None)

    flags = []
    if first_negative is not None:
        flags.append(f"NEGATIVE_NET_WORTH: net worth below zero from year {first_negative}")
    if ratio is not None and ratio > 1.0:
        flags.append("GROWTH_EXCEEDS_CONTRIBUTIONS: returns have out-earned contributions")
    if final.debt_balance > 0:
        flags.append(f"DEBT_OUTSTANDING: {final.debt_balance:,.0f} still owed at horizon")

    return ProjectionInsights(
        horizon_years=trajectory.horizon,
        final_net_worth_nominal=nominal,
        final_net_worth_real=real,
        total_contributed=final.cumulative_contributed,
        total_growth=final.cumulative_growth,
        inflation_impact=nominal - real,
        purchasing_power_erosion=erosion,
        growth_to_contribution_ratio=ratio,
        first_negative_year=first_negative,
        debt_at_horizon=final.debt_balance,
        flags=flags,
    )
