"""
Aggregate simulated paths into caller-facing distribution summaries.

The fan chart (engine.simulator.percentile_bands) answers "what range of net
worth should I expect in year y?". This module answers the horizon questions:
  "How likely is the plan to end with something left?" → P(terminal > 0)
  "What does a typical outcome look like?"            → mean / median terminal
  "How uncertain is it?"                              → P90 - P10 spread
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np
import pandas as pd

from engine.simulator import SimulatedPaths, percentile_bands


@dataclass(frozen=True)
class SimulationSummary:
    n_paths: int
    prob_positive_terminal: float
    mean_terminal: float
    median_terminal: float
    terminal_p10: float
    terminal_p90: float

    @property
    def terminal_spread(self) -> float:
        return self.terminal_p90 - self.terminal_p10

    def to_dict(self) -> Dict[str, float]:
        return {
            "n_paths": self.n_paths,
            "prob_positive_terminal": self.prob_positive_terminal,
            "mean_terminal": self.mean_terminal,
            "median_terminal": self.median_terminal,
            "terminal_p10": self.terminal_p10,
            "terminal_p90": self.terminal_p90,
            "terminal_spread": self.terminal_spread,
        }


def summarize_simulation(paths: SimulatedPaths) -> SimulationSummary:
    """
    Horizon statistics for one Monte Carlo run.

    Terminal P10/P90 use the same sort-and-index rule as the fan chart, so
    they match the last year of the default bands exactly.
    """
    terminal = paths.terminal_net_worth()
    if len(terminal) == 0:
        raise ValueError("No simulated paths to summarize.")

    bands = percentile_bands(terminal[:, np.newaxis], (0.10, 0.90))

    return SimulationSummary(
        n_paths=len(terminal),
        prob_positive_terminal=float(np.mean(terminal > 0)),
        mean_terminal=float(np.mean(terminal)),
        median_terminal=float(np.median(terminal)),
        terminal_p10=float(bands.p10[0]),
        terminal_p90=float(bands.p90[0]),
    )


def summary_table(summary: SimulationSummary) -> pd.DataFrame:
    """One row per statistic, for display."""
    return pd.DataFrame(
        [
            {"Metric": "Paths", "Value": f"{summary.n_paths}"},
            {"Metric": "P(Net Worth > 0 at horizon)", "Value": f"{summary.prob_positive_terminal:.1%}"},
            {"Metric": "Mean Terminal Net Worth", "Value": f"{summary.mean_terminal:,.0f}"},
            {"Metric": "Median Terminal Net Worth", "Value": f"{summary.median_terminal:,.0f}"},
            {"Metric": "Terminal P10", "Value": f"{summary.terminal_p10:,.0f}"},
            {"Metric": "Terminal P90", "Value": f"{summary.terminal_p90:,.0f}"},
            {"Metric": "Spread (P10-P90)", "Value": f"{summary.terminal_spread:,.0f}"},
        ]
    )
