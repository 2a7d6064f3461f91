"""
Result assembler — the single entry point callers use.

Always runs the deterministic branch (projection → milestones → insights),
which is O(years). The Monte Carlo branch is O(n_paths × years) and only
runs when include_simulation=True.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import pandas as pd

from core.config import DEFAULT_MILESTONE_TARGETS, SimulationConfig
from core.schema import Milestone, ProjectionInputs, SimulationPercentiles, Trajectory
from data_prep.validators import ensure_valid
from distributions.normal import SeedLike
from engine.projector import project
from engine.simulator import run_monte_carlo

from .aggregator import SimulationSummary, summarize_simulation
from .insights import ProjectionInsights, summarize_projection
from .milestones import detect_milestones

logger = logging.getLogger(__name__)


@dataclass
class ProjectionReport:
    inputs: ProjectionInputs
    trajectory: Trajectory
    milestones: List[Milestone]
    insights: ProjectionInsights
    percentiles: Optional[SimulationPercentiles] = None
    simulation_summary: Optional[SimulationSummary] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def has_simulation(self) -> bool:
        return self.percentiles is not None

    def to_dataframe(self) -> pd.DataFrame:
        """Trajectory by year, with the fan-chart columns joined on when present."""
        df = self.trajectory.to_dataframe()
        if self.percentiles is not None:
            df = df.merge(self.percentiles.to_dataframe(), on="year", how="left")
        return df

    def milestones_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "target": m.target_net_worth,
                    "year_reached": m.year_reached,
                    "age_reached": m.age_reached,
                }
                for m in self.milestones
            ]
        )


def build_report(
    inputs: ProjectionInputs,
    *,
    targets: Iterable[float] = DEFAULT_MILESTONE_TARGETS,
    include_simulation: bool = False,
    n_paths: Optional[int] = None,
    rng: SeedLike = None,
    config: Optional[SimulationConfig] = None,
) -> ProjectionReport:
    """
    Package the deterministic trajectory, milestones and (optionally) fan-chart bands.

    Parameters
    ----------
    inputs : ProjectionInputs
    targets : iterable of float
        Milestone ladder; defaults to 100K / 250K / 500K / 1M / 2M / 5M.
    include_simulation : bool
        Run the Monte Carlo branch.
    n_paths, rng, config
        Passed through to engine.simulator.run_monte_carlo.

    Raises
    ------
    InvalidInputError before anything is computed, NumericOverflowError on overflow.
    """
    # fail fast on the whole request, including n_paths, before either branch runs
    validation = ensure_valid(inputs, n_paths=n_paths if include_simulation else None)

    trajectory = project(inputs, log_warnings=False)
    milestones = detect_milestones(trajectory, targets)
    insights = summarize_projection(trajectory)

    percentiles = None
    sim_summary = None
    if include_simulation:
        percentiles, paths = run_monte_carlo(inputs, n_paths, rng, config=config, log_warnings=False)
        sim_summary = summarize_simulation(paths)

    logger.info(
        "Report built: %d years, %d/%d milestones reached, simulation=%s",
        trajectory.horizon,
        sum(m.reached for m in milestones),
        len(milestones),
        include_simulation,
    )

    return ProjectionReport(
        inputs=inputs,
        trajectory=trajectory,
        milestones=milestones,
        insights=insights,
        percentiles=percentiles,
        simulation_summary=sim_summary,
        warnings=list(validation.warnings),
    )
