"""
Core package — data model, configuration, errors, and shared utilities.
No business logic lives here.
"""

from .config import DEFAULT_MILESTONE_TARGETS, DEFAULT_PERCENTILES, SimulationConfig
from .errors import InvalidInputError, NumericOverflowError, ProjectionError
from .schema import (
    Milestone,
    ProjectionInputs,
    SimulationPercentiles,
    Trajectory,
    YearPoint,
)
from .utils import age_on, deflate, year_fraction

__all__ = [
    "DEFAULT_MILESTONE_TARGETS",
    "DEFAULT_PERCENTILES",
    "SimulationConfig",
    "InvalidInputError",
    "NumericOverflowError",
    "ProjectionError",
    "Milestone",
    "ProjectionInputs",
    "SimulationPercentiles",
    "Trajectory",
    "YearPoint",
    "age_on",
    "deflate",
    "year_fraction",
]
