"""
Projection engine — deterministic yearly projection + Monte Carlo simulator.
"""

from .projector import amortize, project
from .simulator import (
    SimulatedPaths,
    percentile_bands,
    run_monte_carlo,
    simulate,
    simulate_paths,
)

__all__ = [
    "amortize",
    "project",
    "SimulatedPaths",
    "percentile_bands",
    "run_monte_carlo",
    "simulate",
    "simulate_paths",
]
