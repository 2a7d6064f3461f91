"""
Engine configuration.
Household numbers live in core/schema.py (ProjectionInputs); this module only
holds knobs that control how the engine runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidInputError

# Net-worth ladder checked by the milestone detector, in the caller's currency units.
DEFAULT_MILESTONE_TARGETS: Tuple[float, ...] = (
    100_000.0,
    250_000.0,
    500_000.0,
    1_000_000.0,
    2_000_000.0,
    5_000_000.0,
)

# Fan-chart bands reported by the simulator.
DEFAULT_PERCENTILES: Tuple[float, ...] = (0.10, 0.25, 0.50, 0.75, 0.90)

# Returns outside this band are legal but almost certainly a units mistake (7 vs 0.07).
PLAUSIBLE_RETURN_RANGE: Tuple[float, float] = (-0.50, 0.50)
PLAUSIBLE_VOLATILITY_MAX: float = 1.0


@dataclass(frozen=True)
class SimulationConfig:
    n_paths: int = 500
    seed: int = 7

    # paths are generated in fixed-size blocks, one RNG stream per block,
    # so the result does not depend on n_workers
    block_size: int = 100
    n_workers: int = 1

    percentiles: Tuple[float, ...] = DEFAULT_PERCENTILES

    def __post_init__(self):
        if self.n_paths < 1:
            raise InvalidInputError(f"n_paths must be >= 1, got {self.n_paths}.")
        if self.block_size < 1:
            raise InvalidInputError(f"block_size must be >= 1, got {self.block_size}.")
        if self.n_workers < 1:
            raise InvalidInputError(f"n_workers must be >= 1, got {self.n_workers}.")
        bad = [q for q in self.percentiles if not 0.0 <= q < 1.0]
        if bad:
            raise InvalidInputError(f"Percentile levels must be in [0, 1): {bad}")

    @property
    def n_blocks(self) -> int:
        return -(-self.n_paths // self.block_size)
