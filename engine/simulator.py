"""
Monte Carlo simulator — many random-return net-worth paths reduced to fan-chart bands.

Per path, per year y = 1..projection_years:
  r = expected_return + volatility * z,   z ~ N(0, 1)   (no floor/cap)

  y <= retirement_year_offset  → accumulation
      investments = investments * (1 + r) + annual_contribution
      cash       += annual_saving
  y >  retirement_year_offset  → drawdown
      withdrawal  = (investments + cash) * safe_withdrawal_rate
      investments = investments * (1 + r) - withdrawal
      (no contributions, cash no longer grows from income)

  debt amortizes exactly as in the deterministic projector, in both phases
  recorded net worth = max(0, cash + physical + investments - debt)

Note the withdrawal is a fraction of the CURRENT (investments + cash) every
year, not a constant-dollar amount fixed at retirement as in the textbook
4% rule. It behaves like a constant-percentage rule and can never fully
deplete a positive balance.

Execution is map-reduce:
  map:    paths are cut into fixed-size blocks; each block gets its own child
          RNG stream spawned from the master generator and is simulated
          vectorized across its paths (optionally in a process pool)
  reduce: per year, sort all paths' values and pick floor(n_paths * q)
Blocks and streams depend only on (seed, n_paths, block_size), so the
result is bit-identical whatever the worker count.
"""

from __future__ import annotations

import logging
import math
import multiprocessing
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from core.config import SimulationConfig
from core.schema import ProjectionInputs, SimulationPercentiles
from core.utils import ensure_finite_array
from data_prep.validators import ensure_valid
from distributions.normal import (
    ReturnParams,
    ReturnSampler,
    SeedLike,
    make_generator,
    spawn_streams,
)

from .projector import amortize

logger = logging.getLogger(__name__)


@dataclass
class SimulatedPaths:
    """
    Raw output of the map step: one row per path, one column per year (0..projection_years).

    net_worth is already floored at 0; investments is the running balance and
    may be negative after heavy drawdown in a bad sequence of returns.
    """
    net_worth: np.ndarray    # shape (n_paths, projection_years + 1)
    investments: np.ndarray  # shape (n_paths, projection_years + 1)

    @property
    def n_paths(self) -> int:
        return self.net_worth.shape[0]

    @property
    def projection_years(self) -> int:
        return self.net_worth.shape[1] - 1

    @classmethod
    def concat(cls, blocks: Sequence["SimulatedPaths"]) -> "SimulatedPaths":
        return cls(
            net_worth=np.vstack([b.net_worth for b in blocks]),
            investments=np.vstack([b.investments for b in blocks]),
        )

    def terminal_net_worth(self) -> np.ndarray:
        return self.net_worth[:, -1]

    def to_dataframe(self) -> pd.DataFrame:
        n_paths, n_cols = self.net_worth.shape
        return pd.DataFrame(
            {
                "path_id": np.repeat(np.arange(n_paths), n_cols),
                "year": np.tile(np.arange(n_cols), n_paths),
                "net_worth": self.net_worth.reshape(-1),
                "investments": self.investments.reshape(-1),
            }
        )


def _simulate_block(inputs: ProjectionInputs, n_paths: int, rng: np.random.Generator) -> SimulatedPaths:
    """Simulate n_paths paths vectorized; no validation (callers validate once)."""
    years = inputs.projection_years
    offset = inputs.retirement_year_offset
    swr = inputs.safe_withdrawal_rate
    contribution = inputs.annual_contribution
    saving = inputs.annual_saving
    annual_debt_payment = inputs.annual_debt_payment
    physical = inputs.current_physical_assets

    returns = ReturnSampler(
        ReturnParams(mean=inputs.expected_annual_return, volatility=inputs.volatility),
        rng=rng,
    ).sample(n_paths, years)

    inv = np.full(n_paths, inputs.current_investments, dtype=float)
    cash = np.full(n_paths, inputs.current_cash, dtype=float)
    # debt follows a fixed schedule, identical on every path
    debt = inputs.current_debt

    net_worth = np.empty((n_paths, years + 1), dtype=float)
    inv_hist = np.empty((n_paths, years + 1), dtype=float)
    net_worth[:, 0] = np.maximum(0.0, cash + physical + inv - debt)
    inv_hist[:, 0] = inv

    with np.errstate(over="ignore", invalid="ignore"):
        for y in range(1, years + 1):
            growth = 1.0 + returns[:, y - 1]
            if y <= offset:
                inv = inv * growth + contribution
                cash = cash + saving
            else:
                withdrawal = (inv + cash) * swr
                inv = inv * growth - withdrawal

            debt = amortize(debt, annual_debt_payment)

            net_worth[:, y] = np.maximum(0.0, cash + physical + inv - debt)
            inv_hist[:, y] = inv

    ensure_finite_array(net_worth, "Simulated net worth")
    ensure_finite_array(inv_hist, "Simulated investments")
    return SimulatedPaths(net_worth=net_worth, investments=inv_hist)


def simulate_paths(inputs: ProjectionInputs, n_paths: int, rng: SeedLike = None) -> SimulatedPaths:
    """Simulate n_paths paths on a single RNG stream (no blocking, no pool)."""
    ensure_valid(inputs, n_paths=n_paths)
    return _simulate_block(inputs, n_paths, make_generator(rng))


def block_sizes(n_paths: int, block_size: int) -> List[int]:
    """Split n_paths into full blocks plus one remainder block."""
    full, rest = divmod(n_paths, block_size)
    sizes = [block_size] * full
    if rest:
        sizes.append(rest)
    return sizes


def percentile_bands(
    values: np.ndarray,
    levels: Tuple[float, ...],
) -> SimulationPercentiles:
    """
    Per-year percentiles across paths (fan chart).

    values has shape (n_paths, n_years + 1). For each year the n_paths values
    are sorted and element floor(n_paths * q) is taken for each level q.
    """
    n_paths = values.shape[0]
    if n_paths < 1:
        raise ValueError("Cannot take percentiles of zero paths.")
    ordered = np.sort(values, axis=0)
    idx = [min(int(math.floor(n_paths * q)), n_paths - 1) for q in levels]
    return SimulationPercentiles(
        levels=tuple(levels),
        values=ordered[idx, :].T.copy(),
        n_paths=n_paths,
    )


def run_monte_carlo(
    inputs: ProjectionInputs,
    n_paths: Optional[int] = None,
    rng: SeedLike = None,
    *,
    config: Optional[SimulationConfig] = None,
    log_warnings: bool = True,
) -> Tuple[SimulationPercentiles, SimulatedPaths]:
    """
    Run the full Monte Carlo map-reduce.

    Parameters
    ----------
    inputs : ProjectionInputs
    n_paths : int, optional
        Overrides config.n_paths.
    rng : int | SeedSequence | Generator, optional
        Master randomness. Defaults to config.seed. A Generator passed here is
        advanced (its children are spawned), so reuse a fresh one per run to
        reproduce a result.
    config : SimulationConfig, optional
        Block size, worker count and percentile levels.
    log_warnings : bool
        Log degenerate-assumption warnings; False when the caller already did.

    Returns
    -------
    (percentiles, paths)
    """
    cfg = config or SimulationConfig()
    n = cfg.n_paths if n_paths is None else int(n_paths)
    ensure_valid(inputs, n_paths=n, log_warnings=log_warnings)

    master = make_generator(cfg.seed if rng is None else rng)
    sizes = block_sizes(n, cfg.block_size)
    streams = spawn_streams(master, len(sizes))
    jobs = [(inputs, size, stream) for size, stream in zip(sizes, streams)]

    n_workers = min(cfg.n_workers, len(jobs))
    logger.info(
        "Monte Carlo: %d paths x %d years in %d blocks on %d worker(s)",
        n, inputs.projection_years, len(jobs), n_workers,
    )

    if n_workers > 1:
        with multiprocessing.Pool(processes=n_workers) as pool:
            blocks = pool.starmap(_simulate_block, jobs)
    else:
        blocks = []
        for i, job in enumerate(jobs):
            logger.debug("Simulating block %d/%d (%d paths)", i + 1, len(jobs), job[1])
            blocks.append(_simulate_block(*job))

    paths = SimulatedPaths.concat(blocks)
    return percentile_bands(paths.net_worth, cfg.percentiles), paths


def simulate(
    inputs: ProjectionInputs,
    n_paths: Optional[int] = None,
    rng: SeedLike = None,
    *,
    config: Optional[SimulationConfig] = None,
) -> SimulationPercentiles:
    """Fan-chart percentiles of simulated nominal net worth, per year."""
    percentiles, _ = run_monte_carlo(inputs, n_paths, rng, config=config)
    return percentiles
