"""
Random return generator — standard normal draws via the Box–Muller transform.

Method:
  1. Take two independent uniforms u1, u2 in [0, 1) from a seeded numpy Generator
  2. Clamp u1 away from 0 so log(u1) is finite
  3. z = sqrt(-2 ln u1) * cos(2π u2)

Only the cosine branch is used, so every draw consumes exactly two uniforms.
That keeps the stream layout trivial: the k-th draw always uses uniforms
2k and 2k+1 of its block, and the same seed gives bit-identical draws.

Annual returns are then expected_return + volatility * z, with no floor or cap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np

from core.errors import InvalidInputError

# Smallest u1 fed to log(); max |z| is then sqrt(-2 ln 1e-10) ≈ 6.8.
U1_FLOOR = 1e-10

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


def make_generator(seed: SeedLike = None) -> np.random.Generator:
    """Return `seed` unchanged if it is already a Generator, else build one from it."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def spawn_streams(rng: np.random.Generator, n: int) -> List[np.random.Generator]:
    """Derive n independent, non-overlapping child generators from a parent."""
    return list(rng.spawn(n))


def next_standard_normal(rng: np.random.Generator) -> float:
    """One N(0, 1) draw from two uniforms."""
    u1 = max(rng.random(), U1_FLOOR)
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def standard_normal_block(rng: np.random.Generator, size: Tuple[int, ...]) -> np.ndarray:
    """
    Vectorized Box–Muller: an array of N(0, 1) draws of the given shape.

    Uniforms are drawn interleaved (u1, u2, u1, u2, ...) so a block of n draws
    consumes the stream exactly as n calls to next_standard_normal would.
    """
    n = int(np.prod(size))
    u = rng.random(2 * n).reshape(n, 2)
    u1 = np.maximum(u[:, 0], U1_FLOOR)
    u2 = u[:, 1]
    z = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
    return z.reshape(size)


@dataclass(frozen=True)
class ReturnParams:
    """Normal annual-return assumption."""
    mean: float = 0.07
    volatility: float = 0.15

    def __post_init__(self):
        if self.volatility < 0:
            raise InvalidInputError(f"volatility must be >= 0, got {self.volatility}.")


class ReturnSampler:
    """
    Generates a (n_paths × n_years) matrix of annual returns.

    Usage:
        sampler = ReturnSampler(ReturnParams(mean=0.07, volatility=0.15), seed=42)
        r = sampler.sample(n_paths=500, n_years=30)
        # r[p, y - 1] → return applied to path p in year y
    """

    def __init__(self, params: ReturnParams, seed: SeedLike = None, rng: Optional[np.random.Generator] = None):
        self.params = params
        self.rng = rng if rng is not None else make_generator(seed)

    def sample(self, n_paths: int, n_years: int) -> np.ndarray:
        # path-major so path p's draws are contiguous in the stream
        z = standard_normal_block(self.rng, (n_paths, n_years))
        return self.params.mean + self.params.volatility * z

    def next_return(self) -> float:
        return self.params.mean + self.params.volatility * next_standard_normal(self.rng)
