"""
Distributions package — seeded random draws that drive the Monte Carlo simulator.

  normal.py — Box–Muller standard normals, annual-return sampler, RNG stream helpers
"""

from .normal import (
    ReturnParams,
    ReturnSampler,
    make_generator,
    next_standard_normal,
    spawn_streams,
    standard_normal_block,
)

__all__ = [
    "ReturnParams",
    "ReturnSampler",
    "make_generator",
    "next_standard_normal",
    "spawn_streams",
    "standard_normal_block",
]
