"""
Exception types raised by the projection engine.

All of them subclass ValueError so callers that already guard engine calls
with ``except ValueError`` keep working.
"""

from __future__ import annotations


class ProjectionError(ValueError):
    """Base class for every error raised by the engine."""


class InvalidInputError(ProjectionError):
    """Inputs violate an invariant; nothing was computed."""


class NumericOverflowError(ProjectionError):
    """Compounding produced a value outside the finite float range."""

    def __init__(self, message: str, *, year: int | None = None):
        super().__init__(message)
        self.year = year
