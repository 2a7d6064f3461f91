"""
Milestone detection — the first year the deterministic trajectory crosses each net-worth target.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from core.config import DEFAULT_MILESTONE_TARGETS
from core.schema import Milestone, Trajectory


def detect_milestones(
    trajectory: Trajectory,
    targets: Iterable[float] = DEFAULT_MILESTONE_TARGETS,
) -> List[Milestone]:
    """
    One Milestone per target, in the order the targets were given.

    year_reached is the earliest year with nominal net worth >= target, or
    None when the horizon ends first. Unreached targets are kept; use
    reached_milestones() to drop them for display.
    """
    out: List[Milestone] = []
    for target in targets:
        hit: Optional[int] = None
        age: Optional[int] = None
        for point in trajectory:
            if point.net_worth_nominal >= target:
                hit = point.year
                age = point.age
                break
        out.append(Milestone(target_net_worth=float(target), year_reached=hit, age_reached=age))
    return out


def reached_milestones(milestones: Iterable[Milestone]) -> List[Milestone]:
    return [m for m in milestones if m.reached]


def milestone_label(target: float, symbol: str = "") -> str:
    """Compact label: 250000 -> '250K', 2000000 -> '2M' (with an optional currency symbol)."""
    if target >= 1_000_000:
        return f"{symbol}{target / 1_000_000:.0f}M"
    return f"{symbol}{target / 1_000:.0f}K"
