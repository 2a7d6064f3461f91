"""
Report outputs — milestones, insights, simulation summaries, returns, and the assembled report.
"""

from .aggregator import SimulationSummary, summarize_simulation, summary_table
from .assembler import ProjectionReport, build_report
from .insights import ProjectionInsights, summarize_projection
from .milestones import detect_milestones, milestone_label, reached_milestones
from .returns import CashFlow, annualized_return, holding_annualized_return, xirr

__all__ = [
    "SimulationSummary",
    "summarize_simulation",
    "summary_table",
    "ProjectionReport",
    "build_report",
    "ProjectionInsights",
    "summarize_projection",
    "detect_milestones",
    "milestone_label",
    "reached_milestones",
    "CashFlow",
    "annualized_return",
    "holding_annualized_return",
    "xirr",
]
