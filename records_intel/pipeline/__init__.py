"""Batch orchestration: analysis runs and roster generation."""

from .priority import get_ai_priority
from .roster import build_roster, generate_roster, load_roster_gazetteer, roster_gazetteer
from .runner import RunOptions, estimate_run, run_analysis

__all__ = [
    "get_ai_priority",
    "build_roster",
    "generate_roster",
    "load_roster_gazetteer",
    "roster_gazetteer",
    "RunOptions",
    "estimate_run",
    "run_analysis",
]
