"""Pydantic data models for the pipeline."""

from .enums import CATEGORY_SPECIFICITY, AnalysisTier, PersonCategory, SkipReason
from .analysis import (
    AnalysisResult,
    CamelModel,
    Connection,
    Event,
    PersonMention,
    TieredAnalysisResult,
)
from .roster import PersonAggregate, RosterEntry
from .budget import BudgetRecord
from .run import DryRunEstimate, ExtractedDocument, RunSummary

__all__ = [
    # Enums
    "AnalysisTier",
    "PersonCategory",
    "SkipReason",
    "CATEGORY_SPECIFICITY",
    # Analysis
    "CamelModel",
    "PersonMention",
    "Connection",
    "Event",
    "AnalysisResult",
    "TieredAnalysisResult",
    # Entity resolution
    "PersonAggregate",
    "RosterEntry",
    # Budget
    "BudgetRecord",
    # Run
    "ExtractedDocument",
    "DryRunEstimate",
    "RunSummary",
]
