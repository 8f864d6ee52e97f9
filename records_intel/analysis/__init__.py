"""Tiered document analysis: rules, model calls, validation, merge and cost."""

from .cost import CostTracker
from .invalid_sink import InvalidResponseSink
from .llm_analyzer import ChunkedAnalysis, LLMAnalyzer
from .merger import merge_results
from .rule_based import classify_document
from .tiered import DocumentAnalysis, TieredAnalyzer
from .validator import ResponseValidator, ValidationOutcome

__all__ = [
    "CostTracker",
    "InvalidResponseSink",
    "ChunkedAnalysis",
    "LLMAnalyzer",
    "merge_results",
    "classify_document",
    "DocumentAnalysis",
    "TieredAnalyzer",
    "ResponseValidator",
    "ValidationOutcome",
]
