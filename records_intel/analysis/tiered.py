"""Dispatch of one document to the rule-based or the model tier."""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from records_intel.analysis.cost import CostTracker
from records_intel.analysis.llm_analyzer import LLMAnalyzer
from records_intel.analysis.rule_based import GazetteerEntry, classify_document
from records_intel.extraction.chunker import ChunkingConfig, chunk_text
from records_intel.models import AnalysisTier, TieredAnalysisResult

logger = structlog.get_logger(__name__)


@dataclass
class DocumentAnalysis:
    """Tiered record plus the chunk counters the run summary needs."""

    record: TieredAnalysisResult
    invalid_chunks: int = 0
    failed_chunks: int = 0
    placeholder: bool = False


class TieredAnalyzer:
    """Analyzes a document with Tier 0 rules or the Tier 1 model.

    Args:
        cost_tracker: Prices Tier 1 token usage.
        llm_analyzer: Model analyzer. Required only for Tier 1.
        chunking: Chunk size configuration for Tier 1.
        gazetteer: Known persons for Tier 0. None uses the built-in list.
    """

    def __init__(
        self,
        cost_tracker: CostTracker,
        llm_analyzer: LLMAnalyzer | None = None,
        chunking: ChunkingConfig | None = None,
        gazetteer: Iterable[GazetteerEntry] | None = None,
    ) -> None:
        self.cost_tracker = cost_tracker
        self.llm_analyzer = llm_analyzer
        self.chunking = chunking or ChunkingConfig()
        self.gazetteer = list(gazetteer) if gazetteer is not None else None

    def analyze(
        self,
        text: str,
        file_name: str,
        data_set: str,
        tier: AnalysisTier,
    ) -> DocumentAnalysis:
        """Analyze one document at the requested tier.

        Raises:
            ValueError: If Tier 1 is requested without a model analyzer.
        """
        if tier == AnalysisTier.RULE_BASED:
            return DocumentAnalysis(
                record=classify_document(text, file_name, data_set, gazetteer=self.gazetteer)
            )

        if self.llm_analyzer is None:
            raise ValueError("Tier 1 analysis requires an LLMAnalyzer")

        chunks = chunk_text(text, self.chunking.max_chars)
        logger.info(
            "document_analysis_start",
            file_name=file_name,
            chars=len(text),
            chunks=len(chunks),
        )

        outcome = self.llm_analyzer.analyze(chunks, file_name, data_set)
        cost_cents = self.cost_tracker.cost(outcome.input_tokens, outcome.output_tokens)

        record = TieredAnalysisResult.from_result(
            outcome.result,
            tier=AnalysisTier.LLM,
            cost_cents=cost_cents,
            input_tokens=outcome.input_tokens,
            output_tokens=outcome.output_tokens,
        )
        return DocumentAnalysis(
            record=record,
            invalid_chunks=outcome.invalid_chunks,
            failed_chunks=outcome.failed_chunks,
            placeholder=outcome.is_placeholder,
        )
