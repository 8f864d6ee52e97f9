"""Batch analysis run over the extracted corpus.

Documents are processed strictly one at a time. Every failure is scoped
to its document: the run always finishes with a ``RunSummary``.

Stage Flow:
1. Scan         -> DocumentEntry list (paths only, text loaded lazily)
2. Skip         -> drop documents the output store already holds
3. Estimate     -> dry run only: projected tokens and cost, no writes
4. Analyze      -> per document: load, filter, analyze, record cost, write
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from sqlalchemy.exc import SQLAlchemyError

from records_intel.analysis.tiered import TieredAnalyzer
from records_intel.config.settings import Settings
from records_intel.extraction.chunker import count_tokens
from records_intel.extraction.loader import DocumentEntry, DocumentLoadError, scan_extracted
from records_intel.models import (
    AnalysisTier,
    BudgetRecord,
    DryRunEstimate,
    ExtractedDocument,
    RunSummary,
    SkipReason,
)
from records_intel.pipeline.priority import get_ai_priority
from records_intel.storage.ledger import BudgetLedger
from records_intel.storage.output import OutputStore, is_already_analyzed

logger = structlog.get_logger(__name__)

JOB_TYPE = "ai_analysis"


@dataclass
class RunOptions:
    """Knobs for one analysis run."""

    input_dir: Path
    tier: AnalysisTier = AnalysisTier.LLM
    limit: int | None = None
    min_text_length: int = 200
    document_delay_seconds: float = 1.5
    min_priority: int = 1
    budget_cents: float | None = None
    skip_existing: bool = True
    dry_run: bool = False
    priority_data_sets: list[str] = field(default_factory=list)
    large_file_bytes: int | None = None
    estimated_output_tokens_per_document: int = 500
    encoding_name: str = "cl100k_base"

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "RunOptions":
        """Options seeded from settings; ``None`` overrides are ignored."""
        values = {
            "input_dir": settings.extracted_dir,
            "min_text_length": settings.min_text_length,
            "document_delay_seconds": settings.document_delay_seconds,
            "min_priority": settings.min_priority,
            "budget_cents": settings.budget_cents,
            "priority_data_sets": list(settings.priority_data_sets),
            "large_file_bytes": settings.large_file_bytes,
            "estimated_output_tokens_per_document": settings.estimated_output_tokens_per_document,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def _priority(entry: DocumentEntry, document: ExtractedDocument, options: RunOptions) -> int:
    return get_ai_priority(
        entry.data_set,
        document.file_size_bytes,
        priority_data_sets=options.priority_data_sets,
        large_file_bytes=options.large_file_bytes,
    )


def _select_candidates(
    entries: list[DocumentEntry],
    options: RunOptions,
    store: OutputStore,
    summary: RunSummary,
) -> list[DocumentEntry]:
    candidates = entries
    if options.skip_existing:
        existing = store.existing_ids()
        candidates = [e for e in entries if not is_already_analyzed(e.file_id, existing)]
        summary.already_analyzed = len(entries) - len(candidates)

    if options.limit is not None:
        candidates = candidates[: options.limit]
    summary.selected = len(candidates)

    logger.info(
        "candidates_selected",
        discovered=summary.discovered,
        already_analyzed=summary.already_analyzed,
        selected=summary.selected,
        limit=options.limit,
    )
    return candidates


def estimate_run(
    candidates: list[DocumentEntry],
    options: RunOptions,
    analyzer: TieredAnalyzer,
) -> DryRunEstimate:
    """Project token usage and cost without calling the model or writing.

    Input tokens are counted with tiktoken. Output is assumed to be a
    fixed number of tokens per document. Tier 0 skips the priority filter
    and costs nothing, as in a real run.
    """
    estimate = DryRunEstimate(budget_cents=options.budget_cents)

    for entry in candidates:
        try:
            document = entry.load()
        except DocumentLoadError:
            estimate.skipped_unreadable += 1
            continue

        if len(document.text) < options.min_text_length:
            estimate.skipped_short += 1
            continue
        if options.tier == AnalysisTier.LLM and _priority(entry, document, options) < options.min_priority:
            estimate.skipped_priority += 1
            continue

        estimate.documents += 1
        estimate.total_chars += len(document.text)
        estimate.estimated_input_tokens += count_tokens(document.text, options.encoding_name)

    estimate.estimated_output_tokens = estimate.documents * options.estimated_output_tokens_per_document
    if options.tier == AnalysisTier.LLM:
        estimate.estimated_cost_cents = analyzer.cost_tracker.cost(
            estimate.estimated_input_tokens, estimate.estimated_output_tokens
        )

    logger.info(
        "dry_run_estimate",
        documents=estimate.documents,
        estimated_input_tokens=estimate.estimated_input_tokens,
        estimated_output_tokens=estimate.estimated_output_tokens,
        estimated_cost_cents=estimate.estimated_cost_cents,
        within_budget=estimate.within_budget,
    )
    return estimate


def run_analysis(
    options: RunOptions,
    analyzer: TieredAnalyzer,
    store: OutputStore,
    ledger: BudgetLedger | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    """Analyze every eligible extracted document once.

    Re-running over the same inputs with ``skip_existing`` writes nothing
    new. For Tier 1 the budget is checked before each document; with a
    ledger, spend already recorded this month counts toward the cap.

    Args:
        options: Run options.
        analyzer: Tiered analyzer (its cost tracker enforces the budget).
        store: Output store records are written to.
        ledger: Budget ledger for Tier 1 spend, if any.
        sleep: Sleep function, injectable for tests.

    Returns:
        Completion summary of the run.
    """
    summary = RunSummary(tier=int(options.tier), budget_cents=options.budget_cents)
    paid = options.tier == AnalysisTier.LLM
    tracker = analyzer.cost_tracker
    tracker.budget_cents = options.budget_cents

    logger.info(
        "analysis_run_start",
        input_dir=str(options.input_dir),
        tier=int(options.tier),
        dry_run=options.dry_run,
        budget_cents=options.budget_cents,
        min_priority=options.min_priority,
    )

    entries = scan_extracted(options.input_dir)
    summary.discovered = len(entries)
    candidates = _select_candidates(entries, options, store, summary)

    if options.dry_run:
        summary.dry_run = estimate_run(candidates, options, analyzer)
        return summary

    if paid and ledger is not None:
        tracker.spent_cents = ledger.period_total()
        logger.info("budget_period_spend", spent_cents=round(tracker.spent_cents, 2))

    for position, entry in enumerate(candidates):
        if paid and not tracker.can_spend():
            summary.budget_exhausted = True
            logger.info(
                "budget_exhausted_stopping",
                spent_cents=round(tracker.spent_cents, 2),
                budget_cents=tracker.budget_cents,
                remaining_documents=len(candidates) - position,
            )
            break

        try:
            document = entry.load()
        except DocumentLoadError as e:
            summary.skipped_unreadable += 1
            logger.warning("document_skipped", file_id=entry.file_id, reason=SkipReason.UNREADABLE.value, error=str(e))
            continue

        if len(document.text) < options.min_text_length:
            summary.skipped_short += 1
            logger.debug("document_skipped", file_id=entry.file_id, reason=SkipReason.TEXT_TOO_SHORT.value)
            continue

        if paid:
            priority = _priority(entry, document, options)
            if priority < options.min_priority:
                summary.skipped_priority += 1
                logger.debug("document_skipped", file_id=entry.file_id, reason=SkipReason.LOW_PRIORITY.value, priority=priority)
                continue

        file_name = document.file_name or entry.file_id
        try:
            analysis = analyzer.analyze(document.text, file_name, entry.data_set, options.tier)
        except Exception as e:
            summary.failed_documents += 1
            logger.error("document_analysis_failed", file_id=entry.file_id, error=str(e), error_type=type(e).__name__)
            continue

        record = analysis.record
        summary.invalid_chunks += analysis.invalid_chunks
        if analysis.placeholder:
            summary.placeholder_records += 1

        if paid:
            tracker.record(record.cost_cents)
            summary.total_cost_cents += record.cost_cents
            if ledger is not None:
                try:
                    ledger.append(
                        BudgetRecord(
                            model=analyzer.llm_analyzer.model_name,
                            input_tokens=record.input_tokens,
                            output_tokens=record.output_tokens,
                            cost_cents=record.cost_cents,
                            document_id=entry.file_id,
                            job_type=JOB_TYPE,
                        )
                    )
                except SQLAlchemyError as e:
                    summary.ledger_failures += 1
                    logger.error("ledger_append_failed", file_id=entry.file_id, cost_cents=record.cost_cents, error=str(e))

        try:
            store.write_analysis(entry.file_id, record)
        except Exception as e:
            summary.failed_documents += 1
            logger.error("record_write_failed", file_id=entry.file_id, error=str(e), error_type=type(e).__name__)
            continue

        summary.processed += 1
        summary.total_persons += len(record.persons)
        summary.total_connections += len(record.connections)
        summary.total_events += len(record.events)

        logger.info(
            "document_analyzed",
            file_id=entry.file_id,
            position=position + 1,
            selected=summary.selected,
            persons=len(record.persons),
            connections=len(record.connections),
            events=len(record.events),
            cost_cents=record.cost_cents,
            total_cost_cents=round(summary.total_cost_cents, 2),
        )

        if paid and options.document_delay_seconds > 0 and position < len(candidates) - 1:
            sleep(options.document_delay_seconds)

    logger.info("analysis_run_complete", **summary.model_dump(exclude={"dry_run"}))
    return summary
