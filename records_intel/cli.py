"""Command-line interface for the Records Intelligence pipeline."""

import json
import logging
import sys
from enum import Enum
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from records_intel.analysis import CostTracker, InvalidResponseSink, LLMAnalyzer, TieredAnalyzer
from records_intel.config.gazetteer import KNOWN_PERSONS
from records_intel.config.settings import Settings, get_settings
from records_intel.extraction import ChunkingConfig
from records_intel.llm import create_chat_client
from records_intel.models import AnalysisTier, RunSummary, TieredAnalysisResult
from records_intel.pipeline import RunOptions, generate_roster, load_roster_gazetteer, run_analysis
from records_intel.processing import (
    DatabaseMentionSource,
    JsonDirectoryMentionSource,
    NameMatcher,
    PersonAggregator,
)
from records_intel.storage import (
    BudgetLedger,
    DatabaseOutputStore,
    JsonOutputStore,
    create_session_factory,
)

# Configure structlog for CLI
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="records-intel",
    help="Records Intelligence - Extract persons, connections and events from case documents",
    add_completion=False,
)
console = Console()


class StoreKind(str, Enum):
    JSON = "json"
    DB = "db"


def _configure_logging(verbose: bool, settings: Settings) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")


def _merged_gazetteer(roster_path: Path) -> list:
    """Built-in known persons plus roster entries not already listed."""
    known = {name for name, _, _ in KNOWN_PERSONS}
    extra = [entry for entry in load_roster_gazetteer(roster_path) if entry[0] not in known]
    return list(KNOWN_PERSONS) + extra


def _build_analyzer(
    settings: Settings,
    tier: AnalysisTier,
    dry_run: bool,
    gazetteer: list | None,
) -> TieredAnalyzer:
    cost_tracker = CostTracker(
        input_cost_per_million=settings.input_cost_per_million,
        output_cost_per_million=settings.output_cost_per_million,
    )

    llm_analyzer = None
    if tier == AnalysisTier.LLM and not dry_run:
        llm_analyzer = LLMAnalyzer(
            client=create_chat_client(settings),
            invalid_sink=InvalidResponseSink(settings.invalid_output_dir),
            chunk_delay_seconds=settings.chunk_delay_seconds,
            rate_limit_backoff_seconds=settings.rate_limit_backoff_seconds,
            rate_limit_max_retries=settings.rate_limit_max_retries,
        )

    return TieredAnalyzer(
        cost_tracker=cost_tracker,
        llm_analyzer=llm_analyzer,
        chunking=ChunkingConfig(max_chars=settings.max_chunk_chars),
        gazetteer=gazetteer,
    )


@app.command()
def analyze(
    input_dir: Path = typer.Option(
        None,
        "--input",
        "-i",
        help="Directory of extracted document JSON files (default: settings)",
        file_okay=False,
        dir_okay=True,
    ),
    output_dir: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory for per-document analysis JSON (default: settings)",
    ),
    limit: int = typer.Option(None, "--limit", "-n", min=0, help="Analyze at most this many documents"),
    min_text: int = typer.Option(None, "--min-text", min=0, help="Skip documents with less text"),
    delay: float = typer.Option(None, "--delay", min=0.0, help="Seconds to wait between documents"),
    priority: int = typer.Option(None, "--priority", min=1, max=3, help="Minimum priority tier (1-3)"),
    budget: float = typer.Option(None, "--budget", min=0.0, help="Spend cap in cents"),
    skip_existing: bool = typer.Option(
        True,
        "--skip-existing/--no-skip",
        help="Skip documents that already have an analysis record",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Estimate tokens and cost without analyzing"),
    tier: int = typer.Option(1, "--tier", min=0, max=1, help="0 = rule-based, 1 = language model"),
    store: StoreKind = typer.Option(StoreKind.JSON, "--store", help="Where analysis records are written"),
    gazetteer: Path = typer.Option(
        None,
        "--gazetteer",
        help="Roster JSON whose persons extend the Tier 0 known-person list",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Analyze extracted documents and write one record per document."""
    settings = get_settings()
    _configure_logging(verbose, settings)

    analysis_tier = AnalysisTier(tier)
    options = RunOptions.from_settings(
        settings,
        input_dir=input_dir,
        tier=analysis_tier,
        limit=limit,
        min_text_length=min_text,
        document_delay_seconds=delay,
        min_priority=priority,
        budget_cents=budget,
        skip_existing=skip_existing,
        dry_run=dry_run,
    )
    output_dir = output_dir or settings.output_dir

    console.print(
        Panel.fit(
            "[bold blue]Records Intelligence[/bold blue]\n"
            f"Tier {int(analysis_tier)} analysis{' (dry run)' if dry_run else ''}",
            border_style="blue",
        )
    )
    console.print(f"\n[dim]Input:[/dim] {options.input_dir}")
    console.print(f"[dim]Output:[/dim] {output_dir if store == StoreKind.JSON else settings.database_url}\n")

    try:
        session_factory = None
        if store == StoreKind.DB or (analysis_tier == AnalysisTier.LLM and not dry_run):
            session_factory = create_session_factory(settings.database_url)

        output_store = (
            DatabaseOutputStore(session_factory) if store == StoreKind.DB else JsonOutputStore(output_dir)
        )
        ledger = BudgetLedger(session_factory) if session_factory is not None and not dry_run else None
        known_persons = _merged_gazetteer(gazetteer) if gazetteer else None
        analyzer = _build_analyzer(settings, analysis_tier, dry_run, known_persons)

        summary = run_analysis(options, analyzer, output_store, ledger=ledger)

    except Exception as e:
        console.print(f"\n[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)

    _display_summary(summary)


@app.command()
def roster(
    output: Path = typer.Option(None, "--output", "-o", help="Roster JSON path (default: settings)"),
    analyses_dir: Path = typer.Option(
        None,
        "--analyses",
        help="Directory of analysis JSON used when the database has no persons",
    ),
    top_n: int = typer.Option(None, "--top", min=1, help="Number of persons to keep"),
    use_db: bool = typer.Option(True, "--db/--no-db", help="Aggregate from the database first"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Aggregate, deduplicate and publish the person roster."""
    settings = get_settings()
    _configure_logging(verbose, settings)

    output = output or settings.roster_path
    json_source = JsonDirectoryMentionSource(
        analyses_dir or settings.output_dir, fetch_limit=settings.roster_fetch_limit
    )

    try:
        session_factory = create_session_factory(settings.database_url) if use_db else None
        if session_factory is not None:
            aggregator = PersonAggregator(
                DatabaseMentionSource(session_factory, fetch_limit=settings.roster_fetch_limit),
                fallback=json_source,
            )
        else:
            aggregator = PersonAggregator(json_source)

        entries = generate_roster(
            aggregator,
            output,
            matcher=NameMatcher(),
            top_n=top_n or settings.roster_top_n,
            session_factory=session_factory,
        )

    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)

    console.print(f"[green]Roster written:[/green] {output} ({len(entries)} persons)")

    table = Table(show_header=True, box=None)
    table.add_column("Name")
    table.add_column("Role", style="dim")
    table.add_column("Category", style="dim")
    table.add_column("Mentions", justify="right")
    for entry in entries[:10]:
        table.add_row(entry.name, entry.role, entry.category, str(entry.total_mentions))
    console.print(table)


@app.command()
def validate(
    record_path: Path = typer.Argument(
        ...,
        help="Path to an analysis JSON record to validate",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Validate an analysis record against the JSON schema."""
    import jsonschema

    try:
        with open(record_path, "r", encoding="utf-8") as f:
            record = json.load(f)

        schema = TieredAnalysisResult.model_json_schema(by_alias=True)
        jsonschema.validate(record, schema)

        console.print("[green]Validation successful![/green] Record conforms to schema.")

    except jsonschema.ValidationError as e:
        console.print(f"[red]Validation failed:[/red] {e.message}")
        console.print(f"[dim]Path:[/dim] {' -> '.join(str(p) for p in e.absolute_path)}")
        sys.exit(1)

    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@app.command()
def info() -> None:
    """Display system information and configuration."""
    from records_intel import __version__

    settings = get_settings()

    console.print(
        Panel.fit(
            "[bold blue]Records Intelligence[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("LLM Provider", settings.llm_provider)
    table.add_row("LLM Model", settings.llm_model_name)
    table.add_row("LLM URL", settings.llm_base_url if settings.llm_provider != "ollama" else settings.llm_ollama_base_url)
    table.add_row("API Key", "set" if settings.deepseek_api_key else "not set")
    table.add_row("Temperature", str(settings.llm_temperature))
    table.add_row("Chunk Size", f"{settings.max_chunk_chars} chars")
    table.add_row("Pricing", f"{settings.input_cost_per_million} / {settings.output_cost_per_million} cents per 1M tokens")
    table.add_row("Budget", f"{settings.budget_cents} cents" if settings.budget_cents is not None else "uncapped")
    table.add_row("Extracted Dir", str(settings.extracted_dir))
    table.add_row("Output Dir", str(settings.output_dir))
    table.add_row("Database", settings.database_url)

    console.print(table)


def _display_summary(summary: RunSummary) -> None:
    """Display the completion summary of an analysis run.

    Args:
        summary: Run summary returned by the runner.
    """
    console.print("\n[bold]Run Summary[/bold]")
    console.print("-" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Count", justify="right")

    table.add_row("Discovered", str(summary.discovered))
    table.add_row("Already Analyzed", str(summary.already_analyzed))
    table.add_row("Selected", str(summary.selected))

    estimate = summary.dry_run
    if estimate is not None:
        table.add_row("Eligible Documents", str(estimate.documents))
        table.add_row("Skipped (short/priority/unreadable)", f"{estimate.skipped_short}/{estimate.skipped_priority}/{estimate.skipped_unreadable}")
        table.add_row("Est. Input Tokens", f"{estimate.estimated_input_tokens:,}")
        table.add_row("Est. Output Tokens", f"{estimate.estimated_output_tokens:,}")
        table.add_row("Est. Cost", f"{estimate.estimated_cost_cents:.2f} cents")
        console.print(table)
        if not estimate.within_budget:
            console.print(f"\n[yellow]Estimate exceeds budget of {estimate.budget_cents} cents[/yellow]")
        return

    table.add_row("Processed", str(summary.processed))
    table.add_row("Skipped (short/priority/unreadable)", f"{summary.skipped_short}/{summary.skipped_priority}/{summary.skipped_unreadable}")
    table.add_row("Invalid Chunks", str(summary.invalid_chunks))
    table.add_row("Placeholder Records", str(summary.placeholder_records))
    table.add_row("Failed Documents", str(summary.failed_documents))
    if summary.ledger_failures:
        table.add_row("Ledger Failures", str(summary.ledger_failures))
    table.add_row("Persons", str(summary.total_persons))
    table.add_row("Connections", str(summary.total_connections))
    table.add_row("Events", str(summary.total_events))
    table.add_row("Cost", f"{summary.total_cost_cents:.2f} cents")

    console.print(table)

    if summary.budget_exhausted:
        console.print("\n[yellow]Budget cap reached; remaining documents were not analyzed.[/yellow]")


if __name__ == "__main__":
    app()
