"""Models for batch-run input documents and run reporting."""

from pydantic import ConfigDict, Field

from .analysis import CamelModel


class ExtractedDocument(CamelModel):
    """One document as emitted by the text extraction stage."""

    model_config = ConfigDict(extra="ignore")

    text: str = Field(default="", description="Extracted document text")
    file_name: str | None = Field(None, description="Original file name")
    file_size_bytes: int | None = Field(None, ge=0, description="Source file size")
    file_type: str | None = Field(None, description="Source file type or MIME type")


class DryRunEstimate(CamelModel):
    """Projected usage for the documents a run would analyze."""

    documents: int = Field(default=0, ge=0)
    skipped_short: int = Field(default=0, ge=0)
    skipped_priority: int = Field(default=0, ge=0)
    skipped_unreadable: int = Field(default=0, ge=0)
    total_chars: int = Field(default=0, ge=0)
    estimated_input_tokens: int = Field(default=0, ge=0)
    estimated_output_tokens: int = Field(default=0, ge=0)
    estimated_cost_cents: float = Field(default=0.0, ge=0)
    budget_cents: float | None = None

    @property
    def within_budget(self) -> bool:
        return self.budget_cents is None or self.estimated_cost_cents <= self.budget_cents


class RunSummary(CamelModel):
    """Completion summary produced by every analysis run."""

    tier: int = 1
    discovered: int = Field(default=0, ge=0, description="Input files found")
    already_analyzed: int = Field(default=0, ge=0, description="Skipped by skip-existing")
    selected: int = Field(default=0, ge=0, description="Candidates after limit")
    processed: int = Field(default=0, ge=0, description="Records written")
    skipped_short: int = Field(default=0, ge=0)
    skipped_priority: int = Field(default=0, ge=0)
    skipped_unreadable: int = Field(default=0, ge=0)
    invalid_chunks: int = Field(default=0, ge=0)
    placeholder_records: int = Field(default=0, ge=0, description="Documents with no valid chunk")
    failed_documents: int = Field(default=0, ge=0, description="Documents that failed analysis or writing")
    ledger_failures: int = Field(default=0, ge=0, description="Spend records the ledger rejected")
    total_persons: int = Field(default=0, ge=0)
    total_connections: int = Field(default=0, ge=0)
    total_events: int = Field(default=0, ge=0)
    total_cost_cents: float = Field(default=0.0, ge=0)
    budget_cents: float | None = None
    budget_exhausted: bool = False
    dry_run: DryRunEstimate | None = None
