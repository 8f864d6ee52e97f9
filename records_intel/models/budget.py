"""Budget ledger record model."""

from datetime import datetime, timezone

from pydantic import Field

from .analysis import CamelModel


class BudgetRecord(CamelModel):
    """One append-only spend entry for a paid model call."""

    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    model: str
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cost_cents: float = Field(default=0.0, ge=0)
    document_id: str | None = None
    job_type: str = "ai_analysis"
