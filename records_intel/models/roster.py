"""Models for person aggregation and the deduplicated roster."""

from pydantic import Field

from .analysis import CamelModel


class PersonAggregate(CamelModel):
    """Mention totals for one normalized name across all analyses."""

    normalized_name: str = Field(..., description="Lower-cased, normalized person name")
    total_mentions: int = Field(..., ge=0, description="Sum of mentionCount across documents")
    doc_count: int = Field(..., ge=0, description="Number of documents mentioning the name")
    top_role: str = Field(default="Unknown", description="Most frequent role")
    top_category: str = Field(default="other", description="Most frequent category")


class RosterEntry(CamelModel):
    """A deduplicated person published as seed gazetteer entry."""

    name: str
    role: str
    category: str
    total_mentions: int = Field(default=0, ge=0)
    doc_count: int = Field(default=0, ge=0)
