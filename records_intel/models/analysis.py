"""Models for per-document analysis records."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import AnalysisTier, PersonCategory


class CamelModel(BaseModel):
    """Base model serialized with the camelCase keys of the JSON contract."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump to a JSON-ready dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class PersonMention(CamelModel):
    """A person mentioned in a document."""

    name: str = Field(..., description="Person name in proper case")
    role: str = Field(..., description="Free-text role in context")
    category: PersonCategory = Field(..., description="Closed person category")
    context: str = Field(..., description="Short excerpt or summary of the mention")
    mention_count: int = Field(default=1, ge=1, description="Number of mentions")


class Connection(CamelModel):
    """A relationship between two people evidenced by a document."""

    person1: str
    person2: str
    relationship_type: str
    description: str
    strength: int = Field(..., ge=1, le=5, description="1=mentioned together, 5=deeply connected")

    @property
    def dedup_key(self) -> tuple[str, str, str]:
        first, second = sorted((self.person1, self.person2))
        return first, second, self.relationship_type


class Event(CamelModel):
    """A dated event referenced by a document."""

    date: str = Field(default="", description="Partial ISO date or empty")
    title: str
    description: str
    category: str
    significance: int = Field(..., ge=1, le=5)
    persons_involved: list[str] = Field(default_factory=list)

    @property
    def dedup_key(self) -> tuple[str, str]:
        return self.date, self.title


class AnalysisResult(CamelModel):
    """Structured record for one document, or merged from its chunks."""

    file_name: str
    data_set: str
    document_type: str
    date_original: str | None = None
    summary: str
    persons: list[PersonMention] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    key_facts: list[str] = Field(default_factory=list)
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TieredAnalysisResult(AnalysisResult):
    """Analysis record annotated with the tier that produced it and its cost."""

    tier: AnalysisTier
    cost_cents: float = Field(default=0.0, ge=0)
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)

    @classmethod
    def from_result(
        cls,
        result: AnalysisResult,
        tier: AnalysisTier,
        cost_cents: float = 0.0,
        input_tokens: int = 0,
        output_tokens: int = 0,
    ) -> "TieredAnalysisResult":
        """Wrap an untiered result without sharing its mutable lists."""
        copied = result.model_copy(deep=True)
        return cls(
            **{name: getattr(copied, name) for name in AnalysisResult.model_fields},
            tier=tier,
            cost_cents=cost_cents,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
