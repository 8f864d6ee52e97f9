"""Strict structural schema for a Tier 1 model response.

Unknown keys, empty strings, out-of-range scores and categories outside
the closed enum all fail validation. Integer fields accept numeric
strings ("3"), matching what chat models commonly emit.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from records_intel.models import PersonCategory


class _StrictResponseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        str_strip_whitespace=True,
    )


class ResponsePerson(_StrictResponseModel):
    name: str = Field(..., min_length=3)
    role: str = Field(..., min_length=1)
    category: PersonCategory
    context: str = Field(..., min_length=1)
    mention_count: int = Field(..., ge=1)


class ResponseConnection(_StrictResponseModel):
    person1: str = Field(..., min_length=3)
    person2: str = Field(..., min_length=3)
    relationship_type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    strength: int = Field(..., ge=1, le=5)


class ResponseEvent(_StrictResponseModel):
    date: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    significance: int = Field(..., ge=1, le=5)
    persons_involved: list[str]

    @field_validator("persons_involved")
    @classmethod
    def _names_long_enough(cls, value: list[str]) -> list[str]:
        stripped = [name.strip() for name in value]
        if any(len(name) < 3 for name in stripped):
            raise ValueError("person names must have at least 3 characters")
        return stripped


class AnalysisResponse(_StrictResponseModel):
    """Top-level object a model must return for one chunk."""

    document_type: str = Field(..., min_length=1)
    date_original: str | None
    summary: str = Field(..., min_length=1)
    persons: list[ResponsePerson]
    connections: list[ResponseConnection]
    events: list[ResponseEvent]
    locations: list[str]
    key_facts: list[str]

    @field_validator("date_original", mode="before")
    @classmethod
    def _blank_date_is_null(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("locations", "key_facts")
    @classmethod
    def _no_blank_items(cls, value: list[str]) -> list[str]:
        stripped = [item.strip() for item in value]
        if any(not item for item in stripped):
            raise ValueError("items must be non-empty strings")
        return stripped
