"""Enumeration types for the analysis models."""

from enum import Enum, IntEnum


class PersonCategory(str, Enum):
    """Closed category set for a person mentioned in a document.

    Declaration order is the specificity ranking used when clusters of
    name variants are collapsed: earlier members are more specific.
    """

    KEY_FIGURE = "key figure"
    ASSOCIATE = "associate"
    VICTIM = "victim"
    WITNESS = "witness"
    LEGAL = "legal"
    POLITICAL = "political"
    LAW_ENFORCEMENT = "law enforcement"
    STAFF = "staff"
    OTHER = "other"


class AnalysisTier(IntEnum):
    """Analysis tier that produced a record."""

    RULE_BASED = 0  # free regex/gazetteer pass
    LLM = 1  # paid language-model pass


class SkipReason(str, Enum):
    """Reasons a discovered document was not analyzed."""

    ALREADY_ANALYZED = "already_analyzed"
    TEXT_TOO_SHORT = "text_too_short"
    LOW_PRIORITY = "low_priority"
    UNREADABLE = "unreadable"


CATEGORY_SPECIFICITY: dict[str, int] = {
    category.value: rank for rank, category in enumerate(PersonCategory)
}
