"""Entity resolution: aggregation, name matching and deduplication."""

from .aggregation import DatabaseMentionSource, JsonDirectoryMentionSource, MentionSource, PersonAggregator
from .deduplication import DisjointSet, deduplicate
from .filters import is_junk_name, is_non_person
from .name_matching import NameMatcher, NameMatchSettings, normalize_name

__all__ = [
    "DatabaseMentionSource",
    "JsonDirectoryMentionSource",
    "MentionSource",
    "PersonAggregator",
    "DisjointSet",
    "deduplicate",
    "is_junk_name",
    "is_non_person",
    "NameMatcher",
    "NameMatchSettings",
    "normalize_name",
]
