"""Roster generation: aggregate, filter, deduplicate and publish persons."""

from pathlib import Path

import structlog
from sqlalchemy.orm import sessionmaker

from records_intel.analysis.rule_based import GazetteerEntry, proper_case
from records_intel.models import PersonCategory, RosterEntry
from records_intel.processing.aggregation import PersonAggregator
from records_intel.processing.deduplication import deduplicate
from records_intel.processing.name_matching import NameMatcher
from records_intel.storage.output import read_roster, write_roster

logger = structlog.get_logger(__name__)


def build_roster(
    aggregator: PersonAggregator,
    matcher: NameMatcher | None = None,
    top_n: int = 300,
) -> tuple[list[RosterEntry], int]:
    """Deduplicated roster of the most mentioned persons.

    Args:
        aggregator: Source of filtered person aggregates.
        matcher: Name matcher used for clustering.
        top_n: Number of persons to keep.

    Returns:
        Tuple of (roster entries most mentioned first, number of
        aggregated names the roster was built from).
    """
    aggregates = aggregator.aggregate()
    unique = deduplicate(aggregates, matcher)

    entries = [
        RosterEntry(
            name=proper_case(person.normalized_name),
            role=person.top_role,
            category=person.top_category,
            total_mentions=person.total_mentions,
            doc_count=person.doc_count,
        )
        for person in unique[:top_n]
    ]

    logger.info(
        "roster_built",
        source_names=len(aggregates),
        unique_persons=len(unique),
        kept=len(entries),
    )
    return entries, len(aggregates)


def generate_roster(
    aggregator: PersonAggregator,
    roster_path: Path,
    matcher: NameMatcher | None = None,
    top_n: int = 300,
    session_factory: sessionmaker | None = None,
) -> list[RosterEntry]:
    """Build the roster and write it to ``roster_path`` (and the database)."""
    entries, source_names = build_roster(aggregator, matcher, top_n)
    write_roster(entries, roster_path, source_names=source_names, session_factory=session_factory)
    return entries


def _category(value: str) -> PersonCategory:
    try:
        return PersonCategory(value.lower())
    except ValueError:
        return PersonCategory.OTHER


def roster_gazetteer(entries: list[RosterEntry]) -> list[GazetteerEntry]:
    """Roster entries as Tier 0 gazetteer entries."""
    return [(entry.name.lower(), entry.role, _category(entry.category)) for entry in entries]


def load_roster_gazetteer(path: Path) -> list[GazetteerEntry]:
    """Read a roster file and convert it to gazetteer entries."""
    return roster_gazetteer(read_roster(path))
