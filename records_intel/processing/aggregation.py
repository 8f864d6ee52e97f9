"""Aggregation of person mentions across all per-document analyses."""

import json
from collections import Counter
from pathlib import Path
from typing import Protocol

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from records_intel.models import PersonAggregate
from records_intel.processing.filters import is_junk_name, is_non_person
from records_intel.processing.name_matching import normalize_name
from records_intel.storage.tables import AnalysisPerson

logger = structlog.get_logger(__name__)

DEFAULT_ROLE = "Unknown"
DEFAULT_CATEGORY = "other"


class MentionSource(Protocol):
    """Backing store that can produce person aggregates."""

    def fetch_person_mentions(self) -> list[PersonAggregate]: ...


def _most_common(counts: Counter, default: str) -> str:
    if not counts:
        return default
    # Highest count; ties go to the value seen first
    return max(counts.items(), key=lambda item: item[1])[0]


def _mention_count(value) -> int:
    # Integral floats such as 2.0 count; anything else counts once
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        return 1
    return value


class JsonDirectoryMentionSource:
    """Aggregates persons from a directory of analysis JSON files.

    Args:
        directory: Directory holding one ``<file id>.json`` per document.
        fetch_limit: Keep only this many names with the most mentions.
    """

    def __init__(self, directory: Path, fetch_limit: int | None = None) -> None:
        self.directory = Path(directory)
        self.fetch_limit = fetch_limit

    def fetch_person_mentions(self) -> list[PersonAggregate]:
        files = sorted(self.directory.glob("*.json")) if self.directory.exists() else []
        logger.info("json_mention_scan_start", directory=str(self.directory), files=len(files))

        totals: Counter = Counter()
        documents: dict[str, set[str]] = {}
        roles: dict[str, Counter] = {}
        categories: dict[str, Counter] = {}
        malformed = 0

        for path in files:
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError):
                malformed += 1
                continue

            persons = data.get("persons") if isinstance(data, dict) else None
            if not isinstance(persons, list):
                continue

            for person in persons:
                raw_name = person.get("name") if isinstance(person, dict) else None
                if not raw_name or is_junk_name(raw_name):
                    continue
                normalized = normalize_name(raw_name)
                if not normalized:
                    continue

                mentions = _mention_count(person.get("mentionCount"))
                totals[normalized] += mentions
                documents.setdefault(normalized, set()).add(path.name)
                roles.setdefault(normalized, Counter())[person.get("role") or DEFAULT_ROLE] += mentions
                categories.setdefault(normalized, Counter())[person.get("category") or DEFAULT_CATEGORY] += mentions

        aggregates = [
            PersonAggregate(
                normalized_name=name,
                total_mentions=total,
                doc_count=len(documents[name]),
                top_role=_most_common(roles[name], DEFAULT_ROLE),
                top_category=_most_common(categories[name], DEFAULT_CATEGORY),
            )
            for name, total in totals.items()
        ]
        aggregates.sort(key=lambda p: (-p.total_mentions, p.normalized_name))

        logger.info(
            "json_mention_scan_complete",
            unique_names=len(aggregates),
            malformed_files=malformed,
        )
        return aggregates[: self.fetch_limit] if self.fetch_limit else aggregates


class DatabaseMentionSource:
    """Aggregates persons from the ``ai_analysis_persons`` table.

    Args:
        session_factory: SQLAlchemy session factory.
        fetch_limit: Keep only this many names with the most mentions.
    """

    def __init__(self, session_factory: sessionmaker, fetch_limit: int | None = None) -> None:
        self._session_factory = session_factory
        self.fetch_limit = fetch_limit

    def _top_values(self, session, column, names: list[str], default: str) -> dict[str, str]:
        weight = func.sum(AnalysisPerson.mention_count)
        rows = session.execute(
            select(AnalysisPerson.normalized_name, column, weight.label("weight"))
            .where(AnalysisPerson.normalized_name.in_(names), column.is_not(None), column != "")
            .group_by(AnalysisPerson.normalized_name, column)
            .order_by(AnalysisPerson.normalized_name, weight.desc(), column)
        ).all()

        top: dict[str, str] = {}
        for name, value, _ in rows:
            top.setdefault(name, value)
        return {name: top.get(name, default) for name in names}

    def fetch_person_mentions(self) -> list[PersonAggregate]:
        total = func.sum(AnalysisPerson.mention_count)
        query = (
            select(
                AnalysisPerson.normalized_name,
                total.label("total_mentions"),
                func.count(func.distinct(AnalysisPerson.analysis_id)).label("doc_count"),
            )
            .where(AnalysisPerson.normalized_name != "")
            .group_by(AnalysisPerson.normalized_name)
            .order_by(total.desc(), AnalysisPerson.normalized_name)
        )
        if self.fetch_limit:
            query = query.limit(self.fetch_limit)

        with self._session_factory() as session:
            rows = session.execute(query).all()
            names = [row.normalized_name for row in rows]
            top_roles = self._top_values(session, AnalysisPerson.role, names, DEFAULT_ROLE)
            top_categories = self._top_values(session, AnalysisPerson.category, names, DEFAULT_CATEGORY)

        return [
            PersonAggregate(
                normalized_name=row.normalized_name,
                total_mentions=int(row.total_mentions),
                doc_count=int(row.doc_count),
                top_role=top_roles[row.normalized_name],
                top_category=top_categories[row.normalized_name],
            )
            for row in rows
        ]


class PersonAggregator:
    """Produces filtered person aggregates from the preferred store.

    The primary (structured) source is used when it is reachable and
    returns data; otherwise the fallback source is scanned.

    Args:
        primary: Preferred mention source.
        fallback: Source used when the primary fails or is empty.
    """

    def __init__(self, primary: MentionSource, fallback: MentionSource | None = None) -> None:
        self.primary = primary
        self.fallback = fallback

    def _fetch(self) -> list[PersonAggregate]:
        try:
            aggregates = self.primary.fetch_person_mentions()
            logger.info("primary_mention_source_loaded", aggregates=len(aggregates))
        except SQLAlchemyError as e:
            logger.warning("primary_mention_source_failed", error=str(e))
            aggregates = []

        if not aggregates and self.fallback is not None:
            logger.info("mention_source_fallback")
            aggregates = self.fallback.fetch_person_mentions()

        return aggregates

    def aggregate(self) -> list[PersonAggregate]:
        """Aggregates that look like real individuals, most mentioned first."""
        raw = self._fetch()
        persons = [p for p in raw if not is_non_person(p.normalized_name)]
        persons.sort(key=lambda p: (-p.total_mentions, p.normalized_name))

        logger.info("aggregation_complete", raw_names=len(raw), persons=len(persons))
        return persons
