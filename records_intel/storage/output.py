"""Persistence of analysis records and the deduplicated roster.

Two interchangeable stores hold per-document records: a directory of JSON
files and a database. Both are keyed by file identity and overwrite in
place, so writing the same record twice leaves one record.
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from records_intel.models import RosterEntry, TieredAnalysisResult
from records_intel.processing.filters import is_junk_name
from records_intel.processing.name_matching import normalize_name
from records_intel.storage.tables import AnalysisPerson, AnalysisRecord, RosterPerson

logger = structlog.get_logger(__name__)


class OutputStore(Protocol):
    """Destination for per-document analysis records."""

    def existing_ids(self) -> set[str]: ...

    def write_analysis(self, file_id: str, record: TieredAnalysisResult) -> None: ...


def is_already_analyzed(file_id: str, existing: set[str]) -> bool:
    """Match both output naming schemes: ``<id>`` and ``<id>.pdf``."""
    return file_id in existing or f"{file_id}.pdf" in existing


def write_json_atomic(path: Path, data: dict | list) -> None:
    """Write JSON to a temporary sibling, then rename over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class JsonOutputStore:
    """One ``<file id>.json`` file per document in a directory.

    Args:
        directory: Output directory, created on first write.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, file_id: str) -> Path:
        return self.directory / f"{file_id}.json"

    def existing_ids(self) -> set[str]:
        if not self.directory.exists():
            return set()
        return {path.name[: -len(".json")] for path in self.directory.glob("*.json")}

    def write_analysis(self, file_id: str, record: TieredAnalysisResult) -> None:
        write_json_atomic(self.path_for(file_id), record.to_json_dict())

    def read_analysis(self, file_id: str) -> TieredAnalysisResult | None:
        path = self.path_for(file_id)
        if not path.exists():
            return None
        return TieredAnalysisResult.model_validate_json(path.read_text(encoding="utf-8"))


class DatabaseOutputStore:
    """Analysis rows plus one person row per mention, keyed by file id.

    Person rows carry the normalized name used by the database mention
    source. Raw names that are extraction noise are not stored as persons.

    Args:
        session_factory: SQLAlchemy session factory.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def existing_ids(self) -> set[str]:
        with self._session_factory() as session:
            return set(session.execute(select(AnalysisRecord.file_id)).scalars())

    def write_analysis(self, file_id: str, record: TieredAnalysisResult) -> None:
        row = AnalysisRecord(
            file_id=file_id,
            file_name=record.file_name,
            data_set=record.data_set,
            document_type=record.document_type,
            date_original=record.date_original,
            summary=record.summary,
            tier=int(record.tier),
            cost_cents=record.cost_cents,
            input_tokens=record.input_tokens,
            output_tokens=record.output_tokens,
            analyzed_at=record.analyzed_at,
            payload=json.dumps(record.to_json_dict(), ensure_ascii=False),
        )
        for person in record.persons:
            if is_junk_name(person.name):
                continue
            row.persons.append(
                AnalysisPerson(
                    name=person.name,
                    normalized_name=normalize_name(person.name),
                    role=person.role,
                    category=person.category.value,
                    mention_count=person.mention_count,
                )
            )

        with self._session_factory() as session:
            existing = session.execute(
                select(AnalysisRecord).where(AnalysisRecord.file_id == file_id)
            ).scalar_one_or_none()
            if existing is not None:
                session.delete(existing)
                session.flush()
            session.add(row)
            session.commit()

    def read_analysis(self, file_id: str) -> TieredAnalysisResult | None:
        with self._session_factory() as session:
            payload = session.execute(
                select(AnalysisRecord.payload).where(AnalysisRecord.file_id == file_id)
            ).scalar_one_or_none()
        return TieredAnalysisResult.model_validate_json(payload) if payload else None


def write_roster(
    entries: list[RosterEntry],
    path: Path,
    source_names: int = 0,
    session_factory: sessionmaker | None = None,
) -> None:
    """Publish the roster as a JSON file and, optionally, a table.

    The table is replaced wholesale in one transaction, so re-running
    with the same entries leaves the same rows.

    Args:
        entries: Roster entries, most mentioned first.
        path: JSON file to write.
        source_names: Number of aggregated names the roster was built from.
        session_factory: Database to mirror the roster into, if any.
    """
    document = {
        "generatedAt": datetime.now(timezone.utc).isoformat(),
        "sourceNames": source_names,
        "persons": [entry.to_json_dict() for entry in entries],
    }
    write_json_atomic(Path(path), document)

    if session_factory is not None:
        with session_factory() as session:
            session.execute(delete(RosterPerson))
            session.add_all(
                RosterPerson(
                    name=entry.name,
                    role=entry.role,
                    category=entry.category,
                    total_mentions=entry.total_mentions,
                    doc_count=entry.doc_count,
                )
                for entry in entries
            )
            session.commit()

    logger.info("roster_written", path=str(path), persons=len(entries))


def read_roster(path: Path) -> list[RosterEntry]:
    """Load roster entries written by ``write_roster``."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [RosterEntry.model_validate(item) for item in data.get("persons", [])]
