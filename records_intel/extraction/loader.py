"""Discovery and lazy loading of extracted document files."""

import json
import re
from dataclasses import dataclass
from pathlib import Path

import structlog
from pydantic import ValidationError

from records_intel.models import ExtractedDocument

logger = structlog.get_logger(__name__)

DATA_SET_PATTERN = re.compile(r"ds(\d+)")


class DocumentLoadError(Exception):
    """Extracted document file could not be read or parsed."""

    pass


@dataclass(frozen=True)
class DocumentEntry:
    """Location of one extracted document on disk.

    Only the path is held; text is read on demand so a scan over tens of
    thousands of files stays small in memory.
    """

    path: Path
    file_id: str
    data_set: str

    def load(self) -> ExtractedDocument:
        """Read and parse the extracted document.

        Raises:
            DocumentLoadError: If the file is unreadable or not a document object.
        """
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return ExtractedDocument.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise DocumentLoadError(f"Cannot load {self.path}: {e}") from e


def infer_data_set(path: Path) -> str:
    """Data-set id from a ``ds<N>`` segment of the path, else ``"unknown"``."""
    match = DATA_SET_PATTERN.search(path.as_posix())
    return match.group(1) if match else "unknown"


def scan_extracted(input_dir: Path) -> list[DocumentEntry]:
    """Recursively find extracted ``*.json`` documents.

    Args:
        input_dir: Root directory of the extraction output.

    Returns:
        Entries sorted by path for a deterministic processing order. The
        data set is read from the path below ``input_dir`` only.
    """
    input_dir = Path(input_dir)
    if not input_dir.exists():
        logger.warning("input_dir_missing", input_dir=str(input_dir))
        return []

    entries = [
        DocumentEntry(path=path, file_id=path.stem, data_set=infer_data_set(path.relative_to(input_dir)))
        for path in sorted(input_dir.rglob("*.json"))
        if path.is_file()
    ]

    logger.info("input_scan_complete", input_dir=str(input_dir), files=len(entries))
    return entries
