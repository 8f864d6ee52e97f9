"""Audit capture of model responses that failed validation."""

import json
import re
from datetime import datetime, timezone
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


def sanitize_for_filename(value: str) -> str:
    """Reduce a file name to ``[A-Za-z0-9._-]``, at most 80 characters."""
    cleaned = re.sub(r"[^a-zA-Z0-9._-]+", "_", value)
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")
    return cleaned[:80] or "unknown"


class InvalidResponseSink:
    """Writes one JSON file per invalid chunk response.

    Files are named ``<timestamp>_<file stem>_chunk-<i>-of-<n>.json``. The
    directory is a debugging surface; no pipeline stage reads it back.

    Args:
        directory: Target directory, created on first write.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def persist(
        self,
        file_name: str,
        data_set: str,
        chunk_index: int,
        chunks_total: int,
        reason: str,
        raw_content: str,
    ) -> Path | None:
        """Capture an invalid response.

        A write failure is logged and swallowed: losing an audit copy must
        not cost the document its analysis.

        Args:
            file_name: Source document file name.
            data_set: Source data-set label.
            chunk_index: Zero-based chunk index.
            chunks_total: Number of chunks in the document.
            reason: Validation failure reason.
            raw_content: Verbatim model output.

        Returns:
            Path of the written file, or None if writing failed.
        """
        captured_at = datetime.now(timezone.utc)
        stamp = re.sub(r"[:.+]", "-", captured_at.isoformat())
        out_path = self._directory / (
            f"{stamp}_{sanitize_for_filename(file_name)}"
            f"_chunk-{chunk_index + 1}-of-{chunks_total}.json"
        )

        record = {
            "fileName": file_name,
            "dataSet": data_set,
            "chunkIndex": chunk_index,
            "chunksTotal": chunks_total,
            "reason": reason,
            "capturedAt": captured_at.isoformat(),
            "rawContent": raw_content,
        }

        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            out_path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("invalid_response_persist_failed", file_name=file_name, error=str(e))
            return None

        logger.debug("invalid_response_captured", path=str(out_path))
        return out_path
