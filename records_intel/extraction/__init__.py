"""Input documents: discovery and chunking."""

from .chunker import ChunkingConfig, chunk_text, count_tokens, split_pages
from .loader import DocumentEntry, DocumentLoadError, infer_data_set, scan_extracted

__all__ = [
    "ChunkingConfig",
    "chunk_text",
    "count_tokens",
    "split_pages",
    "DocumentEntry",
    "DocumentLoadError",
    "infer_data_set",
    "scan_extracted",
]
