"""Page-aligned text chunking for LLM processing."""

import re
from dataclasses import dataclass

import structlog
import tiktoken

logger = structlog.get_logger(__name__)

# Zero-width split point in front of every "Page N" marker, so no text is lost
PAGE_BOUNDARY_PATTERN = re.compile(r"(?=Page \d+\s)")


@dataclass
class ChunkingConfig:
    """Configuration for document chunking."""

    max_chars: int = 24000  # ~6000 tokens
    encoding_name: str = "cl100k_base"  # GPT-4 encoding, reasonable default


def split_pages(text: str) -> list[str]:
    """Split text in front of each page marker.

    Any text before the first marker is kept as its own leading piece.
    Concatenating the pieces gives back the original text.

    Args:
        text: Full document text.

    Returns:
        Non-empty page pieces in document order.
    """
    return [piece for piece in PAGE_BOUNDARY_PATTERN.split(text) if piece]


def chunk_text(text: str, max_chars: int) -> list[str]:
    """Chunk a document into pieces that fit the model context.

    Whole pages are packed greedily. A page longer than ``max_chars`` is
    emitted as its own oversized chunk instead of being cut mid-page.

    Args:
        text: Full document text.
        max_chars: Character limit per chunk.

    Returns:
        List of chunks. ``[text]`` when the text already fits.
    """
    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    current = ""
    for page in split_pages(text):
        if current and len(current) + len(page) > max_chars:
            chunks.append(current)
            current = page
        else:
            current += page

    if current:
        chunks.append(current)

    oversized = sum(1 for chunk in chunks if len(chunk) > max_chars)
    logger.debug(
        "chunking_complete",
        total_chars=len(text),
        num_chunks=len(chunks),
        oversized_chunks=oversized,
    )

    return chunks


def count_tokens(text: str, encoding_name: str = "cl100k_base") -> int:
    """Count tokens in text.

    Args:
        text: Text to count.
        encoding_name: Tiktoken encoding name.

    Returns:
        Token count.
    """
    try:
        encoding = tiktoken.get_encoding(encoding_name)
        return len(encoding.encode(text))
    except Exception:
        # Fallback estimate
        return len(text) // 4
