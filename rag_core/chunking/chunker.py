"""
Document Chunking Module

Provides character-based document chunking with overlap and sentence-boundary
snapping.
"""

import logging
from typing import List, Dict, Any, Optional, Tuple

from ..exceptions import ConfigurationError
from ..types import Chunk

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200
# How far back from a hard chunk end to look for a sentence terminator
DEFAULT_BOUNDARY_LOOKBACK = 200
SENTENCE_TERMINATOR = "."


def validate_chunk_params(chunk_size: int, chunk_overlap: int, boundary_lookback: int = DEFAULT_BOUNDARY_LOOKBACK) -> None:
    """
    Check chunking parameters.

    Raises:
        ConfigurationError: If chunk_size <= 0, overlap is outside
            [0, chunk_size), or boundary_lookback is negative
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    if isinstance(chunk_overlap, bool) or not isinstance(chunk_overlap, int) or chunk_overlap < 0:
        raise ConfigurationError(f"chunk_overlap must be a non-negative integer, got {chunk_overlap!r}")
    if chunk_overlap >= chunk_size:
        raise ConfigurationError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )
    if isinstance(boundary_lookback, bool) or not isinstance(boundary_lookback, int) or boundary_lookback < 0:
        raise ConfigurationError(f"boundary_lookback must be a non-negative integer, got {boundary_lookback!r}")


def chunk_spans(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    boundary_lookback: int = DEFAULT_BOUNDARY_LOOKBACK,
) -> List[Tuple[int, int]]:
    """
    Compute the [start, end) character spans of each chunk.

    A chunk that would end mid-text is pulled back to just after the last
    '.' found in the final ``boundary_lookback`` characters of the window.
    Whitespace-only spans are skipped.

    Args:
        text: Text to chunk
        chunk_size: Maximum characters per chunk (a snapped chunk may end
            one character past the window when '.' sits exactly at its end)
        chunk_overlap: Characters shared between consecutive chunks
        boundary_lookback: Size of the sentence-boundary search window

    Returns:
        List of (start, end) offsets
    """
    validate_chunk_params(chunk_size, chunk_overlap, boundary_lookback)

    spans: List[Tuple[int, int]] = []
    text_len = len(text)
    start = 0

    while start < text_len:
        end = min(start + chunk_size, text_len)

        if end < text_len:
            search_start = max(start, end - boundary_lookback)
            last_period = text.rfind(SENTENCE_TERMINATOR, search_start + 1, end + 1)
            if last_period > search_start:
                end = last_period + 1

        if text[start:end].strip():
            spans.append((start, end))

        next_start = end - chunk_overlap
        if next_start <= start:
            # Snapping pulled the end back too far for the overlap to advance
            next_start = start + chunk_size
        start = next_start

    return spans


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    boundary_lookback: int = DEFAULT_BOUNDARY_LOOKBACK,
) -> List[str]:
    """Split text into overlapping, non-empty chunk strings."""
    return [text[start:end] for start, end in chunk_spans(text, chunk_size, chunk_overlap, boundary_lookback)]


class DocumentChunker:
    """
    Chunks documents into overlapping character windows.

    Chunk ends snap back to the nearest sentence terminator when one is close.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        boundary_lookback: int = DEFAULT_BOUNDARY_LOOKBACK,
    ):
        """
        Initialize the chunker.

        Args:
            chunk_size: Maximum size of each chunk in characters
            chunk_overlap: Number of characters to overlap between chunks
            boundary_lookback: How far back to look for a sentence boundary

        Raises:
            ConfigurationError: If the parameters are invalid
        """
        validate_chunk_params(chunk_size, chunk_overlap, boundary_lookback)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.boundary_lookback = boundary_lookback

    def chunk_text(self, text: str, source_id: Optional[str] = None) -> List[Chunk]:
        """
        Chunk a single text into overlapping pieces.

        Args:
            text: Text to chunk
            source_id: Optional document identifier

        Returns:
            List of Chunk objects
        """
        spans = chunk_spans(text, self.chunk_size, self.chunk_overlap, self.boundary_lookback)
        total = len(spans)

        chunks = [
            Chunk(
                text=text[start:end],
                source_id=source_id,
                index=idx,
                total_chunks=total,
                start_char=start,
                end_char=end,
            )
            for idx, (start, end) in enumerate(spans)
        ]

        logger.debug("Split %d characters from %s into %d chunks", len(text), source_id, total)
        return chunks

    def chunk_documents(
        self,
        documents: List[Dict[str, Any]],
        text_field: str = "text",
        id_field: str = "id"
    ) -> List[Chunk]:
        """
        Chunk multiple documents.

        Args:
            documents: List of document dictionaries
            text_field: Field name containing text
            id_field: Field name containing document ID

        Returns:
            List of all chunks, document by document
        """
        all_chunks: List[Chunk] = []

        for doc in documents:
            text = doc.get(text_field, "")
            if not text:
                continue

            doc_id = doc.get(id_field, None)
            all_chunks.extend(self.chunk_text(text, None if doc_id is None else str(doc_id)))

        return all_chunks

    def get_stats(self, chunks: List[Chunk]) -> Dict[str, Any]:
        """
        Get statistics about chunked documents.

        Args:
            chunks: List of chunks

        Returns:
            Statistics dictionary
        """
        sizes = [c.char_count for c in chunks]
        avg_size = sum(sizes) / len(sizes) if sizes else 0

        return {
            "total_chunks": len(chunks),
            "unique_documents": len(set(c.source_id for c in chunks if c.source_id)),
            "avg_chunk_size": avg_size,
            "min_chunk_size": min(sizes) if sizes else 0,
            "max_chunk_size": max(sizes) if sizes else 0,
        }
