"""Chunking module for splitting documents into overlapping pieces."""

from .chunker import DocumentChunker, chunk_spans, split_text

__all__ = ["DocumentChunker", "chunk_spans", "split_text"]
