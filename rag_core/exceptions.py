"""
Exceptions for the RAG core.

Every error raised by the core carries an ``ErrorKind`` so callers can
branch on the kind without matching exception classes.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Enumerated failure kinds surfaced by the core."""

    CONFIGURATION = "configuration"
    DIMENSION_MISMATCH = "dimension_mismatch"
    EMBEDDING_FAILURE = "embedding_failure"
    EMPTY_STORE = "empty_store"


class RAGError(Exception):
    """Base exception for all RAG core errors."""

    kind: ErrorKind


class ConfigurationError(RAGError, ValueError):
    """
    Invalid configuration.

    Raised when:
    - chunk size is not positive, or overlap is outside [0, chunk_size)
    - top_k is not positive
    - an environment variable cannot be parsed
    """

    kind = ErrorKind.CONFIGURATION


class DimensionMismatch(RAGError):
    """
    Vector dimension inconsistency between the store and an insert or query.

    Usually means the embedder configuration changed after the store
    was populated.
    """

    kind = ErrorKind.DIMENSION_MISMATCH

    def __init__(self, expected: int, actual: int, message: Optional[str] = None):
        super().__init__(
            message or f"Vector dimension mismatch: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class EmbeddingFailure(RAGError):
    """The embedder failed or returned something that is not a vector."""

    kind = ErrorKind.EMBEDDING_FAILURE

    def __init__(self, message: str, chunk_index: Optional[int] = None):
        super().__init__(message)
        self.chunk_index = chunk_index


class EmptyStore(RAGError):
    """Query issued against a store with no records."""

    kind = ErrorKind.EMPTY_STORE

    def __init__(self, message: str = "No documents have been ingested. Please ingest documents first."):
        super().__init__(message)
