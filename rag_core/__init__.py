"""
RAG Core

In-memory retrieval core: sentence-aware chunking, embedding, exact cosine
ranking and a thread-safe vector store.
"""

from .rag_engine import RAGEngine
from .chunking import DocumentChunker, split_text
from .config import RAGConfig
from .context import compose_context, to_hits
from .embedding import Embedder, EmbeddingClient
from .exceptions import (
    ConfigurationError,
    DimensionMismatch,
    EmbeddingFailure,
    EmptyStore,
    ErrorKind,
    RAGError,
)
from .indexing import VectorStore
from .logging_utils import configure_logging
from .result import Result
from .retrieval import Ranker, cosine_similarity
from .types import Chunk, ChunkMetadata, IngestReport, Record, ScoredRecord, StoreStatus

__version__ = "0.1.0"

__all__ = [
    "RAGEngine",
    "DocumentChunker",
    "split_text",
    "RAGConfig",
    "compose_context",
    "to_hits",
    "Embedder",
    "EmbeddingClient",
    "ConfigurationError",
    "DimensionMismatch",
    "EmbeddingFailure",
    "EmptyStore",
    "ErrorKind",
    "RAGError",
    "VectorStore",
    "configure_logging",
    "Result",
    "Ranker",
    "cosine_similarity",
    "Chunk",
    "ChunkMetadata",
    "IngestReport",
    "Record",
    "ScoredRecord",
    "StoreStatus",
]
