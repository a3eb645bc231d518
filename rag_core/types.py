"""
Shared data types for the RAG core.

Chunks, stored records and the small result types passed between the
chunker, the vector store, the ranker and the engine.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

VectorLike = Union[Sequence[float], np.ndarray]


def as_vector(values: VectorLike, dtype: Union[str, np.dtype] = np.float32) -> np.ndarray:
    """
    Convert embedder output into a read-only 1-D vector.

    Args:
        values: Sequence of numbers (list, tuple or numpy array)
        dtype: Storage dtype

    Returns:
        Read-only numpy array of shape (dimension,)

    Raises:
        ValueError: If values are not a non-empty 1-D sequence of finite numbers
    """
    try:
        vector = np.array(values, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Vector must be a sequence of numbers: {e}") from e

    if vector.ndim != 1:
        raise ValueError(f"Vector must be 1-D, got shape {vector.shape}")
    if vector.size == 0:
        raise ValueError("Vector must not be empty")
    if not np.all(np.isfinite(vector)):
        raise ValueError("Vector must contain only finite values")

    vector.flags.writeable = False
    return vector


@dataclass(frozen=True)
class Chunk:
    """A contiguous piece of a source document produced by the chunker."""

    text: str
    source_id: Optional[str]
    index: int
    total_chunks: int
    start_char: int
    end_char: int

    @property
    def chunk_id(self) -> str:
        return f"{self.source_id}_chunk_{self.index}" if self.source_id else f"chunk_{self.index}"

    @property
    def char_count(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class ChunkMetadata:
    """Per-record metadata attached at ingestion time."""

    source_id: Optional[str]
    index: int
    total_chunks: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_id": self.source_id,
            "chunk_index": self.index,
            "total_chunks": self.total_chunks,
        }


@dataclass(frozen=True, eq=False)
class Record:
    """Chunk text, its vector and metadata: the unit held by the vector store."""

    text: str
    vector: np.ndarray
    metadata: ChunkMetadata

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])


@dataclass(frozen=True)
class ScoredRecord:
    """A record paired with its similarity to one query."""

    record: Record
    score: float


@dataclass(frozen=True)
class StoreStatus:
    """Read-only snapshot of the store size and vector dimension."""

    count: int
    dimension: Optional[int] = None

    @property
    def ready(self) -> bool:
        return self.count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "dimension": self.dimension,
            "ready": self.ready,
        }


@dataclass(frozen=True)
class IngestReport:
    """Outcome of one ingestion call."""

    source_id: Optional[str]
    total_chunks: int
    considered: int
    stored: int
    failed: int

    @property
    def dropped(self) -> int:
        """Chunks beyond the ingestion cap that were never embedded."""
        return self.total_chunks - self.considered

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_id": self.source_id,
            "total_chunks": self.total_chunks,
            "considered": self.considered,
            "stored": self.stored,
            "failed": self.failed,
            "dropped": self.dropped,
        }
