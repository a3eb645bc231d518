"""
In-Memory Vector Store Module

Holds chunk records and their vectors for exact similarity search.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionMismatch
from ..types import ChunkMetadata, Record, StoreStatus, VectorLike, as_vector
from .rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


class VectorStore:
    """
    Ordered, lock-guarded collection of records.

    All records share one vector dimension, fixed by the first append after
    creation or ``clear()``. Insertion order is kept; duplicates are allowed.
    """

    def __init__(self, dtype: Union[str, np.dtype] = np.float32):
        """
        Initialize an empty store.

        Args:
            dtype: Storage dtype for vectors ("float32" or "float64")
        """
        self.dtype = np.dtype(dtype)
        self._records: List[Record] = []
        self._dimension: Optional[int] = None
        self._lock = ReadWriteLock()

    def append(self, text: str, vector: VectorLike, metadata: ChunkMetadata) -> Record:
        """
        Add one record.

        Args:
            text: Chunk text
            vector: Embedding of the chunk
            metadata: Chunk metadata

        Returns:
            The stored Record

        Raises:
            ValueError: If the vector is not a non-empty 1-D sequence
            DimensionMismatch: If the store is non-empty and the vector
                dimension differs from the stored one
        """
        # Convert outside the lock; the record is fully built before it is published
        record = Record(text=text, vector=as_vector(vector, self.dtype), metadata=metadata)

        with self._lock.write_locked():
            if self._dimension is not None and record.dimension != self._dimension:
                raise DimensionMismatch(self._dimension, record.dimension)
            if self._dimension is None:
                self._dimension = record.dimension
            self._records.append(record)

        return record

    def all(self) -> Tuple[Record, ...]:
        """Snapshot of all records in insertion order."""
        with self._lock.read_locked():
            return tuple(self._records)

    @contextmanager
    def reading(self) -> Iterator[Sequence[Record]]:
        """
        Hold the read lock and expose the live record list.

        Appends and clears wait until the block exits, so use it for exactly
        one full pass over the records and nothing slow (no network calls).
        """
        with self._lock.read_locked():
            yield self._records

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._records)

    @property
    def dimension(self) -> Optional[int]:
        """Vector dimension of stored records, None while empty."""
        with self._lock.read_locked():
            return self._dimension

    def status(self) -> StoreStatus:
        with self._lock.read_locked():
            return StoreStatus(count=len(self._records), dimension=self._dimension)

    def clear(self) -> int:
        """
        Remove all records and forget the dimension.

        Returns:
            Number of records removed
        """
        with self._lock.write_locked():
            removed = len(self._records)
            self._records = []
            self._dimension = None

        logger.info("Vector store cleared - %d records removed", removed)
        return removed
