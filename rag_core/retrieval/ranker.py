"""
Vector Ranking Module

Exact cosine-similarity ranking of stored records against a query vector.
"""

import math
from operator import attrgetter
from typing import List, Sequence

import numpy as np

from ..exceptions import ConfigurationError, DimensionMismatch
from ..types import Record, ScoredRecord, VectorLike


def _rescale(vector: np.ndarray) -> np.ndarray:
    """Divide by the largest magnitude so products stay finite."""
    peak = float(np.max(np.abs(vector))) if vector.size else 0.0
    if peak == 0.0:
        return vector
    return vector / peak


def _norm(vector: np.ndarray) -> float:
    return math.sqrt(float(np.dot(vector, vector)))


def _cosine(query: np.ndarray, query_norm: float, other: np.ndarray) -> float:
    """Cosine of a rescaled float64 query against another vector; zero norm scores 0.0."""
    other = _rescale(other)
    other_norm = _norm(other)
    if query_norm == 0.0 or other_norm == 0.0:
        return 0.0
    score = float(np.dot(query, other)) / (query_norm * other_norm)
    if not math.isfinite(score):
        return 0.0
    # Rounding can push |score| a hair past 1
    return max(-1.0, min(1.0, score))


def cosine_similarity(vec_a: VectorLike, vec_b: VectorLike) -> float:
    """
    Compute cosine similarity between two vectors.

    Accumulates in float64 whatever the storage dtype. A zero vector carries
    no relevance signal, so any comparison involving one scores 0.0.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Cosine similarity score between -1 and 1

    Raises:
        DimensionMismatch: If vectors have different dimensions
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)

    if a.shape != b.shape:
        raise DimensionMismatch(a.size, b.size)

    a = _rescale(a)
    return _cosine(a, _norm(a), b)


class Ranker:
    """
    Scores records against a query and returns the top-K.

    Ordering is descending by score; equal scores keep insertion order, so
    repeated calls over the same records return identical output.
    """

    def score(self, query: VectorLike, records: Sequence[Record]) -> List[ScoredRecord]:
        """
        Score every record against the query, in insertion order.

        Raises:
            DimensionMismatch: If any record's dimension differs from the query
        """
        q = _rescale(np.asarray(query, dtype=np.float64))
        q_norm = _norm(q)
        dim = q.shape[0] if q.ndim == 1 else q.size

        scored: List[ScoredRecord] = []
        for record in records:
            if q.ndim != 1 or record.dimension != dim:
                raise DimensionMismatch(record.dimension, dim)
            scored.append(ScoredRecord(record, _cosine(q, q_norm, record.vector.astype(np.float64))))

        return scored

    def rank_scored(self, query: VectorLike, records: Sequence[Record], top_k: int) -> List[ScoredRecord]:
        """
        Rank records and keep their scores.

        Args:
            query: Query vector
            records: Records to rank
            top_k: Maximum number of results

        Returns:
            At most top_k scored records, best first

        Raises:
            ConfigurationError: If top_k is not positive
            DimensionMismatch: If any record's dimension differs from the query
        """
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k <= 0:
            raise ConfigurationError(f"top_k must be a positive integer, got {top_k!r}")

        scored = self.score(query, records)
        # sorted() is stable, reverse=True included
        scored = sorted(scored, key=attrgetter("score"), reverse=True)
        return scored[:top_k]

    def rank(self, query: VectorLike, records: Sequence[Record], top_k: int) -> List[Record]:
        """Return at most top_k records, most similar first."""
        return [s.record for s in self.rank_scored(query, records, top_k)]
