"""Embedder interface consumed by the RAG core."""

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class Embedder(Protocol):
    """
    Maps text to a fixed-length vector.

    Implementations may raise any exception on failure (network, auth, rate
    limit); the core only distinguishes success from failure.
    """

    def embed(self, text: str) -> Sequence[float]:
        ...
