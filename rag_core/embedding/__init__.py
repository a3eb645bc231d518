"""Embedding module: embedder interface and HTTP embedding client."""

from .base import Embedder
from .client import EmbeddingClient

__all__ = ["Embedder", "EmbeddingClient"]
