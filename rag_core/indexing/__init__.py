"""Indexing module for the in-memory vector store."""

from .rwlock import ReadWriteLock
from .vector_store import VectorStore

__all__ = ["ReadWriteLock", "VectorStore"]
