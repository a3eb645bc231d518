"""Retrieval module for similarity ranking."""

from .ranker import Ranker, cosine_similarity

__all__ = ["Ranker", "cosine_similarity"]
