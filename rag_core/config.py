"""
Configuration for the RAG core.

Defaults are 1000-character chunks with a
200-character overlap and at most 50 chunks embedded per document.
``RAGConfig.from_env()`` overrides them from ``RAG_*`` environment variables,
reading a ``.env`` file first when one is found.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import numpy as np
from dotenv import find_dotenv, load_dotenv

from .chunking.chunker import (
    DEFAULT_BOUNDARY_LOOKBACK,
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    validate_chunk_params,
)
from .exceptions import ConfigurationError

SUPPORTED_VECTOR_DTYPES = ("float32", "float64")


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise ConfigurationError(f"Env var {name} must be an int, got {v!r}") from e


@dataclass(frozen=True)
class RAGConfig:
    # Chunking
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
    boundary_lookback: int = DEFAULT_BOUNDARY_LOOKBACK

    # Ingestion / retrieval
    max_chunks_per_ingest: int = 50
    default_top_k: int = 3
    preview_chars: int = 200
    vector_dtype: str = "float32"

    # Embedding client
    embedding_api_url: str = ""
    embedding_model: str = "text-embedding-3-small"
    embedding_api_key: Optional[str] = None
    embedding_batch_size: int = 32
    embedding_max_retries: int = 3
    embedding_timeout: int = 60

    # field_name -> ENV VAR NAME
    ENV_VARS = {
        "chunk_size": "RAG_CHUNK_SIZE",
        "chunk_overlap": "RAG_CHUNK_OVERLAP",
        "boundary_lookback": "RAG_BOUNDARY_LOOKBACK",
        "max_chunks_per_ingest": "RAG_MAX_CHUNKS_PER_INGEST",
        "default_top_k": "RAG_DEFAULT_TOP_K",
        "preview_chars": "RAG_PREVIEW_CHARS",
        "vector_dtype": "RAG_VECTOR_DTYPE",
        "embedding_api_url": "RAG_EMBEDDING_API_URL",
        "embedding_model": "RAG_EMBEDDING_MODEL",
        "embedding_api_key": "RAG_EMBEDDING_API_KEY",
        "embedding_batch_size": "RAG_EMBEDDING_BATCH_SIZE",
        "embedding_max_retries": "RAG_EMBEDDING_MAX_RETRIES",
        "embedding_timeout": "RAG_EMBEDDING_TIMEOUT",
    }

    @staticmethod
    def from_env(load_env_file: bool = True) -> "RAGConfig":
        """
        Build config from environment variables, falling back to defaults.

        Args:
            load_env_file: Load a .env file (searched from the cwd) first

        Raises:
            ConfigurationError: If a variable cannot be parsed or a value is invalid
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))

        defaults = RAGConfig()
        kwargs: Dict[str, Any] = {}
        for f in fields(RAGConfig):
            env_name = RAGConfig.ENV_VARS.get(f.name)
            if env_name is None:
                continue
            default = getattr(defaults, f.name)
            if isinstance(default, int):
                kwargs[f.name] = _env_int(env_name, default)
            elif f.name == "embedding_api_key":
                kwargs[f.name] = _env(env_name) or None
            else:
                kwargs[f.name] = _env(env_name, default)

        return RAGConfig(**kwargs)

    def __post_init__(self):
        """Fail fast on values the core cannot work with."""
        validate_chunk_params(self.chunk_size, self.chunk_overlap, self.boundary_lookback)

        for name in ("max_chunks_per_ingest", "default_top_k", "embedding_batch_size",
                     "embedding_max_retries", "embedding_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        preview = self.preview_chars
        if isinstance(preview, bool) or not isinstance(preview, int) or preview < 0:
            raise ConfigurationError(f"preview_chars must be a non-negative integer, got {preview!r}")

        if self.vector_dtype not in SUPPORTED_VECTOR_DTYPES:
            raise ConfigurationError(
                f"vector_dtype must be one of {SUPPORTED_VECTOR_DTYPES}, got {self.vector_dtype!r}"
            )

    @property
    def numpy_dtype(self) -> np.dtype:
        return np.dtype(self.vector_dtype)

    def summary(self) -> Dict[str, Any]:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "chunk_size": self.chunk_size,
            "chunk_overlap": self.chunk_overlap,
            "max_chunks_per_ingest": self.max_chunks_per_ingest,
            "default_top_k": self.default_top_k,
            "vector_dtype": self.vector_dtype,
            "embedding_api_url": self.embedding_api_url,
            "embedding_model": self.embedding_model,
            "has_api_key": self.embedding_api_key is not None,
        }
