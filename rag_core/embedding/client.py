"""
Embedding API Client Module

Provides an HTTP client for getting text embeddings from OpenAI-compatible APIs.
"""

import logging
import time
from typing import List, Dict, Any, Optional

import numpy as np
import requests
from tqdm import tqdm

from ..config import RAGConfig
from ..exceptions import EmbeddingFailure

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """
    Client for getting embeddings from remote API.

    Supports OpenAI-compatible API format. Implements the ``Embedder``
    interface through ``embed()``. Retries are handled here, never by the
    RAG engine.
    """

    def __init__(
        self,
        api_url: str,
        model_name: str = "text-embedding-3-small",
        api_key: Optional[str] = None,
        batch_size: int = 32,
        max_retries: int = 3,
        timeout: int = 60,
        retry_delay: float = 1.0
    ):
        """
        Initialize embedding client.

        Args:
            api_url: API endpoint URL (e.g., "http://localhost:30000/v1/embeddings")
            model_name: Model name to use
            api_key: Optional API key for authentication
            batch_size: Number of texts to embed in one request
            max_retries: Maximum number of attempts per request
            timeout: Request timeout in seconds
            retry_delay: Seconds to wait between attempts
        """
        self.api_url = api_url
        self.model_name = model_name
        self.api_key = api_key
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.timeout = timeout
        self.retry_delay = retry_delay

        # Store embedding dimension (will be set after first call)
        self.embedding_dim = None

    @classmethod
    def from_config(cls, cfg: RAGConfig) -> "EmbeddingClient":
        return cls(
            api_url=cfg.embedding_api_url,
            model_name=cfg.embedding_model,
            api_key=cfg.embedding_api_key,
            batch_size=cfg.embedding_batch_size,
            max_retries=cfg.embedding_max_retries,
            timeout=cfg.embedding_timeout,
        )

    def embed(self, text: str) -> List[float]:
        """
        Embed a single text.

        Raises:
            EmbeddingFailure: If the API keeps failing or returns no vector
        """
        embeddings = self._embed_batch_sync([text])
        if len(embeddings) != 1:
            raise EmbeddingFailure(f"Expected 1 embedding, got {len(embeddings)}")

        if self.embedding_dim is None:
            self.embedding_dim = len(embeddings[0])
        return embeddings[0]

    def embed_texts(
        self,
        texts: List[str],
        show_progress: bool = True
    ) -> np.ndarray:
        """
        Embed multiple texts synchronously.

        Args:
            texts: List of texts to embed
            show_progress: Whether to show progress bar

        Returns:
            numpy array of shape (len(texts), embedding_dim)
        """
        all_embeddings = []

        # Process in batches
        for i in tqdm(
            range(0, len(texts), self.batch_size),
            desc="Embedding texts",
            disable=not show_progress
        ):
            batch = texts[i:i + self.batch_size]
            embeddings = self._embed_batch_sync(batch)
            if len(embeddings) != len(batch):
                raise EmbeddingFailure(
                    f"Expected {len(batch)} embeddings, got {len(embeddings)}"
                )
            all_embeddings.extend(embeddings)

        embeddings_array = np.array(all_embeddings, dtype=np.float32)

        # Set embedding dimension
        if self.embedding_dim is None and len(embeddings_array) > 0:
            self.embedding_dim = embeddings_array.shape[1]

        return embeddings_array

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _embed_batch_sync(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of texts synchronously."""
        payload = {
            "input": texts,
            "model": self.model_name
        }

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = requests.post(
                    self.api_url,
                    json=payload,
                    headers=self._headers(),
                    timeout=self.timeout
                )
                response.raise_for_status()

                data = response.json()
                # The API may return items out of order
                items = sorted(data["data"], key=lambda item: item.get("index", 0))
                return [item["embedding"] for item in items]

            except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
                last_error = e
                logger.warning(
                    "Embedding request failed (attempt %d/%d): %s",
                    attempt, self.max_retries, e
                )
                if attempt < self.max_retries:
                    time.sleep(self.retry_delay)

        raise EmbeddingFailure(
            f"Failed to get embeddings after {self.max_retries} attempts: {last_error}"
        ) from last_error

    def get_info(self) -> Dict[str, Any]:
        """Get client information."""
        return {
            "api_url": self.api_url,
            "model_name": self.model_name,
            "batch_size": self.batch_size,
            "embedding_dim": self.embedding_dim,
            "has_api_key": self.api_key is not None
        }
