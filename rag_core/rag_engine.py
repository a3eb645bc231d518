"""
RAG Engine - Main Module

Orchestrates ingestion (chunk -> embed -> store) and query
(embed -> rank) over one shared, lock-guarded vector store.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tqdm import tqdm

from .chunking import DocumentChunker
from .config import RAGConfig
from .context import to_hits
from .embedding.base import Embedder
from .exceptions import ConfigurationError, EmbeddingFailure, EmptyStore, RAGError
from .indexing import VectorStore
from .loaders import read_document
from .result import Result
from .retrieval import Ranker
from .types import ChunkMetadata, IngestReport, Record, StoreStatus, as_vector

logger = logging.getLogger(__name__)


class RAGEngine:
    """
    Retrieval core integrating chunking, embedding, storage and ranking.

    States: Empty (count == 0, only ingestion is meaningful) and Populated
    (count > 0, ingestion and query both valid); ``reset()`` returns to Empty.
    Several threads may ingest and query at once. Embedding calls happen
    outside the store lock; a query may see part of a document whose
    ingestion is still running, but never part of a record.
    """

    def __init__(
        self,
        embedder: Optional[Embedder] = None,
        store: Optional[VectorStore] = None,
        chunker: Optional[DocumentChunker] = None,
        ranker: Optional[Ranker] = None,
        config: Optional[RAGConfig] = None,
        verbose: bool = False
    ):
        """
        Initialize the engine.

        Args:
            embedder: Default embedder; can be overridden per call
            store: Vector store to use (a new one is created if omitted)
            chunker: Chunker (built from config if omitted)
            ranker: Ranker (default Ranker if omitted)
            config: Engine configuration (defaults if omitted)
            verbose: Log pipeline steps at INFO instead of DEBUG, and show
                progress bars while embedding
        """
        self.config = config if config is not None else RAGConfig()
        self.embedder = embedder
        self.store = store if store is not None else VectorStore(dtype=self.config.numpy_dtype)
        self.chunker = chunker if chunker is not None else DocumentChunker(
            chunk_size=self.config.chunk_size,
            chunk_overlap=self.config.chunk_overlap,
            boundary_lookback=self.config.boundary_lookback,
        )
        self.ranker = ranker if ranker is not None else Ranker()
        self.verbose = verbose

    def _log(self, message: str, *args) -> None:
        """Log a pipeline step; INFO when verbose, DEBUG otherwise."""
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message, *args)

    def _resolve_embedder(self, embedder: Optional[Embedder]) -> Embedder:
        resolved = embedder if embedder is not None else self.embedder
        if resolved is None:
            raise ConfigurationError("No embedder configured. Pass one to RAGEngine or to the call.")
        return resolved

    # ========== Ingestion ==========

    def ingest_with_report(
        self,
        text: str,
        source_id: Optional[str] = None,
        embedder: Optional[Embedder] = None
    ) -> IngestReport:
        """
        Chunk, embed and store one document.

        Only the first ``max_chunks_per_ingest`` chunks are embedded. A chunk
        whose embedding fails is logged and skipped; the rest still go in.

        Args:
            text: Full document text
            source_id: Identifier of the document
            embedder: Embedder for this call (defaults to the engine's)

        Returns:
            IngestReport with stored / failed / dropped counts

        Raises:
            ConfigurationError: If no embedder is available
            DimensionMismatch: If an embedding does not match the store dimension
        """
        embedder = self._resolve_embedder(embedder)

        chunks = self.chunker.chunk_text(text, source_id)
        max_chunks = self.config.max_chunks_per_ingest
        considered = chunks[:max_chunks]
        self._log(
            "Split %s into %d chunks; processing %d (limit %d)",
            source_id, len(chunks), len(considered), max_chunks
        )

        stored = 0
        failed = 0
        for chunk in tqdm(considered, desc="Embedding chunks", disable=not self.verbose):
            try:
                vector = as_vector(embedder.embed(chunk.text), self.store.dtype)
            except Exception as e:
                # One bad chunk must not void the rest of the document
                failed += 1
                logger.warning(
                    "Failed to generate embedding for chunk %d of %s: %s",
                    chunk.index, source_id, e
                )
                continue

            metadata = ChunkMetadata(
                source_id=source_id,
                index=chunk.index,
                total_chunks=len(considered),
            )
            self.store.append(chunk.text, vector, metadata)
            stored += 1

        report = IngestReport(
            source_id=source_id,
            total_chunks=len(chunks),
            considered=len(considered),
            stored=stored,
            failed=failed,
        )

        if failed:
            logger.warning(
                "Ingested %d chunks from %s with %d embedding failures",
                stored, source_id, failed
            )
        else:
            logger.info("Successfully ingested %d chunks from %s", stored, source_id)
        return report

    def ingest(
        self,
        text: str,
        source_id: Optional[str] = None,
        embedder: Optional[Embedder] = None
    ) -> int:
        """
        Ingest one document.

        Returns:
            Number of chunks stored
        """
        return self.ingest_with_report(text, source_id, embedder).stored

    def ingest_file(
        self,
        file_path: Union[str, Path],
        source_id: Optional[str] = None,
        encoding: str = "utf-8",
        embedder: Optional[Embedder] = None
    ) -> int:
        """
        Ingest a document from disk; PDFs have their text extracted first.

        Args:
            file_path: Path to the document
            source_id: Identifier to store (defaults to the path)
            encoding: Encoding for plain-text files
            embedder: Embedder for this call

        Returns:
            Number of chunks stored

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(file_path)
        self._log("Loading document from %s", path)

        text = read_document(path, encoding)
        self._log("Read %d characters from %s", len(text), path)

        return self.ingest(text, source_id if source_id is not None else str(path), embedder)

    def ingest_documents(
        self,
        documents: List[Dict[str, Any]],
        text_field: str = "text",
        id_field: str = "id",
        embedder: Optional[Embedder] = None
    ) -> List[IngestReport]:
        """
        Ingest several documents, applying the chunk cap to each one.

        Args:
            documents: List of document dicts
            text_field: Field containing text
            id_field: Field containing ID

        Returns:
            One IngestReport per document with text
        """
        reports = []
        for doc in documents:
            text = doc.get(text_field, "")
            if not text:
                continue
            doc_id = doc.get(id_field)
            reports.append(
                self.ingest_with_report(text, None if doc_id is None else str(doc_id), embedder)
            )

        self._log(
            "Indexed %d documents, %d chunks stored",
            len(reports), sum(r.stored for r in reports)
        )
        return reports

    def try_ingest(
        self,
        text: str,
        source_id: Optional[str] = None,
        embedder: Optional[Embedder] = None
    ) -> Result[IngestReport]:
        """Like ``ingest_with_report`` but returns a tagged Result instead of raising."""
        return Result.capture(self.ingest_with_report, text, source_id, embedder)

    # ========== Query ==========

    def _resolve_top_k(self, top_k: Optional[int]) -> int:
        top_k = self.config.default_top_k if top_k is None else top_k
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k <= 0:
            raise ConfigurationError(f"top_k must be a positive integer, got {top_k!r}")
        return top_k

    def _embed_query(self, question: str, embedder: Optional[Embedder]):
        embedder = self._resolve_embedder(embedder)
        if self.store.count() == 0:
            raise EmptyStore()

        # Embedder errors propagate unchanged
        raw = embedder.embed(question)
        try:
            return as_vector(raw, self.store.dtype)
        except ValueError as e:
            raise EmbeddingFailure(f"Embedder returned an invalid query vector: {e}") from e

    def query(
        self,
        question: str,
        top_k: Optional[int] = None,
        embedder: Optional[Embedder] = None
    ) -> List[Record]:
        """
        Retrieve the records most similar to a question.

        Args:
            question: Question text
            top_k: Number of records to return (defaults to config)
            embedder: Embedder for this call

        Returns:
            Up to top_k records, most similar first

        Raises:
            EmptyStore: If nothing has been ingested
            DimensionMismatch: If the query vector does not match the store
            ConfigurationError: If top_k is invalid or no embedder is available
        """
        return [s.record for s in self._query_scored(question, top_k, embedder)]

    def _query_scored(self, question: str, top_k: Optional[int], embedder: Optional[Embedder]):
        top_k = self._resolve_top_k(top_k)
        self._log("RAG query: %r (retrieving top %d chunks)", question, top_k)

        vector = self._embed_query(question, embedder)

        with self.store.reading() as records:
            # A reset may have run while the question was being embedded
            if not records:
                raise EmptyStore()
            ranked = self.ranker.rank_scored(vector, records, top_k)

        self._log("Retrieved %d relevant chunks", len(ranked))
        return ranked

    def search(
        self,
        question: str,
        top_k: Optional[int] = None,
        embedder: Optional[Embedder] = None
    ) -> List[Dict[str, Any]]:
        """
        Search for relevant chunks and return display-ready hits.

        Each hit carries rank, score, text, a short preview and the chunk
        metadata. An empty store gives an empty list; other errors are
        raised as in ``query``.
        """
        try:
            scored = self._query_scored(question, top_k, embedder)
        except EmptyStore:
            logger.warning("Document store is empty")
            return []
        return to_hits(scored, self.config.preview_chars)

    def try_query(
        self,
        question: str,
        top_k: Optional[int] = None,
        embedder: Optional[Embedder] = None
    ) -> Result[List[Record]]:
        """
        Like ``query`` but returns a tagged Result instead of raising.

        An embedder exception that is not a core error is reported as
        EMBEDDING_FAILURE with the original exception as its cause.
        """
        try:
            return Result.success(self.query(question, top_k, embedder))
        except RAGError as e:
            return Result.failure(e)
        except Exception as e:
            failure = EmbeddingFailure(f"Query embedding failed: {e}")
            failure.__cause__ = e
            return Result.failure(failure)

    # ========== Introspection ==========

    def status(self) -> StoreStatus:
        """Current record count and vector dimension; never fails."""
        return self.store.status()

    def reset(self) -> int:
        """
        Remove all records.

        Returns:
            Number of records removed
        """
        removed = self.store.clear()
        self._log("Document store cleared - %d chunks removed", removed)
        return removed

    def get_stats(self) -> Dict[str, Any]:
        """Get system statistics."""
        stats: Dict[str, Any] = {
            "chunker_config": {
                "chunk_size": self.chunker.chunk_size,
                "chunk_overlap": self.chunker.chunk_overlap,
                "boundary_lookback": self.chunker.boundary_lookback,
            },
            "max_chunks_per_ingest": self.config.max_chunks_per_ingest,
            "store": self.status().to_dict(),
        }

        get_info = getattr(self.embedder, "get_info", None)
        if callable(get_info):
            stats["embedding_info"] = get_info()

        return stats
