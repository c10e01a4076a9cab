"""
Vector Store - Brute-force cosine similarity index with on-disk persistence

Holds L2-normalized embedding vectors paired 1:1 with documents and answers
top-k similarity queries by scoring every stored vector.

Design:
- Vectors are normalized before storage and before querying, so a single
  inner-product scan (numpy matrix-vector product) yields cosine similarity
- The dimension is fixed by the first vector ever added; later vectors
  must match or the whole call fails without touching the store
- Append-only: no update or delete
- Persistence: index.npy (float32 matrix, insertion order) plus
  documents.json (content, metadata, embedding per entry), each written
  through a temporary file and an atomic rename

Usage:
    from vector_store import VectorStore, OllamaEmbedder

    embedder = OllamaEmbedder()
    store = VectorStore.load_or_create("./vector_index", embedder=embedder)
    store.add_documents(chunks)
    store.save("./vector_index")
    hits = store.similarity_search_with_score("Who trained Obi-Wan?", k=3)
"""

import io
import json
import logging
import os
import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Optional

import numpy as np

from chunking.models import Document

from .embedder import EmbeddingProvider
from .exceptions import (
    CorruptStoreError,
    DimensionMismatchError,
    IndexNotInitializedError,
    StoreNotFoundError,
)
from .models import IndexEntry, IngestStats
from .retriever import VectorStoreRetriever

logger = logging.getLogger(__name__)

INDEX_FILE = "index.npy"
DOCUMENTS_FILE = "documents.json"


def normalize(vector: Sequence[float]) -> np.ndarray:
    """
    L2-normalize a vector.

    A zero vector is returned unchanged instead of dividing by zero.
    """
    array = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(array)
    if norm == 0:
        return array
    return array / norm


class VectorStore:
    """
    In-memory vector index with brute-force similarity search.

    Single-writer: callers must not add, search or save concurrently on
    the same instance.
    """

    def __init__(self, embedder: Optional[EmbeddingProvider] = None):
        """
        Initialize an empty store.

        Args:
            embedder: Default embedding provider for add_documents and
                      query-string searches. Can also be passed per call.
        """
        self._embedder = embedder
        self._dimension: Optional[int] = None
        self._vectors = np.empty((0, 0), dtype=np.float32)
        self._documents: list[Document] = []

    @property
    def embedder(self) -> Optional[EmbeddingProvider]:
        return self._embedder

    @property
    def dimension(self) -> Optional[int]:
        """Vector dimension, or None until the first vector is added."""
        return self._dimension

    @property
    def count(self) -> int:
        return len(self._documents)

    @property
    def is_empty(self) -> bool:
        return not self._documents

    @property
    def entries(self) -> list[IndexEntry]:
        """Snapshot of all stored entries in insertion order."""
        return [
            IndexEntry(vector=row.tolist(), document=self._copy(doc))
            for row, doc in zip(self._vectors, self._documents)
        ]

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_documents(
        cls,
        documents: Iterable[Any],
        embedder: EmbeddingProvider,
    ) -> "VectorStore":
        """Create a store and index the given documents."""
        store = cls(embedder=embedder)
        store.add_documents(documents)
        return store

    @classmethod
    def load(
        cls,
        path: str | Path,
        embedder: Optional[EmbeddingProvider] = None,
    ) -> "VectorStore":
        """
        Load a store previously written by save().

        Raises:
            StoreNotFoundError: If index.npy or documents.json is missing.
            CorruptStoreError: If the files are unreadable or disagree.
            OSError: On disk read failures.
        """
        directory = Path(path)
        index_path = directory / INDEX_FILE
        documents_path = directory / DOCUMENTS_FILE

        for required in (index_path, documents_path):
            if not required.is_file():
                raise StoreNotFoundError(str(directory), missing=required.name)

        try:
            vectors = np.load(index_path, allow_pickle=False)
        except (ValueError, EOFError) as e:
            raise CorruptStoreError(str(directory), f"{INDEX_FILE}: {e}") from e

        try:
            records = json.loads(documents_path.read_text(encoding="utf-8"))
            documents = [
                Document(content=record["content"], metadata=record.get("metadata") or {})
                for record in records
            ]
        except (ValueError, KeyError, TypeError) as e:
            raise CorruptStoreError(str(directory), f"{DOCUMENTS_FILE}: {e}") from e

        if vectors.ndim != 2 or vectors.shape[0] == 0 or vectors.shape[1] == 0:
            raise CorruptStoreError(
                str(directory), f"{INDEX_FILE} holds an array of shape {vectors.shape}"
            )
        if vectors.shape[0] != len(documents):
            raise CorruptStoreError(
                str(directory),
                f"{vectors.shape[0]} vectors but {len(documents)} documents",
            )

        store = cls(embedder=embedder)
        store._vectors = vectors.astype(np.float32, copy=False)
        store._documents = documents
        store._dimension = int(vectors.shape[1])

        logger.info(
            "Loaded vector store from %s (%d entries, dimension %d)",
            directory, store.count, store._dimension,
        )
        return store

    @classmethod
    def load_or_create(
        cls,
        path: str | Path,
        embedder: Optional[EmbeddingProvider] = None,
    ) -> "VectorStore":
        """Load the store at path, or return an empty one if none was saved."""
        try:
            return cls.load(path, embedder=embedder)
        except StoreNotFoundError:
            logger.info("No vector store at %s, starting with an empty one", path)
            return cls(embedder=embedder)

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    def add_documents(
        self,
        documents: Iterable[Any],
        embedder: Optional[EmbeddingProvider] = None,
    ) -> IngestStats:
        """
        Embed documents and append them to the index.

        Args:
            documents: Documents (or anything Document.coerce accepts).
            embedder: Provider to use instead of the store's default.

        Returns:
            IngestStats with counts and timing.

        Raises:
            DimensionMismatchError: If any vector has the wrong length.
                The store is left unchanged.
        """
        total_start = time.time()
        docs = [Document.coerce(item) for item in documents]

        if not docs:
            return IngestStats(total_entries=self.count, dimension=self._dimension)

        provider = self._resolve_embedder(embedder)

        embed_start = time.time()
        vectors = provider.embed_documents([doc.content for doc in docs])
        embed_time = time.time() - embed_start

        added = self.add_vectors(docs, vectors)

        return IngestStats(
            documents_added=added,
            total_entries=self.count,
            dimension=self._dimension,
            embedding_time_seconds=round(embed_time, 2),
            total_time_seconds=round(time.time() - total_start, 2),
        )

    def add_vectors(
        self,
        documents: Sequence[Any],
        vectors: Sequence[Sequence[float]],
    ) -> int:
        """
        Append precomputed embeddings with their documents.

        All vectors are validated before anything is stored, so a failing
        call leaves the store as it was.

        Returns:
            Number of entries added.
        """
        docs = [Document.coerce(item) for item in documents]
        if len(docs) != len(vectors):
            raise ValueError(
                f"Got {len(vectors)} vectors for {len(docs)} documents"
            )
        if not docs:
            return 0

        dimension = self._dimension
        rows: list[np.ndarray] = []
        for position, vector in enumerate(vectors):
            array = normalize(vector)
            if array.ndim != 1 or array.size == 0:
                raise DimensionMismatchError(dimension, int(array.size), position)
            if dimension is None:
                dimension = int(array.size)
            elif array.size != dimension:
                raise DimensionMismatchError(dimension, int(array.size), position)
            rows.append(array)

        matrix = np.vstack(rows).astype(np.float32)
        if self._documents:
            self._vectors = np.vstack([self._vectors, matrix])
        else:
            self._vectors = matrix
        self._documents.extend(self._copy(doc) for doc in docs)
        self._dimension = dimension

        logger.info(
            "Added %d entries to vector store (total %d, dimension %d)",
            len(docs), self.count, dimension,
        )
        return len(docs)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def similarity_search_vector_with_score(
        self,
        query_vector: Sequence[float],
        k: int = 4,
    ) -> list[tuple[Document, float]]:
        """
        Return the k most similar documents for a raw query vector.

        Args:
            query_vector: Query embedding (normalized here).
            k: Number of results; clamped to the number of entries.

        Returns:
            (document, score) pairs, best first. Equal scores keep
            insertion order.

        Raises:
            IndexNotInitializedError: If the store is empty.
            DimensionMismatchError: If the query has the wrong length.
            ValueError: If k < 1.
        """
        if not self._documents:
            raise IndexNotInitializedError()
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")

        query = normalize(query_vector)
        if query.ndim != 1 or query.size != self._dimension:
            raise DimensionMismatchError(self._dimension, int(query.size))

        scores = self._vectors @ query.astype(np.float32)
        top_k = min(k, len(self._documents))
        order = np.argsort(-scores, kind="stable")[:top_k]

        logger.debug("Scored %d entries, returning top %d", len(scores), top_k)
        return [(self._copy(self._documents[i]), float(scores[i])) for i in order]

    def similarity_search_with_score(
        self,
        query: str,
        k: int = 4,
    ) -> list[tuple[Document, float]]:
        """Embed a query string with the store's provider and search."""
        provider = self._resolve_embedder(None)
        return self.similarity_search_vector_with_score(provider.embed_query(query), k)

    def similarity_search(self, query: str, k: int = 4) -> list[Document]:
        """Like similarity_search_with_score, without the scores."""
        return [doc for doc, _ in self.similarity_search_with_score(query, k)]

    def as_retriever(
        self,
        k: int = 4,
        embedder: Optional[EmbeddingProvider] = None,
    ) -> VectorStoreRetriever:
        """Wrap the store in a query-string -> top-k documents retriever."""
        return VectorStoreRetriever(self, self._resolve_embedder(embedder), k=k)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self, path: str | Path) -> Path:
        """
        Write the store to a directory, creating it if needed.

        Saving the same state twice produces byte-identical files.

        Returns:
            The directory written to.

        Raises:
            IndexNotInitializedError: If the store is empty.
            OSError: On disk write failures.
        """
        if not self._documents:
            raise IndexNotInitializedError("Cannot save an empty vector store")

        directory = Path(path)
        directory.mkdir(parents=True, exist_ok=True)

        buffer = io.BytesIO()
        np.save(buffer, self._vectors, allow_pickle=False)
        _write_atomic(directory / INDEX_FILE, buffer.getvalue())

        records = [
            {
                "content": doc.content,
                "metadata": doc.metadata,
                "embedding": row.tolist(),
            }
            for row, doc in zip(self._vectors, self._documents)
        ]
        payload = json.dumps(records, ensure_ascii=False, indent=2, sort_keys=True, default=str)
        _write_atomic(directory / DOCUMENTS_FILE, payload.encode("utf-8"))

        logger.info("Saved vector store to %s (%d entries)", directory, self.count)
        return directory

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _resolve_embedder(self, embedder: Optional[EmbeddingProvider]) -> EmbeddingProvider:
        provider = embedder or self._embedder
        if provider is None:
            raise ValueError(
                "No embedding provider: pass one to this call or to VectorStore()"
            )
        return provider

    @staticmethod
    def _copy(document: Document) -> Document:
        return Document(content=document.content, metadata=dict(document.metadata))


def _write_atomic(target: Path, data: bytes) -> None:
    tmp = target.with_name(target.name + ".tmp")
    try:
        tmp.write_bytes(data)
        os.replace(tmp, target)
    finally:
        if tmp.exists():
            tmp.unlink()
