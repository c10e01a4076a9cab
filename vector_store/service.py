import logging
from collections.abc import Iterable
from typing import Any, Optional

from chunking.models import Document
from chunking.text_splitter import RecursiveTextSplitter

from .config import VectorStoreServiceConfig
from .embedder import EmbeddingProvider, OllamaEmbedder
from .models import IngestStats, RetrievalResult, SearchResult
from .store import VectorStore

logger = logging.getLogger(__name__)


class VectorStoreService:
    """Split -> embed -> index -> persist, and query, behind one object."""

    def __init__(
        self,
        config: VectorStoreServiceConfig | None = None,
        embedder: Optional[EmbeddingProvider] = None,
    ):
        self.config = config or VectorStoreServiceConfig()
        self.splitter = RecursiveTextSplitter(self.config.chunking)
        self.embedder = embedder or OllamaEmbedder(
            model=self.config.embedding_model,
            base_url=self.config.ollama_base_url,
        )
        self.store = VectorStore.load_or_create(
            self.config.persist_directory, embedder=self.embedder
        )

    def split(self, documents: Iterable[Any]) -> list[Document]:
        return self.splitter.split_documents(documents)

    def ingest(self, documents: Iterable[Any], split: bool = True) -> IngestStats:
        docs = self.split(documents) if split else [Document.coerce(d) for d in documents]
        stats = self.store.add_documents(docs)
        if self.config.autosave and stats.documents_added:
            self.save()
        return stats

    def search(self, query: str, k: int | None = None) -> list[SearchResult]:
        k = self.config.default_k if k is None else k
        return self.store.as_retriever(k=k).invoke_with_scores(query)

    def retrieve(self, query: str, k: int | None = None) -> RetrievalResult:
        k = self.config.default_k if k is None else k
        retriever = self.store.as_retriever(k=k)
        return retriever.retrieve(query, max_context_tokens=self.config.max_context_tokens)

    def save(self) -> str:
        return str(self.store.save(self.config.persist_directory))

    def health(self) -> dict:
        status: dict[str, Any] = {
            "entries": self.store.count,
            "dimension": self.store.dimension,
            "persist_directory": self.config.persist_directory,
        }
        health_check = getattr(self.embedder, "health_check", None)
        if callable(health_check):
            status.update(health_check())
        return status
