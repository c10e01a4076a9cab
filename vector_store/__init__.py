"""
Vector Store Module - Brute-force similarity search over embedded chunks

Indexes L2-normalized embedding vectors (from a local Ollama model by
default) together with their documents, answers top-k cosine similarity
queries and persists the whole index to a directory.

Quick Start:
    from chunking import RecursiveTextSplitter
    from vector_store import OllamaEmbedder, VectorStore

    embedder = OllamaEmbedder()
    store = VectorStore.load_or_create("./vector_index", embedder=embedder)
    store.add_documents(RecursiveTextSplitter().split_documents(documents))
    store.save("./vector_index")

    retriever = store.as_retriever(k=4)
    docs = retriever.invoke("Who is Luke's father?")
"""

__version__ = "1.0.0"

from .embedder import EmbeddingProvider, OllamaEmbedder
from .exceptions import (
    CorruptStoreError,
    DimensionMismatchError,
    EmbeddingConnectionError,
    EmbeddingError,
    IndexNotInitializedError,
    StoreNotFoundError,
    VectorStoreError,
)
from .models import IndexEntry, IngestStats, RetrievalResult, SearchResult
from .retriever import VectorStoreRetriever
from .store import VectorStore, normalize

__all__ = [
    "__version__",
    "VectorStore",
    "VectorStoreRetriever",
    "EmbeddingProvider",
    "OllamaEmbedder",
    "normalize",
    "IndexEntry",
    "SearchResult",
    "RetrievalResult",
    "IngestStats",
    "VectorStoreError",
    "DimensionMismatchError",
    "IndexNotInitializedError",
    "StoreNotFoundError",
    "CorruptStoreError",
    "EmbeddingError",
    "EmbeddingConnectionError",
]
