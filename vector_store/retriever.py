"""
Vector Store Retriever - query string in, ranked documents out

Composes an embedding provider with VectorStore search:

    query -> embed_query -> similarity_search_vector_with_score(vector, k)

invoke() returns just the documents in ranked order. retrieve() also
builds a token-budgeted context string from the ranked documents, ready to
be dropped into a chat prompt's "Context:" section.

Usage:
    from vector_store import VectorStore

    retriever = store.as_retriever(k=4)
    docs = retriever.invoke("What happened on Alderaan?")

    result = retriever.retrieve("What happened on Alderaan?", max_context_tokens=1024)
    print(result.context_text)
"""

import logging
from typing import TYPE_CHECKING, Optional

from chunking.models import Document
from chunking.token_counter import count_tokens

from .embedder import EmbeddingProvider
from .models import RetrievalResult, SearchResult

if TYPE_CHECKING:
    from .store import VectorStore

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "---"


class VectorStoreRetriever:
    """
    Returns the top-k documents for a query string.

    Holds no state beyond the store, the embedder and k.
    """

    def __init__(
        self,
        store: "VectorStore",
        embedder: EmbeddingProvider,
        k: int = 4,
    ):
        """
        Initialize the retriever.

        Args:
            store: The VectorStore to search.
            embedder: Provider used to embed queries. Must produce vectors
                      of the store's dimension.
            k: Number of documents to return per query.
        """
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        self.store = store
        self.embedder = embedder
        self.k = k

    def invoke(self, query: str) -> list[Document]:
        """Return the k most similar documents, best first."""
        return [result.document for result in self.invoke_with_scores(query)]

    def invoke_with_scores(self, query: str, k: Optional[int] = None) -> list[SearchResult]:
        """Like invoke(), keeping the similarity scores and ranks."""
        query_vector = self.embedder.embed_query(query)
        hits = self.store.similarity_search_vector_with_score(
            query_vector, self.k if k is None else k
        )
        return [
            SearchResult(document=document, score=score, rank=rank)
            for rank, (document, score) in enumerate(hits)
        ]

    def retrieve(
        self,
        query: str,
        max_context_tokens: int = 1024,
        k: Optional[int] = None,
    ) -> RetrievalResult:
        """
        Search and build a context string within a token budget.

        Args:
            query: The search query.
            max_context_tokens: Maximum tokens for the context string.
            k: Override the retriever's k for this call.

        Returns:
            RetrievalResult with ranked results and the context string.
        """
        results = self.invoke_with_scores(query, k)
        context_text = build_context(results, max_context_tokens)
        return RetrievalResult(
            query=query,
            results=results,
            context_text=context_text,
            token_count=count_tokens(context_text),
        )


def build_context(results: list[SearchResult], max_tokens: int) -> str:
    """
    Join result contents in ranked order, separated by "---" lines,
    stopping before the token budget is exceeded.

    The first result is always included, even if it alone is over budget.
    """
    if not results:
        return ""

    separator_tokens = count_tokens(CONTEXT_SEPARATOR)
    parts: list[str] = []
    token_count = 0

    for result in results:
        chunk_tokens = count_tokens(result.content)
        separator_cost = separator_tokens if parts else 0
        if token_count + chunk_tokens + separator_cost > max_tokens:
            if not parts:
                parts.append(result.content)
            break
        if parts:
            parts.append(CONTEXT_SEPARATOR)
            token_count += separator_tokens
        parts.append(result.content)
        token_count += chunk_tokens

    return "\n\n".join(parts)
