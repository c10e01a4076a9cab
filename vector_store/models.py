"""
Data Models for the Vector Store Pipeline

Defines:
1. IndexEntry - A stored (normalized vector, document) pair
2. SearchResult - A single search hit with its similarity score
3. RetrievalResult - Ranked hits plus a token-budgeted context string
4. IngestStats - Statistics from adding documents to the store
5. Request/response payloads for the HTTP API

Design Principles:
- Pydantic v2 for validation (consistent with chunking.models)
- Scores are raw inner products of normalized vectors, i.e. cosine
  similarity in [-1, 1]; higher is more similar
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from chunking.models import Document


class IndexEntry(BaseModel):
    """A document together with its L2-normalized embedding."""
    vector: list[float] = Field(
        ...,
        description="L2-normalized embedding vector",
    )
    document: Document = Field(
        ...,
        description="The indexed document",
    )


class SearchResult(BaseModel):
    """A single search result from the vector store."""
    document: Document = Field(
        ...,
        description="The matching document",
    )
    score: float = Field(
        ...,
        description="Cosine similarity (1 = identical direction, -1 = opposite)",
    )
    rank: int = Field(
        ...,
        description="Position in the ranked result list (0 = best)",
        ge=0,
    )

    @property
    def content(self) -> str:
        return self.document.content

    @property
    def metadata(self) -> dict[str, Any]:
        return self.document.metadata


class RetrievalResult(BaseModel):
    """
    Complete retrieval result for one query.

    This is what a chat prompt consumes: the ranked documents plus a
    ready-to-use context string that fits the token budget.
    """
    query: str = Field(
        ...,
        description="The original query",
    )
    results: list[SearchResult] = Field(
        default_factory=list,
        description="Search results ranked by similarity",
    )
    context_text: str = Field(
        "",
        description="Context string built from the top results",
    )
    token_count: int = Field(
        0,
        description="Token count of context_text",
    )

    @property
    def documents(self) -> list[Document]:
        return [r.document for r in self.results]


class IngestStats(BaseModel):
    """Statistics from an add operation."""
    documents_added: int = Field(
        0,
        description="Number of entries appended to the store",
    )
    total_entries: int = Field(
        0,
        description="Number of entries in the store afterwards",
    )
    dimension: int | None = Field(
        None,
        description="Vector dimension of the store",
    )
    embedding_time_seconds: float = Field(
        0.0,
        description="Time spent generating embeddings",
    )
    total_time_seconds: float = Field(
        0.0,
        description="Total time of the operation",
    )


# -----------------------------------------------------------------------------
# HTTP API payloads
# -----------------------------------------------------------------------------


class SplitRequest(BaseModel):
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class SplitResponse(BaseModel):
    chunks: list[Document] = Field(default_factory=list)
    chunk_count: int


class IngestRequest(BaseModel):
    documents: list[Document] = Field(..., min_length=1)
    split: bool = True


class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1)
    k: Optional[int] = Field(None, ge=1, le=100)


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResult] = Field(default_factory=list)


class SaveResponse(BaseModel):
    path: str
    entries: int
