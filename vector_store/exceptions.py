"""
Custom Exceptions for the Vector Store.

Exception Hierarchy:
    VectorStoreError (base)
    ├── DimensionMismatchError
    ├── IndexNotInitializedError
    ├── StoreNotFoundError
    ├── CorruptStoreError
    └── EmbeddingError
        └── EmbeddingConnectionError

Disk failures during save/load are not wrapped: the underlying OSError
reaches the caller unchanged.

Usage:
    from vector_store.exceptions import StoreNotFoundError

    try:
        store = VectorStore.load("./vector_index")
    except StoreNotFoundError:
        store = VectorStore()
"""

from __future__ import annotations

from typing import Optional


class VectorStoreError(Exception):
    """
    Base exception for all vector store errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A vector store error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class DimensionMismatchError(VectorStoreError):
    """
    Raised when a vector's length differs from the store's dimension.

    The failing call leaves the store unchanged.

    Attributes:
        expected: The store's dimension
        actual: Length of the offending vector
        position: Index of the offending vector within the call (if any)
    """

    def __init__(
        self,
        expected: Optional[int],
        actual: int,
        position: Optional[int] = None,
    ):
        self.expected = expected
        self.actual = actual
        self.position = position

        if expected is None:
            message = f"Expected a non-empty vector, got dimension {actual}"
        else:
            message = f"Expected vector of dimension {expected}, got {actual}"
        if position is not None:
            message = f"{message} (vector {position})"
        super().__init__(message)


class IndexNotInitializedError(VectorStoreError):
    """Raised when searching or saving a store that holds no entries."""

    def __init__(self, message: str = "Vector index not initialized: the store is empty"):
        super().__init__(message)


class StoreNotFoundError(VectorStoreError):
    """
    Raised when loading from a directory with no saved store.

    Recoverable: the usual reaction is to build a fresh store.

    Attributes:
        path: The directory that was searched
    """

    def __init__(self, path: str, missing: Optional[str] = None):
        self.path = path
        self.missing = missing
        super().__init__(
            f"No saved vector store found at {path}",
            details=f"missing {missing}" if missing else None,
        )


class CorruptStoreError(VectorStoreError):
    """
    Raised when saved store files exist but are inconsistent or unreadable.

    Attributes:
        path: The store directory
    """

    def __init__(self, path: str, details: Optional[str] = None):
        self.path = path
        super().__init__(f"Saved vector store at {path} is corrupted", details)


class EmbeddingError(VectorStoreError):
    """
    Raised when the embedding provider fails to produce vectors.

    Attributes:
        model: Embedding model name (if known)
        original_error: The underlying client exception
    """

    def __init__(
        self,
        message: str = "Embedding generation failed",
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.model = model
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class EmbeddingConnectionError(EmbeddingError):
    """Raised when the embedding backend cannot be reached."""

    def __init__(
        self,
        base_url: str,
        original_error: Optional[Exception] = None,
    ):
        self.base_url = base_url
        super().__init__(
            f"Cannot connect to Ollama at {base_url}. "
            f"Is Ollama running? Start it with: ollama serve",
            original_error=original_error,
        )
