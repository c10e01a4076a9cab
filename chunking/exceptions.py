"""
Custom Exceptions for the Chunking Pipeline.

Exception Hierarchy:
    ChunkingError (base)
    └── ChunkingConfigError

Usage:
    from chunking.exceptions import ChunkingConfigError

    try:
        splitter = RecursiveTextSplitter(ChunkingConfig(chunk_size=100, chunk_overlap=200))
    except ChunkingConfigError as e:
        print(f"Invalid splitter settings: {e}")
"""

from __future__ import annotations

from typing import Optional


class ChunkingError(Exception):
    """
    Base exception for all chunking-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A chunking error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class ChunkingConfigError(ChunkingError):
    """
    Raised when splitter settings are invalid.

    Raised at construction time (never partway through a split) for a
    non-positive chunk_size, a negative chunk_overlap, or an overlap that
    is not smaller than the chunk size.

    Attributes:
        field: Name of the offending setting
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
