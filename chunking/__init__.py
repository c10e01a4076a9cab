"""
Chunking Module - Recursive separator-based text splitting for RAG

Splits long documents into bounded-size, optionally overlapping chunks
that carry their source document's metadata.

Quick Start:
    from chunking import Document, RecursiveTextSplitter, ChunkingConfig

    splitter = RecursiveTextSplitter(ChunkingConfig(chunk_size=1000, chunk_overlap=100))
    chunks = splitter.split_documents([
        Document(content=script_text, metadata={"title": "A New Hope"}),
    ])
"""

__version__ = "1.0.0"

from .exceptions import ChunkingConfigError, ChunkingError
from .models import DEFAULT_SEPARATORS, ChunkingConfig, Document
from .text_splitter import RecursiveTextSplitter
from .token_counter import count_tokens, count_tokens_batch

__all__ = [
    "__version__",
    "RecursiveTextSplitter",
    "ChunkingConfig",
    "Document",
    "DEFAULT_SEPARATORS",
    "ChunkingError",
    "ChunkingConfigError",
    "count_tokens",
    "count_tokens_batch",
]
