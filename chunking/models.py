"""
Data Models for the Chunking Pipeline

Defines:
1. Document - Text content with key/value metadata (source documents and chunks)
2. ChunkingConfig - Configuration for chunk size, overlap and separators

Design Principles:
- Pydantic v2 for validation and serialization
- Documents are immutable; metadata is copied, never shared, between chunks
- Heterogeneous input (plain strings, dicts, loader output) is normalized
  into a Document at the boundary via Document.coerce()

Usage:
    config = ChunkingConfig(chunk_size=500, chunk_overlap=50)
    doc = Document(content="Some long text...", metadata={"title": "Intro"})
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ChunkingConfigError

DEFAULT_SEPARATORS = ["\n\n", "\n", " ", ""]

# Keys accepted as the text field when coercing a mapping into a Document.
_CONTENT_KEYS = ("content", "page_content", "pageContent")


class Document(BaseModel):
    """
    A piece of text with attached metadata.

    Used both for raw source documents and for the chunks derived from them.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(
        ...,
        description="The text content",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Arbitrary key/value metadata (source, title, ...)",
    )

    @classmethod
    def coerce(cls, value: Any) -> "Document":
        """
        Normalize an arbitrary input into a Document.

        - Document: returned unchanged
        - str: becomes the content, with empty metadata
        - Mapping with a content/page_content/pageContent key: content plus
          its optional "metadata" mapping
        - anything else: its string representation becomes the content
        """
        if isinstance(value, Document):
            return value
        if isinstance(value, str):
            return cls(content=value)
        if isinstance(value, Mapping):
            for key in _CONTENT_KEYS:
                if key in value:
                    metadata = value.get("metadata") or {}
                    return cls(content=str(value[key]), metadata=dict(metadata))
        return cls(content=str(value))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ChunkingConfig(BaseModel):
    """
    Configuration for the recursive text splitter.

    Lengths are measured by the splitter's length function (characters by
    default, tiktoken tokens for splitters built with from_tiktoken_encoder).
    """
    chunk_size: int = Field(
        1000,
        description="Maximum length of a chunk",
    )
    chunk_overlap: int = Field(
        0,
        description="Length of trailing context carried into the next chunk",
    )
    separators: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEPARATORS),
        description="Separators in priority order; '' splits into characters",
    )
    add_start_index: bool = Field(
        False,
        description="Record each chunk's offset in the source as metadata['start_index']",
    )

    def model_post_init(self, __context: Any) -> None:
        if self.chunk_size <= 0:
            raise ChunkingConfigError(
                f"chunk_size ({self.chunk_size}) must be positive",
                field="chunk_size",
            )
        if self.chunk_overlap < 0:
            raise ChunkingConfigError(
                f"chunk_overlap ({self.chunk_overlap}) must not be negative",
                field="chunk_overlap",
            )
        if self.chunk_overlap >= self.chunk_size:
            raise ChunkingConfigError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than "
                f"chunk_size ({self.chunk_size})",
                field="chunk_overlap",
            )
        if not self.separators:
            raise ChunkingConfigError(
                "separators must contain at least one entry",
                field="separators",
            )
