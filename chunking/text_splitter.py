"""
Recursive Text Splitter - Core chunking logic for the retrieval pipeline

Splits long texts into bounded-size chunks using a prioritized list of
separators, falling back to finer separators only where a piece is too
large.

Algorithm:
1. Pick the first separator that is empty or occurs in the text.
2. Split the text on it (the separator itself is discarded).
3. Buffer pieces shorter than chunk_size. A piece of chunk_size or more
   flushes the buffer and is split recursively with the remaining
   (finer) separators; its chunks are emitted as they are.
4. Merge buffered pieces greedily up to chunk_size, re-joined with the
   separator. Each new chunk starts with the last chunk_overlap characters
   of the chunk before it.
5. Trim whitespace from every chunk and drop chunks that end up empty.

Usage:
    from chunking import RecursiveTextSplitter, ChunkingConfig

    splitter = RecursiveTextSplitter(ChunkingConfig(chunk_size=1000, chunk_overlap=100))
    chunks = splitter.split_text(long_text)
    docs = splitter.split_documents(loaded_documents)
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Optional

from .models import ChunkingConfig, Document
from .token_counter import count_tokens

logger = logging.getLogger(__name__)


class RecursiveTextSplitter:
    """
    Splits text into chunks of at most chunk_size, preferring to cut at
    paragraph breaks, then line breaks, then spaces, then anywhere.
    """

    def __init__(
        self,
        config: Optional[ChunkingConfig] = None,
        length_function: Callable[[str], int] = len,
    ):
        """
        Initialize the splitter.

        Args:
            config: Chunking configuration. Uses defaults if not provided.
            length_function: Measures text length. Defaults to characters.
        """
        self.config = config or ChunkingConfig()
        self._length = length_function

    @classmethod
    def from_tiktoken_encoder(
        cls, config: Optional[ChunkingConfig] = None
    ) -> "RecursiveTextSplitter":
        """Build a splitter whose chunk_size and chunk_overlap count tokens."""
        return cls(config, length_function=count_tokens)

    @property
    def chunk_size(self) -> int:
        return self.config.chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self.config.chunk_overlap

    def split_text(self, text: Any) -> list[str]:
        """
        Split a text into chunks.

        Args:
            text: The text to split. Non-string input is converted with str().

        Returns:
            Chunks in source order. Empty input returns an empty list.
        """
        if not isinstance(text, str):
            text = str(text)
        if not text:
            return []

        chunks = self._split(text, list(self.config.separators))
        logger.debug("Split %d characters into %d chunks", len(text), len(chunks))
        return chunks

    def split_documents(self, documents: Iterable[Any]) -> list[Document]:
        """
        Split documents into chunk documents.

        Every chunk gets its own copy of the source document's metadata
        (plus "start_index" when add_start_index is enabled).
        """
        chunks: list[Document] = []
        for item in documents:
            document = Document.coerce(item)
            chunks.extend(self._chunk_document(document))
        return chunks

    def create_documents(
        self,
        texts: Sequence[Any],
        metadatas: Optional[Sequence[dict[str, Any]]] = None,
    ) -> list[Document]:
        """Split raw texts, pairing each with the metadata at the same position."""
        if metadatas is not None and len(metadatas) != len(texts):
            raise ValueError(
                f"Got {len(metadatas)} metadata entries for {len(texts)} texts"
            )
        documents = [
            Document(
                content=text if isinstance(text, str) else str(text),
                metadata=dict(metadatas[i]) if metadatas else {},
            )
            for i, text in enumerate(texts)
        ]
        return self.split_documents(documents)

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _chunk_document(self, document: Document) -> list[Document]:
        text = document.content
        chunks: list[Document] = []
        index = 0
        previous_length = 0

        for chunk in self.split_text(text):
            metadata = dict(document.metadata)
            if self.config.add_start_index:
                index = self._find_start(text, chunk, index, previous_length)
                metadata["start_index"] = index
                previous_length = len(chunk)
            chunks.append(Document(content=chunk, metadata=metadata))

        return chunks

    def _find_start(self, text: str, chunk: str, index: int, previous_length: int) -> int:
        # A chunk never starts earlier than chunk_overlap characters before
        # the end of the previous one. Token overlaps have no character
        # bound, so only the previous start is safe there.
        if self._length is len:
            offset = index + previous_length - self.chunk_overlap
        else:
            offset = index
        found = text.find(chunk, max(0, offset))
        if found == -1:
            found = text.find(chunk)
        return found

    def _split(self, text: str, separators: list[str]) -> list[str]:
        separator, remaining = self._select_separator(text, separators)
        pieces = list(text) if separator == "" else text.split(separator)

        chunks: list[str] = []
        buffered: list[str] = []

        for piece in pieces:
            if self._length(piece) < self.chunk_size:
                buffered.append(piece)
                continue

            if buffered:
                chunks.extend(self._merge(buffered, separator))
                buffered = []

            if remaining:
                chunks.extend(self._split(piece, remaining))
            else:
                # Indivisible at every separator level
                chunks.extend(self._clean([piece]))

        if buffered:
            chunks.extend(self._merge(buffered, separator))

        return chunks

    @staticmethod
    def _select_separator(text: str, separators: list[str]) -> tuple[str, list[str]]:
        """Return the separator to split on and the finer ones left for recursion."""
        for i, separator in enumerate(separators):
            if separator == "":
                return separator, []
            if separator in text:
                return separator, separators[i + 1:]
        return separators[-1], []

    def _merge(self, pieces: list[str], separator: str) -> list[str]:
        separator_length = self._length(separator)
        merged: list[str] = []
        current: Optional[str] = None
        current_length = 0

        for piece in pieces:
            piece_length = self._length(piece)

            if current is None:
                current, current_length = piece, piece_length
                continue

            if current_length + separator_length + piece_length <= self.chunk_size:
                current += separator + piece
                current_length += separator_length + piece_length
                continue

            merged.append(current)
            current, current_length = self._start_next(current, separator, piece)

        if current is not None:
            merged.append(current)

        return self._clean(merged)

    def _start_next(self, previous: str, separator: str, piece: str) -> tuple[str, int]:
        """Open a new chunk with the tail of the previous one carried over."""
        piece_length = self._length(piece)
        if self.chunk_overlap == 0:
            return piece, piece_length

        # The carried tail shrinks when the full overlap would not fit.
        budget = self.chunk_size - piece_length - self._length(separator)
        carry = self._tail(previous, min(self.chunk_overlap, budget))
        if not carry:
            return piece, piece_length

        text = carry + separator + piece
        return text, self._length(carry) + self._length(separator) + piece_length

    def _tail(self, text: str, size: int) -> str:
        """Longest suffix of text whose length is at most size."""
        if size <= 0:
            return ""
        if self._length is len:
            return text[-size:]

        start = len(text)
        while start > 0 and self._length(text[start - 1:]) <= size:
            start -= 1
        return text[start:]

    @staticmethod
    def _clean(chunks: list[str]) -> list[str]:
        stripped = (chunk.strip() for chunk in chunks)
        return [chunk for chunk in stripped if chunk]
