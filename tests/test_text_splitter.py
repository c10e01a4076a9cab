"""Tests for chunking.text_splitter - RecursiveTextSplitter."""

import re

import pytest

from chunking.models import ChunkingConfig, Document
from chunking.text_splitter import RecursiveTextSplitter
from chunking.token_counter import count_tokens


def _splitter(chunk_size: int, chunk_overlap: int = 0, **kwargs) -> RecursiveTextSplitter:
    return RecursiveTextSplitter(
        ChunkingConfig(chunk_size=chunk_size, chunk_overlap=chunk_overlap, **kwargs)
    )


def _squash(text: str) -> str:
    return re.sub(r"\s+", "", text)


# ---------------------------------------------------------------------------
# split_text
# ---------------------------------------------------------------------------


class TestSplitText:
    def test_empty_text_returns_no_chunks(self):
        assert _splitter(10).split_text("") == []

    def test_whitespace_only_returns_no_chunks(self):
        assert _splitter(10).split_text("  \n\n  \n ") == []

    def test_short_text_is_one_chunk(self):
        assert _splitter(100).split_text("A long time ago.") == ["A long time ago."]

    def test_non_string_is_converted(self):
        assert _splitter(100).split_text(12345) == ["12345"]

    def test_character_split(self):
        splitter = _splitter(5, separators=[""])
        assert splitter.split_text("AAAAABBBBBCCCCC") == ["AAAAA", "BBBBB", "CCCCC"]

    def test_character_split_with_overlap(self):
        splitter = _splitter(5, 2, separators=[""])
        assert splitter.split_text("AAAAABBBBBCCCCC") == [
            "AAAAA", "AABBB", "BBBBC", "BCCCC", "CCC",
        ]

    def test_word_split_with_overlap(self):
        splitter = _splitter(8, 2)
        assert splitter.split_text("aa bb cc dd ee ff gg hh") == [
            "aa bb cc", "cc dd ee", "ee ff gg", "gg hh",
        ]

    def test_overlap_shrinks_to_fit(self):
        splitter = _splitter(10, 4)
        assert splitter.split_text("aaaa bbbbbbb") == ["aaaa", "aa bbbbbbb"]

    def test_prefers_paragraph_breaks(self):
        splitter = _splitter(12)
        assert splitter.split_text("Intro.\n\nalpha beta gamma delta") == [
            "Intro.", "alpha beta", "gamma delta",
        ]

    def test_separator_not_in_chunks_at_boundaries(self):
        chunks = _splitter(12).split_text("first part\n\nsecond part")
        assert chunks == ["first part", "second part"]

    def test_indivisible_piece_is_kept_whole(self):
        splitter = _splitter(4, separators=["\n\n"])
        assert splitter.split_text("abcdefghij") == ["abcdefghij"]

    def test_chunks_are_trimmed(self):
        chunks = _splitter(100).split_text("  hello  \n\n  world  ")
        assert chunks == ["hello  \n\n  world"]

    def test_chunks_respect_size(self, script_text):
        for size, overlap in [(40, 0), (80, 10), (120, 30)]:
            chunks = _splitter(size, overlap).split_text(script_text)
            assert len(chunks) > 1
            assert all(len(c) <= size for c in chunks)

    def test_no_empty_chunks(self, script_text):
        chunks = _splitter(30, 5).split_text(script_text)
        assert all(c and c == c.strip() for c in chunks)

    def test_preserves_order_without_overlap(self, script_text):
        chunks = _splitter(50).split_text(script_text)
        assert _squash("".join(chunks)) == _squash(script_text)

    def test_custom_screenplay_separators(self, script_text):
        splitter = _splitter(250, separators=["\nINT.", "\nEXT.", "\n\n", "\n", " ", ""])
        chunks = splitter.split_text(script_text)
        assert chunks[0].startswith("INT. REBEL BLOCKADE RUNNER")
        assert any(c.startswith("TATOOINE - DESERT WASTELAND") for c in chunks)

    def test_is_deterministic(self, script_text):
        splitter = _splitter(60, 15)
        assert splitter.split_text(script_text) == splitter.split_text(script_text)


# ---------------------------------------------------------------------------
# Custom length functions
# ---------------------------------------------------------------------------


class TestLengthFunction:
    def test_word_count_length(self):
        splitter = RecursiveTextSplitter(
            ChunkingConfig(chunk_size=3),
            length_function=lambda text: len(text.split()),
        )
        chunks = splitter.split_text("one two three four five six seven")
        assert all(len(c.split()) <= 3 for c in chunks)
        assert " ".join(chunks) == "one two three four five six seven"

    def test_from_tiktoken_encoder(self):
        text = "the quick brown fox jumps over the lazy dog " * 6
        splitter = RecursiveTextSplitter.from_tiktoken_encoder(ChunkingConfig(chunk_size=10))
        chunks = splitter.split_text(text)
        assert len(chunks) > 1
        assert all(count_tokens(c) <= 10 for c in chunks)

    def test_properties(self):
        splitter = _splitter(300, 30)
        assert splitter.chunk_size == 300
        assert splitter.chunk_overlap == 30


# ---------------------------------------------------------------------------
# split_documents / create_documents
# ---------------------------------------------------------------------------


class TestSplitDocuments:
    def test_metadata_copied_to_each_chunk(self):
        source = Document(content="aa bb cc dd ee ff", metadata={"title": "ANH"})
        chunks = _splitter(5).split_documents([source])
        assert len(chunks) == 3
        assert all(c.metadata == {"title": "ANH"} for c in chunks)

    def test_metadata_is_not_shared(self):
        source = Document(content="aa bb cc dd", metadata={"title": "ANH"})
        chunks = _splitter(5).split_documents([source])
        chunks[0].metadata["title"] = "changed"
        assert chunks[1].metadata["title"] == "ANH"
        assert source.metadata["title"] == "ANH"

    def test_accepts_strings_and_mappings(self):
        chunks = _splitter(100).split_documents([
            "plain text",
            {"page_content": "loader text", "metadata": {"source": "a.txt"}},
        ])
        assert [c.content for c in chunks] == ["plain text", "loader text"]
        assert chunks[0].metadata == {}
        assert chunks[1].metadata == {"source": "a.txt"}

    def test_empty_document_yields_nothing(self):
        assert _splitter(10).split_documents([Document(content="")]) == []

    def test_start_index(self):
        splitter = _splitter(8, 2, add_start_index=True)
        chunks = splitter.split_documents([Document(content="aa bb cc dd ee ff gg hh")])
        assert [c.metadata["start_index"] for c in chunks] == [0, 6, 12, 18]

    def test_start_index_points_at_chunk(self, script_text):
        splitter = _splitter(70, 10, add_start_index=True)
        for chunk in splitter.split_documents([Document(content=script_text)]):
            start = chunk.metadata["start_index"]
            assert script_text[start:start + len(chunk.content)] == chunk.content

    def test_no_start_index_by_default(self):
        chunks = _splitter(5).split_documents([Document(content="aa bb cc")])
        assert all("start_index" not in c.metadata for c in chunks)

    def test_create_documents(self):
        chunks = _splitter(100).create_documents(
            ["first text", "second text"],
            metadatas=[{"n": 1}, {"n": 2}],
        )
        assert [(c.content, c.metadata["n"]) for c in chunks] == [
            ("first text", 1), ("second text", 2),
        ]

    def test_create_documents_without_metadata(self):
        chunks = _splitter(100).create_documents(["text"])
        assert chunks == [Document(content="text")]

    def test_create_documents_length_mismatch(self):
        with pytest.raises(ValueError, match="metadata"):
            _splitter(100).create_documents(["a", "b"], metadatas=[{}])
