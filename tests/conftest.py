"""
Pytest fixtures for the chunking and vector store tests.
"""

import re

import pytest

from chunking.models import Document


VOCABULARY = ("jedi", "sith", "droid", "ship", "planet", "force")


class KeywordEmbedder:
    """
    Deterministic stand-in for an embedding model.

    Each vector counts vocabulary words in the text, plus a constant
    component so no text maps to the zero vector.
    """

    def __init__(self, vocabulary: tuple[str, ...] = VOCABULARY):
        self.vocabulary = vocabulary
        self.query_calls: list[str] = []
        self.document_calls: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return len(self.vocabulary) + 1

    def _vector(self, text: str) -> list[float]:
        words = re.findall(r"[a-z]+", text.lower())
        vector = [float(words.count(term)) for term in self.vocabulary]
        vector.append(0.1)
        return vector

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self._vector(text)

    def embed_documents(self, texts):
        self.document_calls.append(list(texts))
        return [self._vector(t) for t in texts]


@pytest.fixture
def embedder():
    """A deterministic keyword-count embedder."""
    return KeywordEmbedder()


@pytest.fixture
def sample_documents():
    """Four short documents about distinct topics."""
    return [
        Document(
            content="The Jedi use the Force to protect the galaxy.",
            metadata={"title": "jedi", "movie": "A New Hope"},
        ),
        Document(
            content="The Sith embrace the dark side of the Force.",
            metadata={"title": "sith", "movie": "Return of the Jedi"},
        ),
        Document(
            content="An astromech droid repairs the ship in flight.",
            metadata={"title": "droid", "movie": "A New Hope"},
        ),
        Document(
            content="Tatooine is a desert planet with two suns.",
            metadata={"title": "planet", "movie": "A New Hope"},
        ),
    ]


@pytest.fixture
def script_text():
    """A small screenplay-like text with paragraphs, lines and words."""
    return (
        "INT. REBEL BLOCKADE RUNNER - MAIN HALLWAY\n"
        "The awesome yellow planet of Tatooine emerges from a total eclipse.\n\n"
        "A tiny silver spacecraft races through the starfield, chased by a "
        "gigantic Imperial Stardestroyer.\n\n"
        "EXT. TATOOINE - DESERT WASTELAND - DAY\n"
        "The two suns of Tatooine slowly set behind the dunes while a lonely "
        "farm boy watches the sky and dreams about joining the academy.\n"
        "THREEPIO: Did you hear that? They've shut down the main reactor."
    )
