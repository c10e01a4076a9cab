"""
Embedding providers - the contract the store consumes, plus an Ollama client

The store only depends on the EmbeddingProvider protocol:

    embed_query(text) -> list[float]
    embed_documents(texts) -> list[list[float]]   # same order as input

Every vector produced by one provider instance must have the same length.

OllamaEmbedder implements the protocol with the Ollama Python client
(ollama.embed, available since ollama 0.4+), batching document embeddings
into a single request.

Usage:
    from vector_store.embedder import OllamaEmbedder

    embedder = OllamaEmbedder(model="mxbai-embed-large")
    vector = embedder.embed_query("Who is Luke's father?")
    vectors = embedder.embed_documents(["Text 1", "Text 2"])
"""

import logging
from typing import Optional, Protocol, Sequence, runtime_checkable

import ollama

from .exceptions import EmbeddingConnectionError, EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "mxbai-embed-large"
DEFAULT_BASE_URL = "http://localhost:11434"


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Maps text to dense float vectors of a fixed dimension."""

    def embed_query(self, text: str) -> list[float]:
        ...

    def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        ...


class OllamaEmbedder:
    """
    Generates text embeddings using a local Ollama model.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
    ):
        """
        Initialize the embedder.

        Args:
            model: Ollama model name for embeddings.
            base_url: Ollama API base URL.
        """
        self.model = model
        self.base_url = base_url
        self._client = ollama.Client(host=base_url)
        self._dimensions: Optional[int] = None

    @property
    def dimensions(self) -> Optional[int]:
        """Return the embedding dimensions (available after first embed call)."""
        return self._dimensions

    def embed_query(self, text: str) -> list[float]:
        """
        Generate an embedding for a single text.

        Raises:
            ValueError: If the text is empty.
            EmbeddingConnectionError: If Ollama is not reachable.
            EmbeddingError: If embedding generation fails.
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        embeddings = self._embed(text)
        return embeddings[0]

    def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Generate embeddings for multiple texts in one request.

        Returns:
            One vector per input text, in input order.

        Raises:
            ValueError: If any text is empty.
            EmbeddingConnectionError: If Ollama is not reachable.
            EmbeddingError: If embedding generation fails.
        """
        if not texts:
            return []

        for i, text in enumerate(texts):
            if not text or not text.strip():
                raise ValueError(f"Cannot embed empty text (position {i})")

        embeddings = self._embed(list(texts))
        if len(embeddings) != len(texts):
            raise EmbeddingError(
                f"Ollama returned {len(embeddings)} embeddings for {len(texts)} texts",
                model=self.model,
            )
        return embeddings

    def health_check(self) -> dict[str, bool | str]:
        """
        Check if Ollama is running and the embedding model is available.

        Returns:
            Dict with 'healthy', 'ollama_running', 'model_available',
            'model' and 'error'.
        """
        result = {
            "healthy": False,
            "ollama_running": False,
            "model_available": False,
            "model": self.model,
            "error": "",
        }

        try:
            models = self._client.list()
        except Exception as e:
            result["error"] = f"Cannot connect to Ollama: {e}"
            return result

        result["ollama_running"] = True
        model_names = [m.model for m in models.models]
        # "mxbai-embed-large" matches "mxbai-embed-large:latest"
        result["model_available"] = any(
            name.startswith(self.model) for name in model_names
        )

        if result["model_available"]:
            result["healthy"] = True
        else:
            result["error"] = (
                f"Model '{self.model}' not found. "
                f"Available: {model_names}. "
                f"Pull it with: ollama pull {self.model}"
            )

        return result

    def _embed(self, payload: str | list[str]) -> list[list[float]]:
        try:
            response = self._client.embed(model=self.model, input=payload)
        except ollama.ResponseError as e:
            raise EmbeddingError(
                f"Ollama embedding failed for model '{self.model}'",
                model=self.model,
                original_error=e,
            ) from e
        except Exception as e:
            if "Connection" in type(e).__name__ or "refused" in str(e).lower():
                raise EmbeddingConnectionError(self.base_url, original_error=e) from e
            raise EmbeddingError(
                "Embedding generation failed",
                model=self.model,
                original_error=e,
            ) from e

        embeddings = [list(vector) for vector in response["embeddings"]]
        if embeddings:
            self._dimensions = len(embeddings[0])
        logger.debug("Embedded %d text(s) with %s", len(embeddings), self.model)
        return embeddings
