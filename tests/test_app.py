"""Tests for vector_store.app - the FastAPI service."""

import pytest
from fastapi.testclient import TestClient

from chunking.models import ChunkingConfig
from vector_store.app import _http_error, create_app
from vector_store.config import VectorStoreServiceConfig
from vector_store.exceptions import (
    DimensionMismatchError,
    EmbeddingConnectionError,
    IndexNotInitializedError,
    VectorStoreError,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config(tmp_path):
    return VectorStoreServiceConfig(
        persist_directory=str(tmp_path / "index"),
        chunking=ChunkingConfig(chunk_size=5),
    )


@pytest.fixture
def client(config, embedder):
    return TestClient(create_app(config, embedder=embedder))


@pytest.fixture
def documents(sample_documents):
    return [doc.to_dict() for doc in sample_documents]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["entries"] == 0

    def test_split(self, client):
        response = client.post("/split", json={"text": "aa bb cc dd", "metadata": {"n": 1}})
        assert response.status_code == 200
        body = response.json()
        assert body["chunk_count"] == 2
        assert body["chunks"] == [
            {"content": "aa bb", "metadata": {"n": 1}},
            {"content": "cc dd", "metadata": {"n": 1}},
        ]

    def test_ingest_and_search(self, client, documents):
        response = client.post("/ingest", json={"documents": documents, "split": False})
        assert response.status_code == 200
        assert response.json()["documents_added"] == 4

        response = client.post("/search", json={"query": "sith", "k": 1})
        assert response.status_code == 200
        results = response.json()["results"]
        assert len(results) == 1
        assert results[0]["rank"] == 0
        assert results[0]["document"]["metadata"]["title"] == "sith"

    def test_retrieve(self, client, documents):
        client.post("/ingest", json={"documents": documents, "split": False})
        response = client.post("/retrieve", json={"query": "planet", "k": 2})
        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "planet"
        assert len(body["results"]) == 2
        assert body["context_text"].startswith("Tatooine")

    def test_save(self, client, documents, config):
        client.post("/ingest", json={"documents": documents, "split": False})
        response = client.post("/save")
        assert response.status_code == 200
        assert response.json() == {"path": config.persist_directory, "entries": 4}


class TestErrors:
    def test_search_empty_store(self, client):
        response = client.post("/search", json={"query": "jedi"})
        assert response.status_code == 409

    def test_save_empty_store(self, client):
        assert client.post("/save").status_code == 409

    def test_empty_query_rejected(self, client):
        assert client.post("/search", json={"query": ""}).status_code == 422

    def test_invalid_k_rejected(self, client):
        assert client.post("/search", json={"query": "jedi", "k": 0}).status_code == 422

    def test_empty_ingest_rejected(self, client):
        assert client.post("/ingest", json={"documents": []}).status_code == 422

    def test_embedding_backend_down(self, config):
        class DownEmbedder:
            def embed_query(self, text):
                raise EmbeddingConnectionError("http://localhost:11434")

            def embed_documents(self, texts):
                raise EmbeddingConnectionError("http://localhost:11434")

        client = TestClient(create_app(config, embedder=DownEmbedder()))
        response = client.post("/ingest", json={"documents": [{"content": "jedi"}]})
        assert response.status_code == 503


class TestHttpErrorMapping:
    @pytest.mark.parametrize("exc, status", [
        (IndexNotInitializedError(), 409),
        (DimensionMismatchError(3, 2), 422),
        (EmbeddingConnectionError("http://localhost:11434"), 503),
        (ValueError("bad input"), 400),
        (VectorStoreError("other"), 500),
        (OSError("disk full"), 500),
    ])
    def test_status_codes(self, exc, status):
        error = _http_error(exc)
        assert error.status_code == status
        assert error.detail == str(exc)
