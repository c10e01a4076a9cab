from fastapi import FastAPI, HTTPException

from chunking.models import Document

from .config import VectorStoreServiceConfig
from .embedder import EmbeddingProvider
from .exceptions import (
    DimensionMismatchError,
    EmbeddingConnectionError,
    IndexNotInitializedError,
    VectorStoreError,
)
from .models import (
    IngestRequest,
    IngestStats,
    QueryRequest,
    RetrievalResult,
    SaveResponse,
    SearchResponse,
    SplitRequest,
    SplitResponse,
)
from .service import VectorStoreService


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, IndexNotInitializedError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, DimensionMismatchError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, EmbeddingConnectionError):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def create_app(
    config: VectorStoreServiceConfig | None = None,
    embedder: EmbeddingProvider | None = None,
) -> FastAPI:
    service = VectorStoreService(config or VectorStoreServiceConfig.from_env(), embedder)
    app = FastAPI(
        title="Vector Store Service",
        version="1.0.0",
        description="Recursive chunking, embedding and brute-force similarity search.",
    )
    app.state.service = service

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", **service.health()}

    @app.post("/split", response_model=SplitResponse)
    def split(request: SplitRequest) -> SplitResponse:
        chunks = service.split([Document(content=request.text, metadata=request.metadata)])
        return SplitResponse(chunks=chunks, chunk_count=len(chunks))

    @app.post("/ingest", response_model=IngestStats)
    def ingest(request: IngestRequest) -> IngestStats:
        try:
            return service.ingest(request.documents, split=request.split)
        except (VectorStoreError, ValueError, OSError) as exc:
            raise _http_error(exc) from exc

    @app.post("/search", response_model=SearchResponse)
    def search(request: QueryRequest) -> SearchResponse:
        try:
            results = service.search(request.query, request.k)
        except (VectorStoreError, ValueError) as exc:
            raise _http_error(exc) from exc
        return SearchResponse(query=request.query, results=results)

    @app.post("/retrieve", response_model=RetrievalResult)
    def retrieve(request: QueryRequest) -> RetrievalResult:
        try:
            return service.retrieve(request.query, request.k)
        except (VectorStoreError, ValueError) as exc:
            raise _http_error(exc) from exc

    @app.post("/save", response_model=SaveResponse)
    def save() -> SaveResponse:
        try:
            path = service.save()
        except (VectorStoreError, OSError) as exc:
            raise _http_error(exc) from exc
        return SaveResponse(path=path, entries=service.store.count)

    return app


app = create_app()
