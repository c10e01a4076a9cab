#!/usr/bin/env python3
"""
Vector Store CLI - index text files and query the store

Requirements:
    1. Ollama is running: ollama serve
    2. The embedding model is available: ollama pull mxbai-embed-large

Usage:
    python -m vector_store.main scripts/*.txt                      # Index files, then query
    python -m vector_store.main --query "Who is Luke's father?"     # Query only
    python -m vector_store.main notes.txt --chunk-size 500 --chunk-overlap 50
"""

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from chunking.models import ChunkingConfig, Document

from .config import VectorStoreServiceConfig
from .exceptions import EmbeddingConnectionError, IndexNotInitializedError
from .logging_config import get_logger, setup_logging
from .service import VectorStoreService

logger = get_logger("cli")


def load_text_files(paths: list[str]) -> list[Document]:
    """Read text files into Documents with source/title metadata."""
    documents: list[Document] = []
    for raw_path in paths:
        path = Path(raw_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        documents.append(Document(
            content=path.read_text(encoding="utf-8"),
            metadata={"source": str(path), "title": path.stem},
        ))
    return documents


def check_health(service: VectorStoreService) -> bool:
    """Check that Ollama is reachable and the embedding model is pulled."""
    print("\n=== Health Check ===")
    health = service.health()

    for key, value in health.items():
        status = "OK" if value is True else ("FAILED" if value is False else value)
        print(f"  {key}: {status}")

    if not health.get("healthy", False):
        print("\nOllama is not reachable or the model is missing.")
        print("  1. Start Ollama:  ollama serve")
        print(f"  2. Pull model:    ollama pull {service.config.embedding_model}")
        return False

    return True


def ingest_files(service: VectorStoreService, paths: list[str]) -> None:
    """Split, embed and index text files, then persist the store."""
    print(f"\n=== Indexing {len(paths)} file(s) ===")

    documents = load_text_files(paths)
    stats = service.ingest(documents)

    print(f"  Chunks added:     {stats.documents_added}")
    print(f"  Total entries:    {stats.total_entries}")
    print(f"  Dimension:        {stats.dimension}")
    print(f"  Embedding time:   {stats.embedding_time_seconds}s")
    print(f"  Total time:       {stats.total_time_seconds}s")
    if not service.config.autosave:
        service.save()
    print(f"  Saved to:         {service.config.persist_directory}")


def search_demo(service: VectorStoreService, query: str, k: int) -> None:
    """Print the ranked hits and the retrieval context for a query."""
    print(f"\n=== Search: \"{query}\" (top {k}) ===")

    result = service.retrieve(query, k=k)

    for hit in result.results:
        print(f"\n  --- Hit {hit.rank + 1} (score: {hit.score:.4f}) ---")
        title = hit.metadata.get("title", "?")
        print(f"  Source: {title}")
        preview = hit.content[:150].replace("\n", " ")
        print(f"  Text:   {preview}...")

    print(f"\n  === Context ({result.token_count} tokens) ===")
    print()
    print(result.context_text)
    print()


def main():
    parser = argparse.ArgumentParser(
        description="Index text files into a vector store and query it",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Text files to index (optional if the store already exists)",
    )
    parser.add_argument(
        "--query", "-q",
        default=None,
        help="Query to run against the store",
    )
    parser.add_argument(
        "-k",
        type=int,
        default=None,
        help="Number of results (default: RETRIEVER_K or 4)",
    )
    parser.add_argument(
        "--persist-dir",
        default=None,
        help="Store directory (default: VECTOR_STORE_DIR or ./vector_index)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Maximum chunk length in characters (default: 1000)",
    )
    parser.add_argument(
        "--chunk-overlap",
        type=int,
        default=None,
        help="Characters carried over between chunks (default: 0)",
    )
    parser.add_argument(
        "--separators",
        default=None,
        help="Separators in priority order, '|'-delimited, e.g. '\\nINT.|\\nEXT.|\\n\\n|\\n| |'",
    )
    parser.add_argument("--serve", action="store_true", help="Run the FastAPI server instead")
    parser.add_argument("--host", default="0.0.0.0", help="Server host")
    parser.add_argument("--port", type=int, default=8002, help="Server port")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    config = VectorStoreServiceConfig.from_env()
    if args.persist_dir:
        config.persist_directory = args.persist_dir
    if args.chunk_size is not None or args.chunk_overlap is not None or args.separators:
        config.chunking = ChunkingConfig(
            chunk_size=args.chunk_size if args.chunk_size is not None else config.chunking.chunk_size,
            chunk_overlap=(
                args.chunk_overlap if args.chunk_overlap is not None
                else config.chunking.chunk_overlap
            ),
            separators=(
                parse_separators(args.separators) if args.separators
                else config.chunking.separators
            ),
        )

    if args.serve:
        run_server(config, args.host, args.port)
        return

    service = VectorStoreService(config)

    if not check_health(service):
        sys.exit(1)

    if args.files:
        try:
            ingest_files(service, args.files)
        except FileNotFoundError as e:
            print(f"\nERROR: {e}")
            sys.exit(1)
        except EmbeddingConnectionError as e:
            logger.error("Embedding failed: %s", e)
            sys.exit(1)

    print("\n=== Store ===")
    print(f"  Entries:   {service.store.count}")
    print(f"  Dimension: {service.store.dimension}")

    if args.query:
        try:
            search_demo(service, args.query, args.k or config.default_k)
        except IndexNotInitializedError:
            print("\nThe store is empty. Index some files first:")
            print("  python -m vector_store.main file.txt")
            sys.exit(0)


def run_server(config: VectorStoreServiceConfig, host: str, port: int) -> None:
    # .app builds its module-level app from the environment on import
    from .app import create_app

    app = create_app(config)
    uvicorn.run(app, host=host, port=port)


def parse_separators(raw: str) -> list[str]:
    """Split a '|'-delimited separator list, expanding \\n, \\r and \\t escapes."""
    return [
        part.replace("\\n", "\n").replace("\\r", "\r").replace("\\t", "\t")
        for part in raw.split("|")
    ]


if __name__ == "__main__":
    main()
