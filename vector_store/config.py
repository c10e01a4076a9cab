from dataclasses import dataclass, field
import os

from chunking.models import ChunkingConfig

from .embedder import DEFAULT_BASE_URL, DEFAULT_MODEL


@dataclass
class VectorStoreServiceConfig:
    persist_directory: str = "./vector_index"
    embedding_model: str = DEFAULT_MODEL
    ollama_base_url: str = DEFAULT_BASE_URL
    default_k: int = 4
    max_context_tokens: int = 1024
    autosave: bool = True
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)

    @classmethod
    def from_env(cls) -> "VectorStoreServiceConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _bool(name: str, default: bool) -> bool:
            value = os.environ.get(name)
            if not value:
                return default
            return value.strip().lower() in ("1", "true", "yes", "on")

        chunking_defaults = ChunkingConfig()
        return cls(
            persist_directory=os.environ.get("VECTOR_STORE_DIR", cls.persist_directory),
            embedding_model=os.environ.get("EMBEDDING_MODEL", cls.embedding_model),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            default_k=_int("RETRIEVER_K", cls.default_k),
            max_context_tokens=_int("RETRIEVER_MAX_CONTEXT_TOKENS", cls.max_context_tokens),
            autosave=_bool("VECTOR_STORE_AUTOSAVE", cls.autosave),
            chunking=ChunkingConfig(
                chunk_size=_int("CHUNK_SIZE", chunking_defaults.chunk_size),
                chunk_overlap=_int("CHUNK_OVERLAP", chunking_defaults.chunk_overlap),
            ),
        )
