"""Shared configuration loaded from environment / ``.env`` file."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from doc_qa.errors import ConfigurationError


class EmbeddingProvider(str, Enum):
    OPENAI = "openai"
    HUGGINGFACE = "huggingface"


class VectorBackend(str, Enum):
    SUPABASE = "supabase"
    CHROMA = "chroma"


class ChunkingStrategy(str, Enum):
    """How uploaded documents are cut into chunks."""

    STRUCTURAL = "structural"
    SENTENCE = "sentence"


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Embedding
    openai_api_key: str = Field(default="", description="OpenAI API key used for hosted embeddings")
    embedding_provider: EmbeddingProvider = EmbeddingProvider.OPENAI
    embedding_model: str = Field(
        default="text-embedding-ada-002",
        description=(
            "Embedding model identifier. An OpenAI model name for the "
            "'openai' provider, a HuggingFace model id for 'huggingface'."
        ),
    )

    # Vector store
    vector_backend: VectorBackend = VectorBackend.SUPABASE
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_table: str = "documents"
    supabase_match_function: str = "match_documents"
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "documents"

    # Chunking
    chunking_strategy: ChunkingStrategy = ChunkingStrategy.STRUCTURAL
    chunk_size: int = Field(default=1000, gt=0, description="Maximum characters per structural chunk")
    chunk_overlap: int = Field(default=200, ge=0)
    sentence_max_tokens: int = Field(default=2000, gt=0, description="Estimated-token ceiling per sentence chunk")

    # Upload / query
    upload_batch_size: int = Field(default=100, gt=0)
    query_top_k: int = Field(default=3, gt=0)
    max_upload_bytes: int = 50 * 1024 * 1024

    # Serving
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @model_validator(mode="after")
    def _check_chunking(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self

    def missing_credentials(self) -> list[str]:
        """Return the environment variable names required but not set."""
        missing: list[str] = []
        if self.embedding_provider is EmbeddingProvider.OPENAI and not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if self.vector_backend is VectorBackend.SUPABASE:
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_key:
                missing.append("SUPABASE_KEY")
        return missing

    def validate_credentials(self) -> None:
        """Raise :class:`ConfigurationError` when a service credential is absent."""
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(
                f"Missing service configuration: {', '.join(missing)}"
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()
