"""Configuration management for the retrieval layer.

Supports two modes:
- Production: Real embedding API
- Mock: Deterministic fake embeddings for demos and testing
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from src.rag.document import SimilarityMetric


class RunMode(str, Enum):
    """Embedding execution mode."""

    PRODUCTION = "production"
    MOCK = "mock"


class StoreBackend(str, Enum):
    """Available vector store backends."""

    MEMORY = "memory"
    POSTGRES = "postgres"


class RAGConfig(BaseSettings):
    """Main retrieval configuration.

    All settings can be overridden via environment variables with the RAG_ prefix.
    Example: RAG_MODE=mock, RAG_DATABASE_URL=postgresql://...
    """

    model_config = {"env_prefix": "RAG_"}

    # Core mode
    mode: RunMode = Field(default=RunMode.MOCK, description="Embedding execution mode")

    # Embedding settings
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Embedding model name"
    )
    embedding_dimensions: int = Field(
        default=384, description="Mock embedding dimensions; production models set their own"
    )

    # Chunking settings
    chunk_size: int = Field(default=1000, description="Maximum chunk length in characters")
    chunk_overlap: int = Field(
        default=200, description="Characters carried over from the previous chunk"
    )

    # Search settings
    top_k: int = Field(default=5, description="Number of documents to retrieve")
    metric: str = Field(
        default=SimilarityMetric.COSINE.value, description="Similarity metric for search"
    )

    # Store settings
    store_backend: StoreBackend = Field(
        default=StoreBackend.MEMORY, description="Vector store backend"
    )
    database_url: Optional[str] = Field(
        default=None, description="PostgreSQL connection string for the postgres backend"
    )
    table_name: str = Field(default="documents", description="Table holding stored documents")
    create_table: bool = Field(
        default=False, description="Create the pgvector extension, table and index on startup"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level for the CLI")


class MockConfig:
    """Configuration presets for mock/demo mode.

    Produces deterministic embeddings without requiring any API keys.
    Useful for testing, demos, and CI/CD pipelines.
    """

    @staticmethod
    def default() -> RAGConfig:
        """Create a default mock configuration."""
        return RAGConfig(mode=RunMode.MOCK)

    @staticmethod
    def with_overrides(**kwargs: object) -> RAGConfig:
        """Create mock config with specific overrides."""
        defaults = {"mode": RunMode.MOCK}
        defaults.update(kwargs)
        return RAGConfig(**defaults)  # type: ignore[arg-type]
