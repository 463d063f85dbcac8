"""Embedding providers with dependency injection for mock mode.

Supports:
- OpenAI embeddings (production)
- Mock embeddings (demo/testing - deterministic, no API keys)

The stores only consume the vectors produced here; provider failures
(missing credentials, transport errors) belong to the provider.
"""

from __future__ import annotations

import hashlib
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from src.rag.config import RAGConfig, RunMode
from src.rag.errors import ConfigurationError

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Abstract embedding provider interface."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Generate the embedding for a single text."""
        ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts, preserving order."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> Optional[int]:
        """Return the embedding dimensions, or None while still unknown."""
        ...


class MockEmbeddingProvider(EmbeddingProvider):
    """Deterministic mock embeddings for testing and demos.

    Generates consistent embeddings based on text content hashing.
    Texts with shared words produce similar vectors.
    """

    def __init__(self, dimensions: int = 384) -> None:
        if dimensions <= 0:
            raise ConfigurationError(f"dimensions must be positive, got {dimensions}")
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, text: str) -> list[float]:
        return self._generate_embedding(text)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self._generate_embedding(text) for text in texts]

    def _generate_embedding(self, text: str) -> list[float]:
        """Generate a deterministic embedding from text content.

        Uses word-level hashing to create embeddings where
        texts sharing words will have higher cosine similarity.
        """
        text_hash = hashlib.sha256(text.encode()).hexdigest()
        rng = np.random.RandomState(int(text_hash[:8], 16))
        base = rng.randn(self._dimensions).astype(np.float64)

        # Texts sharing words share these components
        for word in set(text.lower().split()):
            word_hash = hashlib.md5(word.encode()).hexdigest()
            word_rng = np.random.RandomState(int(word_hash[:8], 16))
            base += word_rng.randn(self._dimensions).astype(np.float64) * 0.3

        norm = np.linalg.norm(base)
        if norm > 0:
            base = base / norm

        return base.tolist()


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI API embedding provider for production use.

    The dimension is unknown until the first response arrives.
    """

    def __init__(self, config: RAGConfig) -> None:
        api_key = config.openai_api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError(
                "OpenAI API key is required; set RAG_OPENAI_API_KEY or OPENAI_API_KEY"
            )
        self._api_key = api_key
        self._model_name = config.embedding_model
        self._dimensions: Optional[int] = None
        self._client: Any = None

    @property
    def dimensions(self) -> Optional[int]:
        return self._dimensions

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                from langchain_openai import OpenAIEmbeddings
            except ImportError as exc:
                raise ImportError(
                    "langchain-openai is required for OpenAIEmbeddingProvider. "
                    "Install it with: pip install 'langchain-openai>=0.1'"
                ) from exc
            self._client = OpenAIEmbeddings(model=self._model_name, api_key=self._api_key)
        return self._client

    async def embed(self, text: str) -> list[float]:
        embedding = await self._get_client().aembed_query(text)
        self._dimensions = len(embedding)
        return embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        embeddings = await self._get_client().aembed_documents(texts)
        if embeddings:
            self._dimensions = len(embeddings[0])
        logger.debug("Embedded %d texts with %s", len(texts), self._model_name)
        return embeddings


def create_embedding_provider(config: RAGConfig) -> EmbeddingProvider:
    """Factory function to create the appropriate embedding provider."""
    if config.mode == RunMode.MOCK:
        return MockEmbeddingProvider(dimensions=config.embedding_dimensions)
    return OpenAIEmbeddingProvider(config)
