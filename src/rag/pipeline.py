"""Retrieval pipeline orchestrating chunking, embedding, and search.

The pipeline is the primary entry point for the retrieval layer. It:
1. Splits text into overlapping chunks
2. Embeds the chunks and upserts them into a vector store
3. Embeds a query and returns the nearest stored chunks

All collaborators are injected, enabling mock mode for demos and
testing without API keys or a database.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from src.chunking.text_splitter import ChunkingStrategy, TextSplitter
from src.rag.config import RAGConfig, RunMode, StoreBackend
from src.rag.document import Document, SearchOptions, SearchResult, generate_id
from src.rag.embeddings import EmbeddingProvider, create_embedding_provider
from src.rag.errors import ConfigurationError
from src.retrieval.memory_store import InMemoryStore
from src.retrieval.postgres_store import PostgresStore
from src.retrieval.store import VectorStore

logger = logging.getLogger(__name__)


def create_vector_store(config: RAGConfig) -> VectorStore:
    """Factory function to create the configured store backend."""
    if config.store_backend == StoreBackend.MEMORY:
        return InMemoryStore()
    if not config.database_url:
        raise ConfigurationError("database_url is required for the postgres backend")

    # Only mock embeddings follow embedding_dimensions; in production the
    # model decides, so the store reads the size from the table instead
    dimension = config.embedding_dimensions if config.mode == RunMode.MOCK else None
    return PostgresStore(
        connection_string=config.database_url,
        table_name=config.table_name,
        dimension=dimension,
        create_table=config.create_table,
    )


class RetrievalPipeline:
    """Chunk-embed-store-search pipeline with pluggable components.

    Usage:
        pipeline = RetrievalPipeline(MockConfig.default())

        # Ingest text
        await pipeline.ingest(text, base_id="handbook")

        # Query
        results = await pipeline.query("What is X?")
    """

    def __init__(
        self,
        config: Optional[RAGConfig] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        store: Optional[VectorStore] = None,
        splitter: Optional[ChunkingStrategy] = None,
    ) -> None:
        self._config = config if config is not None else RAGConfig()

        # Dependency injection with sensible defaults
        self._embeddings = (
            embedding_provider
            if embedding_provider is not None
            else create_embedding_provider(self._config)
        )
        self._store = store if store is not None else create_vector_store(self._config)
        self._splitter = splitter if splitter is not None else TextSplitter(
            chunk_size=self._config.chunk_size,
            chunk_overlap=self._config.chunk_overlap,
        )

    @property
    def store(self) -> VectorStore:
        return self._store

    @property
    def splitter(self) -> ChunkingStrategy:
        return self._splitter

    async def ingest(
        self,
        text: str,
        base_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> list[Document]:
        """Chunk, embed, and store a text.

        Returns:
            The stored chunk documents, with their ids filled in.
        """
        documents = self._splitter.split_to_documents(text, base_id=base_id, metadata=metadata)
        if not documents:
            return []

        # Ids are fixed here so callers learn what the store holds
        documents = [
            d if d.id is not None else replace(d, id=generate_id()) for d in documents
        ]
        embeddings = await self._embeddings.embed_batch([d.content for d in documents])
        await self._store.add(documents, embeddings)

        logger.info("Ingested %d chunks%s", len(documents), f" from {base_id}" if base_id else "")
        return documents

    async def query(
        self,
        text: str,
        top_k: Optional[int] = None,
        options: Optional[SearchOptions] = None,
    ) -> list[SearchResult]:
        """Return the stored chunks nearest to ``text``.

        Args:
            text: The query text
            top_k: Override number of results to return
            options: Filter and metric; an unset metric uses the configured one
        """
        k = top_k if top_k is not None else self._config.top_k
        options = options if options is not None else SearchOptions()
        if options.metric is None:
            options = replace(options, metric=self._config.metric)

        query_embedding = await self._embeddings.embed(text)
        results = await self._store.search(query_embedding, k, options)
        logger.debug("Query returned %d results", len(results))
        return results
