"""Vector store backends: exact in-memory search and pgvector-backed search."""

from src.retrieval.memory_store import InMemoryStore
from src.retrieval.postgres_store import PostgresStore
from src.retrieval.store import VectorStore

__all__ = ["InMemoryStore", "PostgresStore", "VectorStore"]
