"""Vector store contract shared by every backend.

Callers depend on ``VectorStore`` only. The in-memory backend is the
exact reference implementation; accelerated backends must return the same
results for the same contents.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from src.rag.document import Document, SearchOptions, SearchResult
from src.rag.errors import SizeMismatchError


class VectorStore(ABC):
    """Abstract upsert/search/delete/snapshot interface over stored documents."""

    @abstractmethod
    async def add(
        self, documents: Sequence[Document], embeddings: Sequence[Sequence[float]]
    ) -> None:
        """Insert or replace documents; ``embeddings[i]`` belongs to ``documents[i]``.

        Raises:
            SizeMismatchError: If the two sequences differ in length.
        """
        ...

    @abstractmethod
    async def search(
        self,
        query_embedding: Sequence[float],
        top_k: int,
        options: Optional[SearchOptions] = None,
    ) -> list[SearchResult]:
        """Return at most ``top_k`` results, best score first.

        Entries that cannot be scored (filtered out, wrong dimension,
        unknown metric) are left out rather than failing the call.
        """
        ...

    @abstractmethod
    async def delete(self, ids: Sequence[str]) -> None:
        """Remove documents by id; unknown ids are ignored."""
        ...

    @abstractmethod
    async def serialize(self) -> str:
        """Return a snapshot of every stored (id, embedding, document)."""
        ...

    @abstractmethod
    async def deserialize(self, serialized: str) -> None:
        """Replace all contents with a snapshot, all or nothing."""
        ...


def check_sizes(
    documents: Sequence[Document], embeddings: Sequence[Sequence[float]]
) -> None:
    if len(documents) != len(embeddings):
        raise SizeMismatchError(len(documents), len(embeddings))


def matches_filter(
    metadata: Optional[Mapping[str, Any]], filter: Optional[Mapping[str, Any]]
) -> bool:
    """True when ``metadata`` holds every filter key with an equal value."""
    if not filter:
        return True
    metadata = metadata or {}
    for key, value in filter.items():
        if key not in metadata or metadata[key] != value:
            return False
    return True
