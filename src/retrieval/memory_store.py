"""In-process vector store with exact (brute-force) search.

Every search scans all entries, so results are exact. Used for
development, tests, and as the reference for accelerated backends.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from src.rag.document import (
    Document,
    SearchOptions,
    SearchResult,
    SimilarityMetric,
    generate_id,
)
from src.rag.errors import DimensionMismatchError
from src.retrieval.similarity import cosine_similarity, distance_to_score, euclidean_distance
from src.retrieval.snapshot import SnapshotRecord, decode_snapshot, encode_snapshot
from src.retrieval.store import VectorStore, check_sizes, matches_filter

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entry:
    """A stored document with its embedding, keyed by ``id``."""

    id: str
    embedding: list[float]
    document: Document


class InMemoryStore(VectorStore):
    """Dictionary-backed store; one entry per id.

    Mutations and the copy taken at the start of a search run under an
    ``asyncio.Lock``, so concurrent tasks on one event loop never observe
    a half-applied ``add`` or ``deserialize``.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def count(self) -> int:
        """Return the number of stored documents."""
        return len(self._entries)

    async def add(
        self, documents: Sequence[Document], embeddings: Sequence[Sequence[float]]
    ) -> None:
        check_sizes(documents, embeddings)
        if not documents:
            return

        entries = []
        for document, embedding in zip(documents, embeddings):
            doc_id = document.id if document.id is not None else generate_id()
            entries.append(
                Entry(
                    id=doc_id,
                    embedding=[float(x) for x in embedding],
                    document=replace(document, id=doc_id, metadata=dict(document.metadata)),
                )
            )

        async with self._lock:
            for entry in entries:
                self._entries[entry.id] = entry
        logger.debug("Upserted %d documents", len(entries))

    async def search(
        self,
        query_embedding: Sequence[float],
        top_k: int,
        options: Optional[SearchOptions] = None,
    ) -> list[SearchResult]:
        options = options or SearchOptions()
        if top_k <= 0:
            return []

        metric = options.metric if options.metric is not None else SimilarityMetric.COSINE
        if metric == SimilarityMetric.COSINE:
            score_fn = cosine_similarity
        elif metric == SimilarityMetric.EUCLIDEAN:
            score_fn = lambda a, b: distance_to_score(euclidean_distance(a, b))  # noqa: E731
        else:
            logger.debug("Unknown metric %r; no candidates", metric)
            return []

        async with self._lock:
            entries = list(self._entries.values())

        results: list[SearchResult] = []
        skipped = 0
        for entry in entries:
            if not matches_filter(entry.document.metadata, options.filter):
                continue
            try:
                score = score_fn(query_embedding, entry.embedding)
            except DimensionMismatchError:
                skipped += 1
                continue
            results.append(SearchResult(document=entry.document, score=score))

        if skipped:
            logger.debug("Skipped %d entries with mismatched dimensions", skipped)

        # sorted() is stable, so equal scores keep insertion order
        results = sorted(results, key=lambda r: r.score, reverse=True)
        return results[:top_k]

    async def delete(self, ids: Sequence[str]) -> None:
        async with self._lock:
            for doc_id in ids:
                self._entries.pop(doc_id, None)

    async def serialize(self) -> str:
        async with self._lock:
            records = [
                SnapshotRecord.from_entry(entry.document, entry.embedding)
                for entry in self._entries.values()
            ]
        return encode_snapshot(records)

    async def deserialize(self, serialized: str) -> None:
        # Decode fully before touching state so a bad token changes nothing
        records = decode_snapshot(serialized)
        entries = {
            record.id: Entry(
                id=record.id,
                embedding=list(record.embedding),
                document=record.to_document(),
            )
            for record in records
        }
        async with self._lock:
            self._entries = entries
        logger.debug("Restored %d documents from snapshot", len(entries))
