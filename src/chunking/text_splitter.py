"""Sentence-aware text splitting for embedding ingestion.

Text is cut at sentence boundaries where possible and packed greedily
into chunks of at most ``chunk_size`` characters. Sentences longer than
a chunk are cut into sliding windows. A second pass prepends the tail
of the previous chunk to each chunk so neighbours share context.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.rag.document import Document
from src.rag.errors import ConfigurationError

# Break after ., ? or ! followed by whitespace, or on any run of newlines
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.?!])\s+|\n+")


class ChunkingStrategy(ABC):
    """Base class for text chunking strategies."""

    @abstractmethod
    def split_text(self, text: str) -> list[str]:
        """Split text into ordered chunk strings."""
        ...

    def split_to_documents(
        self,
        text: str,
        base_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> list[Document]:
        """Split text into Documents.

        Ids are ``"{base_id}::{index}"`` when ``base_id`` is given, otherwise
        left unset so the store generates them.
        """
        return [
            Document(
                content=part,
                id=f"{base_id}::{index}" if base_id else None,
                metadata=dict(metadata) if metadata else {},
            )
            for index, part in enumerate(self.split_text(text))
        ]


class TextSplitter(ChunkingStrategy):
    """Split text by sentences into overlapping, size-bounded chunks.

    A chunk never exceeds ``chunk_size`` before the overlap pass, so the
    final chunks are at most ``chunk_size + chunk_overlap + 1`` long.
    """

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200) -> None:
        if chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ConfigurationError(f"chunk_overlap must be non-negative, got {chunk_overlap}")
        if chunk_overlap >= chunk_size:
            raise ConfigurationError(
                f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def split_text(self, text: str) -> list[str]:
        chunks = self._pack_sentences(self._split_sentences(text))
        if self.chunk_overlap == 0:
            return chunks
        return self._apply_overlap(chunks)

    @staticmethod
    def _split_sentences(text: str) -> list[str]:
        """Split text into trimmed, non-empty sentence-like units."""
        parts = _SENTENCE_BOUNDARY.split(text.replace("\r\n", "\n"))
        return [s.strip() for s in parts if s.strip()]

    def _pack_sentences(self, sentences: list[str]) -> list[str]:
        chunks: list[str] = []
        current = ""

        for sentence in sentences:
            if len(current) + len(sentence) + 1 <= self.chunk_size:
                current = f"{current} {sentence}" if current else sentence
                continue

            if current:
                chunks.append(current)

            if len(sentence) > self.chunk_size:
                step = self.chunk_size - self.chunk_overlap
                for start in range(0, len(sentence), step):
                    chunks.append(sentence[start : start + self.chunk_size])
                current = ""
            else:
                current = sentence

        if current:
            chunks.append(current)

        return chunks

    def _apply_overlap(self, chunks: list[str]) -> list[str]:
        """Prefix each chunk with the tail of the previous pre-overlap chunk."""
        overlapped = chunks[:1]
        for prev, chunk in zip(chunks, chunks[1:]):
            keep = min(self.chunk_overlap, len(prev))
            overlapped.append(f"{prev[len(prev) - keep:]} {chunk}")
        return overlapped
