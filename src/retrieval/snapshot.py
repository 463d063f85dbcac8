"""Snapshot encoding shared by every store backend.

A snapshot is a JSON array of ``{"id", "content", "metadata", "embedding"}``
records. Both backends read and write the same format, so a snapshot taken
from one can be restored into the other.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from src.rag.document import Document
from src.rag.errors import SnapshotError


class SnapshotRecord(BaseModel):
    """One stored entry as it appears in a snapshot."""

    id: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    embedding: list[float]

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def from_entry(cls, document: Document, embedding: list[float]) -> SnapshotRecord:
        return cls(
            id=document.id or "",
            content=document.content,
            metadata=document.metadata,
            embedding=embedding,
        )

    def to_document(self) -> Document:
        return Document(content=self.content, id=self.id, metadata=dict(self.metadata))


_RECORDS = TypeAdapter(list[SnapshotRecord])


def encode_snapshot(records: list[SnapshotRecord]) -> str:
    return _RECORDS.dump_json(records).decode()


def decode_snapshot(token: str) -> list[SnapshotRecord]:
    """Decode and validate a snapshot, raising SnapshotError if malformed."""
    try:
        return _RECORDS.validate_json(token)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot: {exc}") from exc
