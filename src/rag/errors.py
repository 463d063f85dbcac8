"""Exception hierarchy for the retrieval layer.

Hard failures raise one of the classes below. Storage failures are not
wrapped: driver exceptions (e.g. ``psycopg.Error``) reach the caller as-is.
"""

from __future__ import annotations


class RetrievalError(Exception):
    """Base exception for all retrieval-layer errors."""


class DimensionMismatchError(RetrievalError, ValueError):
    """Two vectors of different length were compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Vectors must be same length, got {left} and {right}")
        self.left = left
        self.right = right


class SizeMismatchError(RetrievalError, ValueError):
    """Documents and embeddings passed to ``add`` differ in count."""

    def __init__(self, documents: int, embeddings: int) -> None:
        super().__init__(
            f"documents and embeddings length mismatch: "
            f"{documents} documents, {embeddings} embeddings"
        )
        self.documents = documents
        self.embeddings = embeddings


class ConfigurationError(RetrievalError, ValueError):
    """A component was constructed with invalid settings."""


class SnapshotError(RetrievalError, ValueError):
    """A serialized snapshot could not be decoded."""
