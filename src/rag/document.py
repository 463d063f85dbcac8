"""Document models for the retrieval layer.

Defines the data shapes shared by the chunker, both store backends,
and the pipeline that ties them together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from uuid import uuid4


class SimilarityMetric(str, Enum):
    """Scoring functions understood by every store backend."""

    COSINE = "cosine"
    EUCLIDEAN = "euclidean"


def generate_id() -> str:
    """Return a random 32-hex-digit id (uuid4, 122 random bits)."""
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class Document:
    """A piece of text stored alongside its embedding.

    ``id`` may be left unset; stores assign a generated one on ``add``.
    """

    content: str
    id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Per-call search settings.

    ``filter`` keeps only documents whose metadata holds every listed key
    with an equal value. ``metric`` is kept as a plain string: a value no
    backend understands yields an empty result instead of an error. When
    unset, stores score by cosine and the pipeline uses its configured metric.
    """

    filter: Optional[dict[str, Any]] = None
    metric: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A document returned from search with its score (higher is better)."""

    document: Document
    score: float
