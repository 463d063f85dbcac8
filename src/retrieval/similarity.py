"""Vector similarity functions shared by the store backends."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from src.rag.errors import DimensionMismatchError


def _as_arrays(a: Sequence[float], b: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))
    return np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors, in [-1, 1].

    Returns 0.0 when either vector has zero norm.
    """
    va, vb = _as_arrays(a, b)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Straight-line (L2) distance between two vectors."""
    va, vb = _as_arrays(a, b)
    return float(np.linalg.norm(va - vb))


def distance_to_score(distance: float) -> float:
    """Map a non-negative distance to a higher-is-better score in (0, 1]."""
    return 1.0 / (1.0 + distance)
