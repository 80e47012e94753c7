"""Distance and similarity measures between embedding vectors.

Each function takes two ``Embedding`` objects or two sequences of floats.
"""

from __future__ import annotations

import math
from typing import Any, Sequence


def _vec(value: Any) -> Sequence[float]:
    return value.vec if hasattr(value, "vec") else value


def dot_product(a: Any, b: Any) -> float:
    """Dot product of two vectors."""
    return sum(x * y for x, y in zip(_vec(a), _vec(b)))


def cosine_similarity(a: Any, b: Any, normalized: bool = False) -> float:
    """Cosine similarity; when ``normalized`` the dot product alone is returned."""
    dot = dot_product(a, b)
    if normalized:
        return dot
    magnitude_a = math.sqrt(sum(x * x for x in _vec(a)))
    magnitude_b = math.sqrt(sum(x * x for x in _vec(b)))
    denominator = magnitude_a * magnitude_b
    if denominator == 0:
        if dot == 0 or math.isnan(dot):
            return math.nan
        return math.copysign(math.inf, dot)
    return dot / denominator


def angular_distance(a: Any, b: Any, normalized: bool = False) -> float:
    """Angle between two vectors as a fraction of pi; NaN when undefined."""
    similarity = cosine_similarity(a, b, normalized)
    if not -1.0 <= similarity <= 1.0:
        return math.nan
    return math.acos(similarity) / math.pi


def euclidean_distance(a: Any, b: Any) -> float:
    """Euclidean distance between two vectors."""
    return math.sqrt(sum((x - y) * (x - y) for x, y in zip(_vec(a), _vec(b))))


def manhattan_distance(a: Any, b: Any) -> float:
    """Sum of the absolute coordinate differences."""
    return sum(abs(x - y) for x, y in zip(_vec(a), _vec(b)))


def chebyshev_distance(a: Any, b: Any) -> float:
    """Largest absolute coordinate difference (0.0 for empty vectors)."""
    return max((abs(x - y) for x, y in zip(_vec(a), _vec(b))), default=0.0)