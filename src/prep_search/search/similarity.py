"""
Vector similarity scoring.
"""

from __future__ import annotations

import math
from collections.abc import Sequence


def cosine_similarity(
    vec_a: Sequence[float | None], vec_b: Sequence[float | None]
) -> float:
    """Cosine of the angle between two vectors.

    Degenerate input (length mismatch, empty vectors, zero magnitude,
    non-finite components) scores 0.0 instead of raising. ``None``
    components count as 0.
    """
    if len(vec_a) != len(vec_b) or len(vec_a) == 0:
        return 0.0

    dot_product = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for raw_a, raw_b in zip(vec_a, vec_b):
        a = raw_a if raw_a is not None else 0.0
        b = raw_b if raw_b is not None else 0.0
        dot_product += a * b
        norm_a += a * a
        norm_b += b * b

    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denominator == 0:
        return 0.0
    similarity = dot_product / denominator
    if not math.isfinite(similarity):
        return 0.0
    return similarity
