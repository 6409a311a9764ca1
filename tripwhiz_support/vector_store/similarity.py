"""
Cosine similarity over plain float sequences.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|), clipped to [-1, 1].

    Returns 0.0 instead of raising for zero vectors, mismatched lengths,
    empty or non-numeric input, so one bad embedding never fails a query.
    """
    try:
        va = np.asarray(a, dtype=float)
        vb = np.asarray(b, dtype=float)
    except (TypeError, ValueError):
        return 0.0

    if va.ndim != 1 or va.shape != vb.shape or va.size == 0:
        return 0.0

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    score = float(np.dot(va, vb) / (norm_a * norm_b))
    if not np.isfinite(score):
        return 0.0
    return max(-1.0, min(1.0, score))


__all__ = ["cosine_similarity"]
