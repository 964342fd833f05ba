"""
Similarity scoring between embedding vectors.

Cosine similarity in [-1, 1]; higher means more similar.
"""

from typing import Sequence

import numpy as np

from shared.errors import DimensionMismatchError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Similarity clipped to [-1, 1]; 0.0 for empty or zero-magnitude input

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))
    if len(a) == 0:
        return 0.0

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    sq_a = float(np.dot(va, va))
    sq_b = float(np.dot(vb, vb))
    if sq_a == 0.0 or sq_b == 0.0:
        return 0.0

    # One sqrt over the product keeps score(v, v) exactly 1.0
    score = float(np.dot(va, vb)) / float(np.sqrt(sq_a * sq_b))
    return max(-1.0, min(1.0, score))
