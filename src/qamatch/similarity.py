# src/qamatch/similarity.py
"""Cosine similarity between embedding vectors."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt


def cosine_similarities(
    query: Sequence[float] | npt.NDArray[np.float64],
    matrix: npt.NDArray[np.float64],
    norms: npt.NDArray[np.float64] | None = None,
) -> npt.NDArray[np.float64]:
    """Cosine similarity of ``query`` against every row of ``matrix``.

    Formula: cos(θ) = (a · b) / (||a|| * ||b||)

    Rows (or a query) with zero norm have no direction; their similarity is
    exactly 0.0 rather than NaN. Results are clipped to [-1, 1] to absorb
    floating point overshoot.

    Args:
        query: Query vector of length d.
        matrix: Array of shape (n, d).
        norms: Precomputed L2 norms of the rows, shape (n,).

    Returns:
        Array of shape (n,) with one similarity per row.
    """
    q = np.asarray(query, dtype=np.float64)
    m = np.asarray(matrix, dtype=np.float64)
    if m.ndim != 2 or q.ndim != 1 or m.shape[1] != q.shape[0]:
        raise ValueError(f"Vector length {q.shape} does not match matrix shape {m.shape}")

    row_norms = np.linalg.norm(m, axis=1) if norms is None else norms
    query_norm = np.linalg.norm(q)
    denominators = row_norms * query_norm

    scores = np.zeros(m.shape[0], dtype=np.float64)
    nonzero = denominators > 0
    scores[nonzero] = (m[nonzero] @ q) / denominators[nonzero]
    return np.clip(scores, -1.0, 1.0)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors, 0.0 if either is a zero vector."""
    if len(a) != len(b):
        raise ValueError(f"Vectors must have the same length ({len(a)} != {len(b)})")
    a_arr, b_arr = np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64)

    norm_a, norm_b = np.linalg.norm(a_arr), np.linalg.norm(b_arr)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.clip(np.dot(a_arr, b_arr) / (norm_a * norm_b), -1.0, 1.0))
