"""Vector helpers for similarity ranking and the PCA projection.

Pure functions; inputs are never modified. Scalar results are Python floats,
vector and matrix results are numpy arrays.
"""

import math
from collections.abc import Sequence

import numpy as np

Vector = Sequence[float] | np.ndarray
Matrix = Sequence[Sequence[float]] | np.ndarray


def dot(a: Vector, b: Vector) -> float:
    """Sum of elementwise products. Caller guarantees equal length."""
    return float(np.dot(np.asarray(a, dtype=float), np.asarray(b, dtype=float)))


def norm(v: Vector) -> float:
    return math.sqrt(dot(v, v))


def normalize(v: Vector) -> np.ndarray:
    """Scale v to unit length. A zero vector is returned unchanged (norm treated as 1)."""
    arr = np.asarray(v, dtype=float)
    return arr / (norm(arr) or 1.0)


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine of the angle between a and b.

    Returns 0.0 when the vectors are not comparable: different lengths, empty,
    or either has zero norm. That 0.0 is a "no score" value, not orthogonality.
    """
    if len(a) != len(b) or len(a) == 0:
        return 0.0
    norm_a = norm(a)
    norm_b = norm(b)
    if not norm_a or not norm_b:
        return 0.0
    return dot(a, b) / (norm_a * norm_b)


def center_embeddings(vectors: Matrix) -> Matrix:
    """Subtract the per-dimension mean from every vector. Empty input is returned as-is."""
    if not len(vectors):
        return vectors
    matrix = np.asarray(vectors, dtype=float)
    return matrix - matrix.mean(axis=0)


def mat_vec(matrix: Matrix, vector: Vector) -> np.ndarray:
    """matrix (n x d) times vector (d) -> n values."""
    if not len(matrix):
        return np.zeros(0)
    return np.asarray(matrix, dtype=float) @ np.asarray(vector, dtype=float)


def transpose_mat_vec(matrix: Matrix, values: Vector) -> np.ndarray:
    """transpose(matrix) (d x n) times values (n) -> d values."""
    if not len(matrix):
        return np.zeros(0)
    return np.asarray(matrix, dtype=float).T @ np.asarray(values, dtype=float)
