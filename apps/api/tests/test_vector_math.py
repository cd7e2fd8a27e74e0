"""Vector math: cosine edge cases, centering and matrix products."""

import numpy as np
import pytest

from apps.api.services.vector_math import (
    center_embeddings,
    cosine_similarity,
    dot,
    mat_vec,
    norm,
    normalize,
    transpose_mat_vec,
)


def test_cosine_self_is_one() -> None:
    v = [0.3, -1.2, 4.0, 0.0, 2.5]
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_cosine_is_symmetric() -> None:
    a = [1.0, 2.0, 3.0]
    b = [-2.0, 0.5, 1.0]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_not_comparable_returns_exact_zero() -> None:
    assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([], []) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
    assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0


def test_cosine_opposite_vectors() -> None:
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_dot_and_norm() -> None:
    assert dot([1, 2, 3], [4, 5, 6]) == 32.0
    assert norm([3, 4]) == 5.0


def test_normalize_zero_vector_unchanged() -> None:
    assert normalize([0.0, 0.0, 0.0]).tolist() == [0.0, 0.0, 0.0]
    assert normalize([3.0, 4.0]).tolist() == pytest.approx([0.6, 0.8])


def test_center_embeddings_does_not_mutate_input() -> None:
    vectors = [[1.0, 2.0], [3.0, 6.0]]
    centered = center_embeddings(vectors)
    assert np.asarray(centered).tolist() == [[-1.0, -2.0], [1.0, 2.0]]
    assert vectors == [[1.0, 2.0], [3.0, 6.0]]


def test_center_embeddings_empty_is_noop() -> None:
    empty: list[list[float]] = []
    assert center_embeddings(empty) is empty


def test_mat_vec_and_transpose() -> None:
    m = [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]
    assert mat_vec(m, [1.0, 1.0]).tolist() == [3.0, 7.0, 11.0]
    assert transpose_mat_vec(m, [1.0, 0.0, 1.0]).tolist() == [6.0, 8.0]
    assert mat_vec([], [1.0]).tolist() == []
