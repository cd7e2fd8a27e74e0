"""2D PCA projection of all stored company embeddings, for the embedding map.

The projection is a pure function of the embeddings table. It is computed once
and cached process-wide, keyed by the table signature ('<count>-<max updated_at>').
Any insert or update changes the signature and the next request recomputes.

Power iteration starts from a fixed seed (1.0 on every third dimension, 0.5
elsewhere) so the same data always yields the same layout.
"""

import logging
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np

from apps.api.schemas.responses import EmbeddingMapPoint, EmbeddingMapResponse
from apps.api.services.company_details import get_similar_companies
from apps.api.services.repo import get_embedding_signature, list_embedding_points
from apps.api.services.vector_math import center_embeddings, mat_vec, normalize, transpose_mat_vec
from apps.api.utils.json_fields import parse_vector

logger = logging.getLogger(__name__)

POWER_ITERATIONS = 14
COORD_DECIMALS = 6
DEFAULT_SIMILAR_LIMIT = 12


class ProjectedPoint(NamedTuple):
    id: int
    name: str
    x: float
    y: float


def seed_vector(dim: int) -> np.ndarray:
    return np.array([1.0 if i % 3 == 0 else 0.5 for i in range(dim)])


def power_iteration(
    centered: np.ndarray,
    iterations: int = POWER_ITERATIONS,
    orthogonal_to: np.ndarray | None = None,
) -> np.ndarray:
    """Dominant direction of centered (n x d). With orthogonal_to, the component
    along it is removed before each renormalization (deflation)."""
    vector = seed_vector(centered.shape[1])
    for _ in range(iterations):
        vector = transpose_mat_vec(centered, mat_vec(centered, vector))
        if orthogonal_to is not None:
            vector = vector - np.dot(vector, orthogonal_to) * orthogonal_to
        vector = normalize(vector)
    return vector


def parse_embedding_rows(rows: Sequence[tuple[int, str, object]]) -> tuple[list[tuple[int, str]], list[list[float]]]:
    """Decode vectors row by row. Malformed, too short (len <= 1) or ragged rows are skipped;
    the first usable vector fixes the dimension."""
    labels: list[tuple[int, str]] = []
    vectors: list[list[float]] = []
    dim: int | None = None
    skipped = 0
    for company_id, name, raw in rows:
        vector = parse_vector(raw)
        if vector is None or len(vector) <= 1:
            skipped += 1
            continue
        if dim is None:
            dim = len(vector)
        elif len(vector) != dim:
            skipped += 1
            continue
        labels.append((company_id, name or ""))
        vectors.append(vector)
    if skipped:
        logger.info("Projection skipped %d unusable vectors", skipped)
    return labels, vectors


def compute_pca_projection(rows: Sequence[tuple[int, str, object]]) -> list[ProjectedPoint]:
    labels, vectors = parse_embedding_rows(rows)
    if not vectors:
        return []
    centered = center_embeddings(np.asarray(vectors, dtype=float))
    component1 = power_iteration(centered)
    component2 = power_iteration(centered, orthogonal_to=component1)
    xs = mat_vec(centered, component1)
    ys = mat_vec(centered, component2)
    return [
        ProjectedPoint(company_id, name, round(float(x), COORD_DECIMALS), round(float(y), COORD_DECIMALS))
        for (company_id, name), x, y in zip(labels, xs, ys)
    ]


class ProjectionCache:
    """Holds one (signature, points) pair. Replaced wholesale on signature change;
    overlapping recomputations are harmless (last writer wins)."""

    def __init__(self) -> None:
        self.signature: str | None = None
        self.points: list[ProjectedPoint] = []

    def get(self, signature: str) -> list[ProjectedPoint] | None:
        if self.signature is not None and self.signature == signature:
            return self.points
        return None

    def put(self, signature: str, points: list[ProjectedPoint]) -> None:
        self.signature, self.points = signature, points

    def clear(self) -> None:
        self.signature, self.points = None, []


_cache = ProjectionCache()


def get_projection_cache() -> ProjectionCache:
    return _cache


def load_projection() -> list[ProjectedPoint]:
    """Cached projection for the current embeddings table; recomputed when its signature changes."""
    signature = get_embedding_signature()
    points = _cache.get(signature)
    if points is not None:
        return points
    points = compute_pca_projection(list_embedding_points())
    _cache.put(signature, points)
    logger.info("Recomputed embedding projection signature=%s points=%d", signature, len(points))
    return points


def get_company_embedding_map(
    company_id: int,
    similar_limit: int = DEFAULT_SIMILAR_LIMIT,
) -> EmbeddingMapResponse | None:
    """
    The selected company's projected point plus those of its nearest neighbours
    (cosine over raw vectors, not 2D distance). None when the company has no point.
    """
    points = load_projection()
    if not any(p.id == company_id for p in points):
        return None
    similar_ids = {c.id for c in get_similar_companies(company_id, similar_limit)}
    return EmbeddingMapResponse(
        selected_company_id=company_id,
        points=[
            EmbeddingMapPoint(
                id=p.id,
                name=p.name,
                x=p.x,
                y=p.y,
                group="selected" if p.id == company_id else "similar",
            )
            for p in points
            if p.id == company_id or p.id in similar_ids
        ],
    )
