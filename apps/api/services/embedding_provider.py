"""
Embedding provider abstraction for dependency injection.

EMBED_PROVIDER=deterministic or ENV=test or PYTEST_CURRENT_TEST => no network, hash-based vectors.
EMBED_PROVIDER=huggingface (or hf) => local SentenceTransformer (lazy-loaded on first embed).
Otherwise OpenAI embeddings API (EMBEDDING_MODEL, default text-embedding-3-small).

No import-time client creation or model loading; everything is lazy.
Provider errors propagate to the caller; there is no retry here.
"""

import hashlib
import logging
import os
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

EMBEDDING_DIM = 1536  # text-embedding-3-small
DEFAULT_OPENAI_MODEL = "text-embedding-3-small"
MISSING_KEY_MSG = "OPENAI_API_KEY is required for the OpenAI embedding provider. Set EMBED_PROVIDER=deterministic for offline use."


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation. Can be swapped for testing."""

    model_name: str

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed texts into vectors, one per input, in input order."""
        ...


class DeterministicEmbeddingProvider:
    """
    Deterministic provider: fixed-size vectors from stable hash of text.
    Pure: no network, no randomness. Same input => same output.
    """

    model_name = "deterministic"

    def __init__(self, dim: int = EMBEDDING_DIM) -> None:
        self._dim = dim

    def embed(self, texts: list[str]) -> list[list[float]]:
        return [_hash_to_vector(t, self._dim) for t in texts]


def _hash_to_vector(text: str, dim: int = EMBEDDING_DIM) -> list[float]:
    """Produce deterministic dim-dim vector from text hash. Pure, no randomness."""
    out: list[float] = []
    for i in range(dim):
        h = hashlib.sha256((text + "|" + str(i)).encode()).hexdigest()
        x = int(h[:8], 16) / (2**32) * 2 - 1
        out.append(x)
    return out


class OpenAIEmbeddingProvider:
    """OpenAI embeddings API. Client created on first embed() call."""

    def __init__(self, model_name: str | None = None) -> None:
        self.model_name = model_name or os.getenv("EMBEDDING_MODEL", DEFAULT_OPENAI_MODEL).strip() or DEFAULT_OPENAI_MODEL
        self._client = None

    def _get_client(self):
        if self._client is None:
            api_key = os.getenv("OPENAI_API_KEY", "").strip()
            if not api_key:
                raise RuntimeError(MISSING_KEY_MSG)
            from openai import OpenAI

            self._client = OpenAI(api_key=api_key)
        return self._client

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        response = self._get_client().embeddings.create(model=self.model_name, input=texts)
        ordered = sorted(response.data, key=lambda d: d.index)
        return [list(d.embedding) for d in ordered]


class HuggingFaceEmbeddingProvider:
    """
    HuggingFace SentenceTransformer provider. Loads model on first embed() call (lazy).
    No import-time loading.
    """

    def __init__(self) -> None:
        from apps.api.services.embeddings import local_model_source

        self.model_name = local_model_source()

    def embed(self, texts: list[str]) -> list[list[float]]:
        from apps.api.services.embeddings import encode_texts

        return encode_texts(texts)


_provider: EmbeddingProvider | None = None


def _resolve_provider_kind() -> str:
    """
    'deterministic', 'huggingface' or 'openai'.
    EMBED_PROVIDER wins when set; otherwise ENV=test or PYTEST_CURRENT_TEST => deterministic.
    """
    explicit = (os.getenv("EMBED_PROVIDER") or "").lower().strip()
    if explicit == "deterministic":
        return "deterministic"
    if explicit in ("huggingface", "hf"):
        return "huggingface"
    if explicit == "openai":
        return "openai"
    env = (os.getenv("ENV") or os.getenv("ENVIRONMENT") or "").lower()
    if env == "test" or os.getenv("PYTEST_CURRENT_TEST"):
        return "deterministic"
    return "openai"


_PROVIDER_CLASSES = {
    "deterministic": DeterministicEmbeddingProvider,
    "huggingface": HuggingFaceEmbeddingProvider,
    "openai": OpenAIEmbeddingProvider,
}


def get_embedding_provider(*, force_refresh: bool = False) -> EmbeddingProvider:
    """
    Return the active embedding provider. Lazy-initialized; re-resolved when
    the environment selects a different provider kind.

    force_refresh: if True, re-resolve provider (for tests).
    """
    global _provider
    if force_refresh:
        _provider = None
    cls = _PROVIDER_CLASSES[_resolve_provider_kind()]
    if _provider is None or not isinstance(_provider, cls):
        _provider = cls()
        logger.info("Using %s embedding provider", cls.__name__)
    return _provider


def embed_text(text: str) -> list[float]:
    """Convenience: embed single text. Uses active provider."""
    return get_embedding_provider().embed([text])[0]


def embed_texts(texts: list[str]) -> list[list[float]]:
    """Convenience: embed batch. Uses active provider."""
    if not texts:
        return []
    return get_embedding_provider().embed(texts)
