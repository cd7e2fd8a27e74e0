"""
Local sentence-transformers model for the huggingface embedding provider.

Loaded once per process on first use, never at import. EMBEDDINGS_MODEL_PATH
(a local directory) wins over EMBEDDINGS_MODEL_NAME (a hub id).
"""

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
UNAVAILABLE_MSG = (
    "Local embeddings model could not be loaded. Install the 'hf' extra or point "
    "EMBEDDINGS_MODEL_PATH at a downloaded model."
)
_model: "SentenceTransformer | None" = None


def local_model_source() -> str:
    """Path or hub id the local model is loaded from."""
    model_path = os.getenv("EMBEDDINGS_MODEL_PATH", "").strip()
    if model_path:
        return model_path
    return os.getenv("EMBEDDINGS_MODEL_NAME", "").strip() or DEFAULT_LOCAL_MODEL


def get_embedding_model() -> "SentenceTransformer":
    global _model
    if _model is None:
        source = local_model_source()
        logger.info("Loading local embedding model: %s", source)
        try:
            from sentence_transformers import SentenceTransformer

            _model = SentenceTransformer(source)
        except Exception as e:
            raise RuntimeError(UNAVAILABLE_MSG) from e
    return _model


def encode_texts(texts: list[str]) -> list[list[float]]:
    """Encode with the local model; vectors are unit-normalized like the API's."""
    if not texts:
        return []
    embs = get_embedding_model().encode(texts, normalize_embeddings=True)
    return [e.tolist() for e in embs]
