"""Defensive decoding of JSON-encoded columns.

Stored arrays and vectors are decoded one row at a time. A value that fails to
decode yields an empty result for that row only.
"""

import json
import logging
import math
from typing import Any

logger = logging.getLogger(__name__)


def parse_json_array(value: Any) -> list[str]:
    """Return the string items of a JSON array (or an already-decoded list).

    Non-list payloads, unparseable JSON and non-string items are dropped.
    """
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except (ValueError, TypeError):
            return []
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def parse_vector(value: Any) -> list[float] | None:
    """Decode a stored embedding vector. Returns None when the payload is malformed
    or any component is NaN or infinite."""
    if value is None:
        return None
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except (ValueError, TypeError):
            logger.debug("Skipping unparseable vector payload")
            return None
    if not isinstance(value, (list, tuple)):
        return None
    try:
        vector = [float(x) for x in value]
    except (ValueError, TypeError):
        logger.debug("Skipping vector with non-numeric entries")
        return None
    if not all(math.isfinite(x) for x in vector):
        logger.debug("Skipping vector with non-finite entries")
        return None
    return vector


def dump_vector(vector: list[float]) -> str:
    """Encode a vector for the company_embeddings.vector column."""
    return json.dumps([float(x) for x in vector])
