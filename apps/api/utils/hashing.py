"""Stable hash functions for embedding source text and company payloads."""

import hashlib


def source_hash(text: str) -> str:
    """SHA-256 of the text an embedding was produced from. Same text, same hash."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
