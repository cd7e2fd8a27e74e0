"""Cron config from environment."""

import os


def _int(val: str | None, default: int) -> int:
    if val is None or val.strip() == "":
        return default
    try:
        return int(val.strip())
    except ValueError:
        return default


class Config:
    """Batch job configuration from env vars."""

    EMBED_BATCH_LIMIT: int = _int(os.getenv("EMBED_BATCH_LIMIT"), 500)
    EMBED_CONCURRENCY: int = _int(os.getenv("EMBED_CONCURRENCY"), 10)
    LOG_DIR: str = os.getenv("CRON_LOG_DIR", "logs").strip() or "logs"


config = Config()
