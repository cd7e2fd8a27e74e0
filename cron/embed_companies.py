#!/usr/bin/env python3
"""Embed companies flagged needs_embed and store their vectors.

For each company: build the embedding text (fields + website markdown), hash it,
and compare with the stored source_hash. Unchanged text only clears needs_embed;
otherwise the text is embedded and the vector upserted, which changes the
embeddings signature and so invalidates the cached PCA projection.

Usage: python -m cron.embed_companies [--limit 500] [--concurrency 10]
"""

import argparse
import json
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Project root on path for apps.api imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from apps.api.services.company_normalize import build_embedding_text
from apps.api.services.embedding_provider import get_embedding_provider
from apps.api.services.repo import (
    get_embedding_source_hash,
    get_sync_state,
    list_companies_needing_embed,
    mark_company_embedded,
    set_sync_state,
    upsert_company_embedding,
)
from apps.api.utils.hashing import source_hash
from apps.api.utils.json_fields import dump_vector
from cron.config import config
from cron.logging import get_logger

logger = get_logger("embed_companies")

SYNC_STATE_KEY = "embed_last_sync_at"
EMBEDDED = "embedded"
SKIPPED = "skipped"


def embed_company(company: Any, website_markdown: str | None) -> str:
    """Embed one company unless its source text is unchanged. Returns EMBEDDED or SKIPPED."""
    text = build_embedding_text(company, website_markdown)
    digest = source_hash(text)
    if get_embedding_source_hash(company.id) == digest:
        mark_company_embedded(company.id)
        return SKIPPED

    provider = get_embedding_provider()
    vector = provider.embed([text])[0]
    upsert_company_embedding(
        company_id=company.id,
        model=provider.model_name,
        vector_json=dump_vector(vector),
        dimensions=len(vector),
        source_hash=digest,
    )
    mark_company_embedded(company.id)
    return EMBEDDED


def run(limit: int, concurrency: int = 1) -> dict[str, int]:
    """Process up to limit flagged companies. Returns {requested, embedded, skipped, failed}."""
    logger.info("Previous embed sync: %s", get_sync_state(SYNC_STATE_KEY) or "never")
    candidates = list_companies_needing_embed(limit)
    summary = {"requested": len(candidates), EMBEDDED: 0, SKIPPED: 0, "failed": 0}
    if not candidates:
        logger.info("No companies need embeddings.")
        return summary

    def _record(company_id: int, fn, *args) -> None:
        try:
            summary[fn(*args)] += 1
        except Exception as e:
            summary["failed"] += 1
            logger.error("Embedding failed for company %s: %s", company_id, e)

    if concurrency <= 1:
        for company, markdown in candidates:
            _record(company.id, embed_company, company, markdown)
    else:
        with ThreadPoolExecutor(max_workers=concurrency) as ex:
            futures = {ex.submit(embed_company, company, markdown): company.id for company, markdown in candidates}
            for fut in as_completed(futures):
                _record(futures[fut], fut.result)

    set_sync_state(SYNC_STATE_KEY, datetime.now(timezone.utc).isoformat())
    logger.info("Embed summary: %s", json.dumps(summary))
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Embed companies flagged needs_embed.")
    parser.add_argument("--limit", type=int, default=config.EMBED_BATCH_LIMIT, help="Max companies to process")
    parser.add_argument("--concurrency", type=int, default=config.EMBED_CONCURRENCY, help="Parallel embedding calls")
    args = parser.parse_args(argv)

    limit = args.limit if args.limit > 0 else config.EMBED_BATCH_LIMIT
    summary = run(limit, args.concurrency)
    print(json.dumps(summary, indent=2))
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
