"""Derived company fields: flattened search text, embedding text and launch year."""

import re
from datetime import datetime, timezone
from typing import Any

from apps.api.utils.json_fields import parse_json_array

_WS = re.compile(r"\s+")


def build_company_search_text(company: Any) -> str:
    """Join the searchable company fields into one whitespace-collapsed string."""
    fields = [
        getattr(company, "name", None) or "",
        getattr(company, "one_liner", None) or "",
        getattr(company, "long_description", None) or "",
        getattr(company, "industry", None) or "",
        getattr(company, "subindustry", None) or "",
        getattr(company, "batch", None) or "",
        getattr(company, "stage", None) or "",
        getattr(company, "status", None) or "",
        getattr(company, "all_locations", None) or "",
        " ".join(parse_json_array(getattr(company, "tags", None))),
        " ".join(parse_json_array(getattr(company, "industries", None))),
        " ".join(parse_json_array(getattr(company, "regions", None))),
    ]
    return _WS.sub(" ", " ".join(fields)).strip()


def launched_year(launched_at: int | float | None) -> int | None:
    """UTC year of a unix-seconds launch timestamp. None (or 0) means not launched."""
    if not launched_at:
        return None
    return datetime.fromtimestamp(launched_at, tz=timezone.utc).year


WEBSITE_CONTENT_MAX = 10_000


def build_embedding_text(company: Any, website_markdown: str | None = None) -> str:
    """Labelled, line-per-field text a company's embedding is computed from.
    Website markdown is truncated to the first 10,000 characters."""
    return "\n".join(
        [
            f"Company: {getattr(company, 'name', None) or ''}",
            f"One liner: {getattr(company, 'one_liner', None) or ''}",
            f"Description: {getattr(company, 'long_description', None) or ''}",
            f"Search text: {getattr(company, 'search_text', None) or ''}",
            f"Tags: {', '.join(parse_json_array(getattr(company, 'tags', None)))}",
            f"Industries: {', '.join(parse_json_array(getattr(company, 'industries', None)))}",
            f"Regions: {', '.join(parse_json_array(getattr(company, 'regions', None)))}",
            f"Batch: {getattr(company, 'batch', None) or ''}",
            f"Stage: {getattr(company, 'stage', None) or ''}",
            f"Status: {getattr(company, 'status', None) or ''}",
            f"Location: {getattr(company, 'all_locations', None) or ''}",
            f"Website content: {(website_markdown or '')[:WEBSITE_CONTENT_MAX]}",
        ]
    )
