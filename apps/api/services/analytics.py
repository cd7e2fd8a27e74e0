"""Batch analytics: companies per YC batch, optionally stacked by top tag/industry.

Rows are ordered chronologically by batch. Labels come in two forms:
compact ("W21", "S21", "F24", "Sp25") and named ("Winter 2021", "Summer 2024").
Anything else sorts after every parseable batch.
"""

import re
from collections import Counter
from collections.abc import Sequence
from typing import Any

from apps.api.schemas.requests import ColorBy, SearchParams
from apps.api.schemas.responses import AnalyticsResponse
from apps.api.services.repo import list_analytics_rows
from apps.api.utils.json_fields import parse_json_array

UNSPECIFIED = "Unspecified"
OTHER = "Other"
UNPARSED_KEY = (10**9, 10**9)

SEASON_ORDER = {"winter": 0, "spring": 1, "summer": 2, "fall": 3}
_COMPACT_SEASONS = {"w": "winter", "sp": "spring", "s": "summer", "f": "fall"}
_COMPACT_RE = re.compile(r"^(Sp|[WSF])(\d{2})$", re.IGNORECASE)
_NAMED_RE = re.compile(r"^(Winter|Spring|Summer|Fall)\s+(\d{4})$", re.IGNORECASE)


def parse_batch_key(label: str) -> tuple[int, int]:
    """(year, season order) for a batch label; UNPARSED_KEY when not recognised."""
    text = (label or "").strip()
    m = _COMPACT_RE.match(text)
    if m:
        season = _COMPACT_SEASONS[m.group(1).lower()]
        return 2000 + int(m.group(2)), SEASON_ORDER[season]
    m = _NAMED_RE.match(text)
    if m:
        return int(m.group(2)), SEASON_ORDER[m.group(1).lower()]
    return UNPARSED_KEY


def batch_sort_key(label: str) -> tuple[int, int, str]:
    year, season = parse_batch_key(label)
    return year, season, label


def _category(values: Any) -> str:
    # First stored element; depends on ingestion order of the array.
    items = parse_json_array(values)
    return items[0] if items else UNSPECIFIED


def build_batch_analytics(
    rows: Sequence[tuple[int, str | None, Any, Any]],
    color_by: ColorBy,
    top_n: int,
) -> AnalyticsResponse:
    """rows: (id, batch, tags, industries) of the candidate companies."""
    batch_of: list[str] = []
    category_of: list[str] = []
    for _, batch, tags, industries in rows:
        batch_of.append((batch or "").strip() or UNSPECIFIED)
        if color_by == "tags":
            category_of.append(_category(tags))
        elif color_by == "industries":
            category_of.append(_category(industries))

    totals = Counter(batch_of)
    labels = sorted(totals, key=batch_sort_key)

    if color_by == "none":
        return AnalyticsResponse(
            color_by=color_by,
            total_companies=len(batch_of),
            series=["total"],
            rows=[{"batch": label, "total": totals[label]} for label in labels],
        )

    overall = Counter(category_of)
    top = [c for c, _ in sorted(overall.items(), key=lambda kv: (-kv[1], kv[0]))[:top_n]]
    per_batch: dict[str, Counter] = {label: Counter() for label in labels}
    for label, category in zip(batch_of, category_of):
        per_batch[label][category] += 1

    out_rows: list[dict[str, str | int]] = []
    for label in labels:
        row: dict[str, str | int] = {"batch": label, "total": totals[label]}
        counts = per_batch[label]
        shown = 0
        for category in top:
            row[category] = counts[category]
            shown += counts[category]
        row[OTHER] = max(0, totals[label] - shown)
        out_rows.append(row)

    return AnalyticsResponse(
        color_by=color_by,
        total_companies=len(batch_of),
        series=[*top, OTHER],
        rows=out_rows,
    )


def get_batch_analytics(
    params: SearchParams,
    color_by: ColorBy = "none",
    top_n: int = 8,
    company_ids: Sequence[int] | None = None,
) -> AnalyticsResponse:
    """
    Analytics over the keyword+filter result set, or over exactly company_ids when given.
    An empty company_ids yields no rows; None means "no subset".
    """
    rows = list_analytics_rows(params.filters, params.query, company_ids)
    return build_batch_analytics(rows, color_by, top_n)
