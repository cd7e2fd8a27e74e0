"""Query-string parsing for search, analytics and the embedding map.

Numbers are parsed leniently and clamped (page >= 1, 1 <= pageSize <= 50);
enumerations (sort, colorBy, mode) are strict and reject unknown values with 422.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, get_args

from fastapi import Depends, HTTPException, Request

from apps.api.schemas.requests import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ColorBy, SearchFilters, SearchParams, SortMode

DEFAULT_TOP_N = 8
MAX_TOP_N = 20
SEMANTIC_ANALYTICS_LIMIT = 100
DEFAULT_MAP_LIMIT = 100
MAX_MAP_LIMIT = 500

_SORT_MODES = frozenset(get_args(SortMode))
_COLOR_BY = frozenset(get_args(ColorBy))


def parse_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def parse_int(value: str | None, default: int) -> int:
    """int(value), or default when missing or not a number. Floats are truncated."""
    if value is None or not value.strip():
        return default
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return default


def _years(value: str | None) -> tuple[int, ...]:
    years = []
    for part in parse_csv(value):
        try:
            years.append(int(part))
        except ValueError:
            continue
    return tuple(years)


def parse_filters(query_params: Mapping[str, str]) -> SearchFilters:
    return SearchFilters(
        tags=parse_csv(query_params.get("tags")),
        industries=parse_csv(query_params.get("industries")),
        regions=parse_csv(query_params.get("regions")),
        stages=parse_csv(query_params.get("stages")),
        batches=parse_csv(query_params.get("batches")),
        years=_years(query_params.get("years")),
        is_hiring=query_params.get("isHiring") == "1",
        nonprofit=query_params.get("nonprofit") == "1",
        top_company=query_params.get("topCompany") == "1",
    )


def parse_search_params(query_params: Mapping[str, str]) -> SearchParams:
    """q, page, pageSize, sort and filter params -> SearchParams. Raises HTTPException(422) on unknown sort."""
    sort = query_params.get("sort") or "relevance"
    if sort not in _SORT_MODES:
        raise HTTPException(status_code=422, detail=f"sort must be one of {sorted(_SORT_MODES)}")
    page = max(1, parse_int(query_params.get("page"), 1))
    page_size = min(MAX_PAGE_SIZE, max(1, parse_int(query_params.get("pageSize"), DEFAULT_PAGE_SIZE)))
    return SearchParams(
        query=query_params.get("q") or "",
        page=page,
        page_size=page_size,
        sort=sort,
        filters=parse_filters(query_params),
    )


@dataclass(frozen=True)
class AnalyticsOptions:
    color_by: ColorBy
    top_n: int
    semantic: bool


def parse_analytics_options(query_params: Mapping[str, str]) -> AnalyticsOptions:
    """colorBy (none|tags|industries), topN (1..20, default 8), mode (semantic|keyword)."""
    color_by = query_params.get("colorBy") or "none"
    if color_by not in _COLOR_BY:
        raise HTTPException(status_code=422, detail=f"colorBy must be one of {sorted(_COLOR_BY)}")
    raw_top_n = query_params.get("topN")
    top_n = DEFAULT_TOP_N if raw_top_n is None else parse_int(raw_top_n, -1)
    if not 1 <= top_n <= MAX_TOP_N:
        raise HTTPException(status_code=422, detail=f"topN must be an integer between 1 and {MAX_TOP_N}")
    return AnalyticsOptions(
        color_by=color_by,
        top_n=top_n,
        semantic=query_params.get("mode") == "semantic",
    )


def parse_map_limit(value: str | None) -> int:
    """Embedding-map neighbour count: default 100, non-positive or invalid -> default, capped at 500."""
    limit = parse_int(value, DEFAULT_MAP_LIMIT)
    if limit <= 0:
        return DEFAULT_MAP_LIMIT
    return min(MAX_MAP_LIMIT, limit)


def get_search_params(request: Request) -> SearchParams:
    """FastAPI dependency: SearchParams from the request query string."""
    return parse_search_params(request.query_params)


def get_analytics_options(request: Request) -> AnalyticsOptions:
    """FastAPI dependency: analytics options from the request query string."""
    return parse_analytics_options(request.query_params)


# Type aliases for Depends()
SearchParamsDep = Annotated[SearchParams, Depends(get_search_params)]
AnalyticsOptionsDep = Annotated[AnalyticsOptions, Depends(get_analytics_options)]
