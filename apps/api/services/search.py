"""Keyword and semantic company search. DB access via repo only.

Both engines share repositories.company_filters, so a filter set selects the same
companies whether it runs as SQL (keyword) or in memory (semantic).
"""

import logging
from typing import Any

from sqlalchemy import ColumnElement

from apps.api.models.company import Company
from apps.api.repositories.company_filters import company_predicate
from apps.api.schemas.requests import SearchParams
from apps.api.schemas.responses import CompanyResult, SearchResponse
from apps.api.services.company_normalize import launched_year
from apps.api.services.embedding_provider import embed_text
from apps.api.services.repo import list_embedded_companies, search_companies_page
from apps.api.services.vector_math import cosine_similarity
from apps.api.utils.json_fields import parse_json_array, parse_vector

logger = logging.getLogger(__name__)

SCORE_DECIMALS = 4


def sort_clauses(sort: str, query: str) -> list[ColumnElement[Any]]:
    """ORDER BY for a keyword search. name ascending is always the final tie-break."""
    if sort == "newest":
        return [Company.launched_at.desc().nulls_last(), Company.top_company.desc(), Company.name.asc()]
    if sort == "team_size":
        return [Company.team_size.desc().nulls_last(), Company.top_company.desc(), Company.name.asc()]
    if sort == "name":
        return [Company.name.asc()]
    if (query or "").strip():
        return [Company.top_company.desc(), Company.team_size.desc().nulls_last(), Company.name.asc()]
    return [Company.top_company.desc(), Company.name.asc()]


def hydrate_company(company: Any, score: float | None = None) -> CompanyResult:
    """Company row -> CompanyResult. Arrays decoded defensively, flags coerced to bool."""
    launched_at = getattr(company, "launched_at", None)
    return CompanyResult(
        id=company.id,
        name=company.name or "",
        slug=getattr(company, "slug", None),
        website=getattr(company, "website", None),
        one_liner=getattr(company, "one_liner", None),
        long_description=getattr(company, "long_description", None),
        batch=getattr(company, "batch", None),
        stage=getattr(company, "stage", None),
        industry=getattr(company, "industry", None),
        all_locations=getattr(company, "all_locations", None),
        launched_at=launched_at,
        launched_year=launched_year(launched_at),
        team_size=getattr(company, "team_size", None),
        is_hiring=bool(getattr(company, "is_hiring", False)),
        nonprofit=bool(getattr(company, "nonprofit", False)),
        top_company=bool(getattr(company, "top_company", False)),
        tags=parse_json_array(getattr(company, "tags", None)),
        industries=parse_json_array(getattr(company, "industries", None)),
        regions=parse_json_array(getattr(company, "regions", None)),
        url=getattr(company, "url", None),
        small_logo_thumb_url=getattr(company, "small_logo_thumb_url", None),
        status=getattr(company, "status", None),
        score=score,
    )


def keyword_search(params: SearchParams) -> SearchResponse:
    """Substring match on name/one-liner/description/search_text AND filters, sorted, paginated."""
    offset = (params.page - 1) * params.page_size
    total, companies = search_companies_page(
        params.filters,
        params.query,
        sort_clauses(params.sort, params.query),
        offset,
        params.page_size,
    )
    return SearchResponse(
        total=total,
        page=params.page,
        page_size=params.page_size,
        results=[hydrate_company(c) for c in companies],
    )


def rank_companies(params: SearchParams, query_vector: list[float] | None = None) -> list[tuple[Any, float]]:
    """
    Every filtered company with a usable stored vector, scored by cosine similarity
    to the query embedding. Sorted by score desc, then company id asc.

    Empty query => []. Rows with malformed vectors are skipped.
    """
    query = (params.query or "").strip()
    if not query:
        return []
    if query_vector is None:
        query_vector = embed_text(query)
    matches = company_predicate(params.filters)
    scored: list[tuple[Any, float]] = []
    skipped = 0
    for company, raw_vector in list_embedded_companies():
        if not matches(company):
            continue
        vector = parse_vector(raw_vector)
        if not vector:
            skipped += 1
            continue
        scored.append((company, cosine_similarity(query_vector, vector)))
    if skipped:
        logger.info("Semantic ranking skipped %d malformed vectors", skipped)
    scored.sort(key=lambda item: (-item[1], item[0].id))
    return scored


def semantic_search(params: SearchParams) -> SearchResponse:
    """Rank all filtered companies by similarity to the query, then paginate in memory.
    total counts the whole scored set. Empty query returns an empty result."""
    ranked = rank_companies(params)
    offset = (params.page - 1) * params.page_size
    page = ranked[offset : offset + params.page_size]
    return SearchResponse(
        total=len(ranked),
        page=params.page,
        page_size=params.page_size,
        results=[hydrate_company(c, round(score, SCORE_DECIMALS)) for c, score in page],
    )


def get_semantic_top_ids(params: SearchParams, limit: int) -> list[int]:
    """Ids of the top `limit` companies under the same ranking as semantic_search."""
    if limit <= 0:
        return []
    return [company.id for company, _ in rank_companies(params)[:limit]]
