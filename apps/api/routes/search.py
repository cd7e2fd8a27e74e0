"""Search endpoints: GET /search, /semantic-search, /facets, /analytics."""

from fastapi import APIRouter

from apps.api.schemas.responses import AnalyticsResponse, FacetsResponse, SearchResponse
from apps.api.services.analytics import get_batch_analytics
from apps.api.services.facets import get_facets
from apps.api.services.request_parsing import SEMANTIC_ANALYTICS_LIMIT, AnalyticsOptionsDep, SearchParamsDep
from apps.api.services.search import get_semantic_top_ids, keyword_search, semantic_search

router = APIRouter()


@router.get("/search", response_model=SearchResponse, response_model_by_alias=True)
async def search(params: SearchParamsDep) -> SearchResponse:
    """Keyword search: q matched against name, one-liner, description and search text, plus filters."""
    return keyword_search(params)


@router.get("/semantic-search", response_model=SearchResponse, response_model_by_alias=True)
async def semantic(params: SearchParamsDep) -> SearchResponse:
    """Companies ranked by embedding similarity to q. Empty q returns no results."""
    return semantic_search(params)


@router.get("/facets", response_model=FacetsResponse)
async def facets() -> FacetsResponse:
    return get_facets()


@router.get("/analytics", response_model=AnalyticsResponse, response_model_by_alias=True)
async def analytics(params: SearchParamsDep, options: AnalyticsOptionsDep) -> AnalyticsResponse:
    """Per-batch counts. mode=semantic with a non-empty q scopes to the top semantic matches."""
    company_ids = None
    if options.semantic and params.query.strip():
        company_ids = get_semantic_top_ids(params, SEMANTIC_ANALYTICS_LIMIT)
    return get_batch_analytics(params, options.color_by, options.top_n, company_ids)
