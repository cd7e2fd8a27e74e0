"""Company endpoints: detail, similar companies and the embedding map."""

from fastapi import APIRouter, HTTPException, Query

from apps.api.schemas.responses import CompanyDetail, EmbeddingMapResponse, SimilarCompany
from apps.api.services.company_details import get_company_detail, get_similar_companies
from apps.api.services.projection import get_company_embedding_map
from apps.api.services.request_parsing import parse_map_limit

router = APIRouter()


@router.get("/{company_id}", response_model=CompanyDetail)
async def company_detail(company_id: int) -> CompanyDetail:
    detail = get_company_detail(company_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return detail


@router.get("/{company_id}/similar", response_model=list[SimilarCompany])
async def similar_companies(company_id: int, limit: int = Query(8, ge=1, le=50)) -> list[SimilarCompany]:
    """Nearest companies by embedding cosine similarity. Empty when the company has no embedding."""
    return get_similar_companies(company_id, limit)


@router.get("/{company_id}/embedding-map", response_model=EmbeddingMapResponse, response_model_by_alias=True)
async def embedding_map(company_id: int, limit: str | None = Query(None)) -> EmbeddingMapResponse:
    """Selected company plus its nearest neighbours on the 2D PCA layout."""
    result = get_company_embedding_map(company_id, parse_map_limit(limit))
    if result is None:
        raise HTTPException(status_code=404, detail="Embedding map unavailable for this company")
    return result
