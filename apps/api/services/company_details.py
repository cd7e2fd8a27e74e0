"""Company detail page data and nearest-neighbour lookup over stored embeddings."""

import logging

from apps.api.models.website_snapshot import SNAPSHOT_SOURCES
from apps.api.schemas.responses import CompanyDetail, SimilarCompany
from apps.api.services.company_normalize import launched_year
from apps.api.services.repo import (
    get_company_by_id,
    get_company_vector,
    get_website_snapshots,
    list_embedded_companies,
)
from apps.api.services.vector_math import cosine_similarity
from apps.api.utils.json_fields import parse_json_array, parse_vector

logger = logging.getLogger(__name__)

SIMILARITY_DECIMALS = 4


def _first_present(snapshots: dict, attr: str):
    """Value of attr from the first snapshot source (crawl4ai, then firecrawl) that has it."""
    for source in SNAPSHOT_SOURCES:
        snap = snapshots.get(source)
        value = getattr(snap, attr, None) if snap is not None else None
        if value is not None:
            return value
    return None


def get_company_detail(company_id: int) -> CompanyDetail | None:
    """Full company record with the preferred website snapshot. None for unknown ids."""
    company = get_company_by_id(company_id)
    if company is None:
        return None
    snapshots = get_website_snapshots(company_id)
    crawl4ai = snapshots.get("crawl4ai")
    firecrawl = snapshots.get("firecrawl")
    scraped_at = _first_present(snapshots, "scraped_at")
    return CompanyDetail(
        id=company.id,
        name=company.name or "",
        slug=company.slug,
        former_names=parse_json_array(company.former_names),
        small_logo_thumb_url=company.small_logo_thumb_url,
        website=company.website,
        all_locations=company.all_locations,
        long_description=company.long_description,
        one_liner=company.one_liner,
        team_size=company.team_size,
        industry=company.industry,
        subindustry=company.subindustry,
        launched_at=company.launched_at,
        launched_year=launched_year(company.launched_at),
        tags=parse_json_array(company.tags),
        industries=parse_json_array(company.industries),
        regions=parse_json_array(company.regions),
        top_company=bool(company.top_company),
        is_hiring=bool(company.is_hiring),
        nonprofit=bool(company.nonprofit),
        batch=company.batch,
        status=company.status,
        stage=company.stage,
        url=company.url,
        search_text=company.search_text or "",
        content_markdown=_first_present(snapshots, "content_markdown"),
        website_url=_first_present(snapshots, "website_url"),
        scraped_at=scraped_at.isoformat() if scraped_at is not None else None,
        scrape_error=_first_present(snapshots, "error"),
        content_markdown_crawl4ai=crawl4ai.content_markdown if crawl4ai is not None else None,
        content_markdown_firecrawl=firecrawl.content_markdown if firecrawl is not None else None,
        has_embedding=get_company_vector(company_id) is not None,
    )


def get_similar_companies(company_id: int, limit: int = 8) -> list[SimilarCompany]:
    """
    Other companies ranked by cosine similarity of their stored vectors to this company's.
    Similarity desc, ties by id asc; similarity rounded to 4 decimals.
    No (or malformed) target vector => [].
    """
    target = parse_vector(get_company_vector(company_id))
    if not target or limit <= 0:
        return []
    scored = []
    for company, raw_vector in list_embedded_companies(exclude_id=company_id):
        vector = parse_vector(raw_vector)
        if vector is None:
            continue
        scored.append((company, cosine_similarity(target, vector)))
    scored.sort(key=lambda item: (-item[1], item[0].id))
    return [
        SimilarCompany(
            id=c.id,
            name=c.name or "",
            slug=c.slug,
            one_liner=c.one_liner,
            industry=c.industry,
            batch=c.batch,
            stage=c.stage,
            small_logo_thumb_url=c.small_logo_thumb_url,
            website=c.website,
            url=c.url,
            similarity=round(similarity, SIMILARITY_DECIMALS),
        )
        for c, similarity in scored[:limit]
    ]
