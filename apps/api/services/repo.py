"""Repository layer for the company corpus.

RULE: Repo is the ONLY place allowed to run DB reads/writes (session.execute, get_db).
Company filtering MUST go through repositories.company_filters so that "current
filters" mean the same thing for search, semantic ranking and analytics.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert

from apps.api.db import get_db
from apps.api.models.company import Company
from apps.api.models.company_embedding import CompanyEmbedding
from apps.api.models.sync_state import SyncState
from apps.api.models.website_snapshot import WebsiteSnapshot
from apps.api.repositories.company_filters import select_companies_matching
from apps.api.schemas.requests import SearchFilters


def search_companies_page(
    filters: SearchFilters,
    query: str,
    order_by: Sequence[ColumnElement[Any]],
    offset: int,
    limit: int,
) -> tuple[int, list[Company]]:
    """Keyword + filter query. Returns (total matching, page of companies).
    total ignores offset/limit."""
    stmt = select_companies_matching(filters, query)
    count_stmt = select(func.count()).select_from(stmt.subquery())
    page_stmt = stmt.order_by(*order_by).offset(offset).limit(limit)
    with get_db() as session:
        total = session.execute(count_stmt).scalar_one()
        rows = list(session.scalars(page_stmt).all())
    return int(total or 0), rows


def list_embedded_companies(exclude_id: int | None = None) -> list[tuple[Company, str]]:
    """All companies that have a stored embedding, with the raw vector payload.
    Ordered by company id so downstream ranking is reproducible."""
    stmt = (
        select(Company, CompanyEmbedding.vector)
        .join(CompanyEmbedding, CompanyEmbedding.company_id == Company.id)
        .order_by(Company.id.asc())
    )
    if exclude_id is not None:
        stmt = stmt.where(Company.id != exclude_id)
    with get_db() as session:
        return [(company, vector) for company, vector in session.execute(stmt).all()]


def list_facet_rows() -> list[tuple[Any, Any, Any, str | None, int | None]]:
    """(tags, industries, regions, stage, launched_at) for every company."""
    stmt = select(Company.tags, Company.industries, Company.regions, Company.stage, Company.launched_at)
    with get_db() as session:
        return [tuple(r) for r in session.execute(stmt).all()]


def list_analytics_rows(
    filters: SearchFilters,
    query: str,
    company_ids: Sequence[int] | None = None,
) -> list[tuple[int, str | None, Any, Any]]:
    """(id, batch, tags, industries) for the analytics candidate set.

    company_ids given: exactly those companies (filters/query not applied; [] => []).
    Otherwise: keyword text AND filter set over the full corpus.
    """
    columns = (Company.id, Company.batch, Company.tags, Company.industries)
    if company_ids is not None:
        if not company_ids:
            return []
        stmt = select(*columns).where(Company.id.in_(list(company_ids)))
    else:
        stmt = select_companies_matching(filters, query).with_only_columns(*columns)
    stmt = stmt.order_by(Company.id.asc())
    with get_db() as session:
        return [tuple(r) for r in session.execute(stmt).all()]


def get_embedding_signature() -> str:
    """Data-version signature of company_embeddings: '<count>-<max(updated_at)|none>'."""
    stmt = select(func.count(), func.max(CompanyEmbedding.updated_at)).select_from(CompanyEmbedding)
    with get_db() as session:
        count, latest = session.execute(stmt).one()
    latest_str = latest.isoformat() if latest is not None else "none"
    return f"{int(count or 0)}-{latest_str}"


def list_embedding_points() -> list[tuple[int, str, str]]:
    """(company_id, name, raw vector) for every stored embedding, ordered by id."""
    stmt = (
        select(Company.id, Company.name, CompanyEmbedding.vector)
        .join(Company, Company.id == CompanyEmbedding.company_id)
        .order_by(Company.id.asc())
    )
    with get_db() as session:
        return [tuple(r) for r in session.execute(stmt).all()]


def get_company_by_id(company_id: int) -> Company | None:
    with get_db() as session:
        return session.get(Company, company_id)


def get_company_vector(company_id: int) -> str | None:
    """Raw stored vector for a company, or None if it has no embedding."""
    stmt = select(CompanyEmbedding.vector).where(CompanyEmbedding.company_id == company_id)
    with get_db() as session:
        return session.execute(stmt).scalar_one_or_none()


def get_website_snapshots(company_id: int) -> dict[str, WebsiteSnapshot]:
    """Website snapshots for a company keyed by source (crawl4ai, firecrawl)."""
    stmt = select(WebsiteSnapshot).where(WebsiteSnapshot.company_id == company_id)
    with get_db() as session:
        return {s.source: s for s in session.scalars(stmt).all()}


def list_companies_needing_embed(limit: int) -> list[tuple[Company, str | None]]:
    """Companies flagged needs_embed, with preferred website markdown (crawl4ai, then firecrawl)."""
    stmt = select(Company).where(Company.needs_embed.is_(True)).order_by(Company.id.asc()).limit(limit)
    with get_db() as session:
        companies = list(session.scalars(stmt).all())
        if not companies:
            return []
        ids = [c.id for c in companies]
        snaps = session.scalars(select(WebsiteSnapshot).where(WebsiteSnapshot.company_id.in_(ids))).all()
    by_company: dict[int, dict[str, str]] = {}
    for s in snaps:
        by_company.setdefault(s.company_id, {})[s.source] = s.content_markdown or ""
    out = []
    for c in companies:
        sources = by_company.get(c.id, {})
        out.append((c, sources.get("crawl4ai") or sources.get("firecrawl")))
    return out


def get_embedding_source_hash(company_id: int) -> str | None:
    stmt = select(CompanyEmbedding.source_hash).where(CompanyEmbedding.company_id == company_id)
    with get_db() as session:
        return session.execute(stmt).scalar_one_or_none()


def upsert_company_embedding(
    company_id: int,
    model: str,
    vector_json: str,
    dimensions: int,
    source_hash: str,
) -> None:
    """Insert or replace the company's embedding. Bumps updated_at (invalidates projection)."""
    stmt = pg_insert(CompanyEmbedding).values(
        company_id=company_id,
        model=model,
        dimensions=dimensions,
        vector=vector_json,
        source_hash=source_hash,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[CompanyEmbedding.company_id],
        set_={
            "model": stmt.excluded.model,
            "dimensions": stmt.excluded.dimensions,
            "vector": stmt.excluded.vector,
            "source_hash": stmt.excluded.source_hash,
            "embedded_at": func.now(),
            "updated_at": func.now(),
        },
    )
    with get_db() as session:
        session.execute(stmt)


def mark_company_embedded(company_id: int) -> None:
    stmt = update(Company).where(Company.id == company_id).values(needs_embed=False, updated_at=func.now())
    with get_db() as session:
        session.execute(stmt)


def set_sync_state(key: str, value: str) -> None:
    stmt = pg_insert(SyncState).values(key=key, value=value)
    stmt = stmt.on_conflict_do_update(
        index_elements=[SyncState.key],
        set_={"value": stmt.excluded.value, "updated_at": func.now()},
    )
    with get_db() as session:
        session.execute(stmt)


def get_sync_state(key: str) -> str | None:
    with get_db() as session:
        row = session.get(SyncState, key)
        return row.value if row else None
