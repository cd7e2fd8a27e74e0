"""Repo against a real Postgres: keyword filters, semantic ranking, analytics and signature changes.

Skipped unless DATABASE_TEST_URL points at a reachable database.
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import delete

from apps.api.db import get_db
from apps.api.models import Company, CompanyEmbedding, SyncState, WebsiteSnapshot
from apps.api.schemas.requests import SearchFilters, SearchParams
from apps.api.services import repo
from apps.api.services.analytics import get_batch_analytics
from apps.api.services.projection import get_company_embedding_map
from apps.api.services.search import keyword_search, semantic_search
from apps.api.utils.json_fields import dump_vector
from tests.conftest import requires_db


def _ts(year: int) -> int:
    return int(datetime(year, 6, 1, tzinfo=timezone.utc).timestamp())


@pytest.fixture
def seeded():
    with get_db() as session:
        for model in (CompanyEmbedding, WebsiteSnapshot, SyncState, Company):
            session.execute(delete(model))
    with get_db() as session:
        session.add_all(
            [
                Company(id=1, name="Acme", one_liner="Rocket engines", tags=["Space"], industries=["Aerospace"],
                        regions=["America"], batch="W21", launched_at=_ts(2021), is_hiring=True, top_company=True),
                Company(id=2, name="Beta", one_liner="Payments API", tags=["Fintech", "API"], industries=["Fintech"],
                        regions=["Europe"], batch="S21", launched_at=_ts(2021)),
                Company(id=3, name="Gamma", one_liner="Rocket fuel", tags=["Space"], industries=["Energy"],
                        regions=["America"], batch="W22", launched_at=_ts(2022), is_hiring=True),
            ]
        )
    for company_id, vector in ((1, [1.0, 0.0, 0.0]), (2, [0.0, 1.0, 0.0]), (3, [0.9, 0.1, 0.0])):
        repo.upsert_company_embedding(company_id, "test", dump_vector(vector), 3, f"h{company_id}")
    yield


@requires_db
def test_keyword_search_text_and_filters(seeded) -> None:
    res = keyword_search(SearchParams(query="rocket"))
    assert res.total == 2
    assert [r.name for r in res.results] == ["Acme", "Gamma"]

    res = keyword_search(SearchParams(filters=SearchFilters(tags=("Space",), is_hiring=True, years=(2022,))))
    assert [r.id for r in res.results] == [3]

    res = keyword_search(SearchParams(filters=SearchFilters(industries=("Aerospace", "Fintech"))))
    assert {r.id for r in res.results} == {1, 2}


@requires_db
def test_keyword_search_pagination_total(seeded) -> None:
    res = keyword_search(SearchParams(page=2, page_size=2, sort="name"))
    assert res.total == 3
    assert [r.name for r in res.results] == ["Gamma"]


@requires_db
def test_semantic_search_uses_stored_vectors(seeded) -> None:
    with patch("apps.api.services.search.embed_text", return_value=[1.0, 0.0, 0.0]):
        res = semantic_search(SearchParams(query="rockets", filters=SearchFilters(regions=("America",))))
    assert [r.id for r in res.results] == [1, 3]
    assert res.results[0].score == 1.0


@requires_db
def test_analytics_rows_follow_filters(seeded) -> None:
    res = get_batch_analytics(SearchParams(filters=SearchFilters(tags=("Space",))), "tags", 8)
    assert res.series == ["Space", "Other"]
    assert [row["batch"] for row in res.rows] == ["W21", "W22"]


@requires_db
def test_signature_changes_on_upsert(seeded) -> None:
    before = repo.get_embedding_signature()
    assert before.startswith("3-")
    repo.upsert_company_embedding(2, "test", dump_vector([0.0, 0.0, 1.0]), 3, "h2b")
    assert repo.get_embedding_signature() != before
    assert repo.get_embedding_source_hash(2) == "h2b"


@requires_db
def test_embedding_map_from_db(seeded) -> None:
    res = get_company_embedding_map(1, similar_limit=1)
    assert res.selected_company_id == 1
    assert {p.id for p in res.points} == {1, 3}


@requires_db
def test_needs_embed_and_sync_state(seeded) -> None:
    pending = repo.list_companies_needing_embed(10)
    assert [c.id for c, _ in pending] == [1, 2, 3]
    repo.mark_company_embedded(1)
    assert [c.id for c, _ in repo.list_companies_needing_embed(10)] == [2, 3]
    repo.set_sync_state("embed_last_sync_at", "x")
    repo.set_sync_state("embed_last_sync_at", "y")
    assert repo.get_sync_state("embed_last_sync_at") == "y"
