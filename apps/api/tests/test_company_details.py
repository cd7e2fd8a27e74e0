"""Company detail (snapshot preference) and similar companies. Repo patched."""

import json
import types
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from apps.api.services.company_details import get_company_detail, get_similar_companies


def _snapshot(source: str, markdown: str | None, error: str | None = None):
    return types.SimpleNamespace(
        source=source,
        content_markdown=markdown,
        website_url=f"https://{source}.example.com",
        error=error,
        scraped_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


@patch("apps.api.services.company_details.get_company_vector", return_value="[0.1, 0.2]")
@patch("apps.api.services.company_details.get_website_snapshots")
@patch("apps.api.services.company_details.get_company_by_id")
def test_detail_prefers_crawl4ai(mock_company, mock_snaps, _mock_vec, company_factory) -> None:
    mock_company.return_value = company_factory(
        9, "Acme", former_names='["Acme Old"]', tags=["ai"], launched_at=1609459200, top_company=True
    )
    mock_snaps.return_value = {
        "crawl4ai": _snapshot("crawl4ai", "# crawl4ai"),
        "firecrawl": _snapshot("firecrawl", "# firecrawl", error="timeout"),
    }
    detail = get_company_detail(9)
    assert detail.content_markdown == "# crawl4ai"
    assert detail.website_url == "https://crawl4ai.example.com"
    assert detail.scrape_error == "timeout"
    assert detail.content_markdown_crawl4ai == "# crawl4ai"
    assert detail.content_markdown_firecrawl == "# firecrawl"
    assert detail.scraped_at == "2024-05-01T00:00:00+00:00"
    assert detail.former_names == ["Acme Old"]
    assert detail.launched_year == 2021
    assert detail.top_company is True
    assert detail.has_embedding is True


@patch("apps.api.services.company_details.get_company_vector", return_value=None)
@patch("apps.api.services.company_details.get_website_snapshots")
@patch("apps.api.services.company_details.get_company_by_id")
def test_detail_falls_back_to_firecrawl(mock_company, mock_snaps, _mock_vec, company_factory) -> None:
    mock_company.return_value = company_factory(9, "Acme")
    mock_snaps.return_value = {"firecrawl": _snapshot("firecrawl", "# firecrawl")}
    detail = get_company_detail(9)
    assert detail.content_markdown == "# firecrawl"
    assert detail.content_markdown_crawl4ai is None
    assert detail.has_embedding is False


@patch("apps.api.services.company_details.get_company_by_id", return_value=None)
def test_detail_unknown_company_is_none(_mock) -> None:
    assert get_company_detail(404) is None


@pytest.fixture
def neighbours(company_factory):
    vectors = {
        2: [0.0, 1.0],
        3: [1.0, 1.0],
        4: [1.0, 0.0],
        5: [1.0, 0.0],
        6: "not json",
    }
    return [(company_factory(cid, slug=f"c{cid}"), v if isinstance(v, str) else json.dumps(v)) for cid, v in vectors.items()]


def test_similar_sorted_desc_ties_by_id_and_limited(neighbours) -> None:
    with patch("apps.api.services.company_details.get_company_vector", return_value="[1.0, 0.0]"), patch(
        "apps.api.services.company_details.list_embedded_companies", return_value=neighbours
    ) as mock_list:
        similar = get_similar_companies(1, limit=3)
    mock_list.assert_called_once_with(exclude_id=1)
    assert [s.id for s in similar] == [4, 5, 3]
    assert [s.similarity for s in similar] == [1.0, 1.0, 0.7071]
    assert similar[0].slug == "c4"


def test_similar_without_target_vector_is_empty(neighbours) -> None:
    for raw in (None, "[oops"):
        with patch("apps.api.services.company_details.get_company_vector", return_value=raw), patch(
            "apps.api.services.company_details.list_embedded_companies", return_value=neighbours
        ):
            assert get_similar_companies(1) == []


def test_similar_skips_non_finite_vectors(neighbours, company_factory) -> None:
    neighbours.append((company_factory(7), "[NaN, 1.0]"))
    with patch("apps.api.services.company_details.get_company_vector", return_value="[1.0, 0.0]"), patch(
        "apps.api.services.company_details.list_embedded_companies", return_value=neighbours
    ):
        similar = get_similar_companies(1, limit=10)
    assert [s.id for s in similar] == [4, 5, 3, 2]
    with patch("apps.api.services.company_details.get_company_vector", return_value="[Infinity, 0.0]"):
        assert get_similar_companies(1) == []
