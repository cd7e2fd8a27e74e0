"""Derived company fields: search text, embedding text, launch year."""

from apps.api.services.company_normalize import (
    WEBSITE_CONTENT_MAX,
    build_company_search_text,
    build_embedding_text,
    launched_year,
)


def test_launched_year_is_utc() -> None:
    # 2021-01-01T00:30:00Z; still 2020 in US time zones
    assert launched_year(1609461000) == 2021
    assert launched_year(None) is None
    assert launched_year(0) is None


def test_search_text_collapses_whitespace(company_factory) -> None:
    company = company_factory(
        1,
        "Acme",
        one_liner="  Rockets   for\n everyone ",
        tags=["space", "hardware"],
        regions='["United States"]',
    )
    text = build_company_search_text(company)
    assert "Acme Rockets for everyone" in text
    assert "space hardware" in text
    assert "United States" in text
    assert "  " not in text


def test_embedding_text_truncates_website_markdown(company_factory) -> None:
    company = company_factory(7, "Acme", tags=["ai", "devtools"], batch="W21")
    text = build_embedding_text(company, "x" * (WEBSITE_CONTENT_MAX + 500))
    assert text.startswith("Company: Acme\n")
    assert "Tags: ai, devtools" in text
    assert "Batch: W21" in text
    website_line = text.split("\n")[-1]
    assert website_line == "Website content: " + "x" * WEBSITE_CONTENT_MAX


def test_embedding_text_without_markdown(company_factory) -> None:
    text = build_embedding_text(company_factory(7, "Acme"), None)
    assert text.endswith("Website content: ")
