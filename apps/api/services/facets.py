"""Facet counts over the whole company corpus. Pure read."""

from collections import Counter
from collections.abc import Iterable
from typing import Any

from apps.api.schemas.responses import FacetItem, FacetsResponse
from apps.api.services.company_normalize import launched_year
from apps.api.services.repo import list_facet_rows
from apps.api.utils.json_fields import parse_json_array


def rank_counts(counter: Counter) -> list[FacetItem]:
    """Count desc, then value asc."""
    ordered = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return [FacetItem(value=value, count=count) for value, count in ordered]


def count_facets(rows: Iterable[tuple[Any, Any, Any, str | None, int | None]]) -> FacetsResponse:
    """
    rows: (tags, industries, regions, stage, launched_at) per company.

    A company counts once per distinct value it carries, even if the stored
    array repeats it. Years come from launched_at (UTC) and are listed newest first.
    """
    tags: Counter = Counter()
    industries: Counter = Counter()
    regions: Counter = Counter()
    stages: Counter = Counter()
    years: Counter = Counter()
    for row_tags, row_industries, row_regions, stage, launched_at in rows:
        tags.update(set(parse_json_array(row_tags)))
        industries.update(set(parse_json_array(row_industries)))
        regions.update(set(parse_json_array(row_regions)))
        if stage:
            stages[stage] += 1
        year = launched_year(launched_at)
        if year is not None:
            years[year] += 1

    year_items = rank_counts(years)
    year_items.sort(key=lambda item: item.value, reverse=True)
    return FacetsResponse(
        tags=rank_counts(tags),
        industries=rank_counts(industries),
        regions=rank_counts(regions),
        stages=rank_counts(stages),
        years=year_items,
    )


def get_facets() -> FacetsResponse:
    return count_facets(list_facet_rows())
