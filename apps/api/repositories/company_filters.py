"""Company filter predicates. Keyword search, semantic search and analytics MUST use these.

One filter set, two equivalent forms:
  - company_filter_clauses(filters): SQLAlchemy WHERE clauses for the companies table
  - company_predicate(filters): in-memory predicate over a loaded company record

Semantics (both forms):
  - Flags (is_hiring, nonprofit, top_company) constrain only when requested (True).
  - Empty set = no constraint. Non-empty set matches if ANY company value is in it.
  - Industries match the primary `industry` field OR any entry of `industries`.
  - Years come from launched_at (UTC); companies without launched_at never match.
  - All active dimensions are ANDed.
"""

from collections.abc import Callable
from typing import Any

from sqlalchemy import ColumnElement, Integer, Select, and_, cast, extract, func, or_, select

from apps.api.models.company import Company
from apps.api.schemas.requests import SearchFilters
from apps.api.services.company_normalize import launched_year
from apps.api.utils.json_fields import parse_json_array

CompanyPredicate = Callable[[Any], bool]


def launched_year_expr() -> ColumnElement[int]:
    """SQL expression: UTC year of companies.launched_at (unix seconds)."""
    return cast(
        extract("year", func.timezone("UTC", func.to_timestamp(Company.launched_at))),
        Integer,
    )


def _array_contains_any(column, values: tuple[str, ...]) -> ColumnElement[bool]:
    return or_(*[column.contains([v]) for v in values])


def company_filter_clauses(filters: SearchFilters) -> list[ColumnElement[bool]]:
    """Return one WHERE clause per active dimension. Empty list = identity filter."""
    clauses: list[ColumnElement[bool]] = []
    if filters.is_hiring:
        clauses.append(Company.is_hiring.is_(True))
    if filters.nonprofit:
        clauses.append(Company.nonprofit.is_(True))
    if filters.top_company:
        clauses.append(Company.top_company.is_(True))
    if filters.years:
        clauses.append(
            and_(
                Company.launched_at.is_not(None),
                Company.launched_at != 0,
                launched_year_expr().in_(list(filters.years)),
            )
        )
    if filters.tags:
        clauses.append(_array_contains_any(Company.tags, filters.tags))
    if filters.industries:
        clauses.append(
            or_(
                Company.industry.in_(list(filters.industries)),
                _array_contains_any(Company.industries, filters.industries),
            )
        )
    if filters.stages:
        clauses.append(Company.stage.in_(list(filters.stages)))
    if filters.batches:
        clauses.append(Company.batch.in_(list(filters.batches)))
    if filters.regions:
        clauses.append(_array_contains_any(Company.regions, filters.regions))
    return clauses


def keyword_clause(query: str) -> ColumnElement[bool] | None:
    """Case-insensitive substring match on name, one-liner, description or search_text.
    None when the query is blank."""
    q = (query or "").strip()
    if not q:
        return None
    return or_(
        Company.name.icontains(q, autoescape=True),
        Company.one_liner.icontains(q, autoescape=True),
        Company.long_description.icontains(q, autoescape=True),
        Company.search_text.icontains(q, autoescape=True),
    )


def select_companies_matching(filters: SearchFilters, query: str = "") -> Select[tuple[Company]]:
    """Select companies satisfying keyword text (if any) AND the filter set. Add .order_by() etc."""
    stmt = select(Company)
    text_clause = keyword_clause(query)
    if text_clause is not None:
        stmt = stmt.where(text_clause)
    clauses = company_filter_clauses(filters)
    if clauses:
        stmt = stmt.where(and_(*clauses))
    return stmt


def _flag(name: str) -> CompanyPredicate:
    return lambda company: bool(getattr(company, name, False))


def _any_in(name: str, wanted: frozenset[str]) -> CompanyPredicate:
    return lambda company: any(v in wanted for v in parse_json_array(getattr(company, name, None)))


def _scalar_in(name: str, wanted: frozenset[str]) -> CompanyPredicate:
    return lambda company: getattr(company, name, None) in wanted


def _industry_in(wanted: frozenset[str]) -> CompanyPredicate:
    def match(company: Any) -> bool:
        if getattr(company, "industry", None) in wanted:
            return True
        return any(v in wanted for v in parse_json_array(getattr(company, "industries", None)))

    return match


def _year_in(wanted: frozenset[int]) -> CompanyPredicate:
    return lambda company: launched_year(getattr(company, "launched_at", None)) in wanted


def company_predicates(filters: SearchFilters) -> list[CompanyPredicate]:
    """One predicate per active dimension, mirroring company_filter_clauses."""
    predicates: list[CompanyPredicate] = []
    if filters.is_hiring:
        predicates.append(_flag("is_hiring"))
    if filters.nonprofit:
        predicates.append(_flag("nonprofit"))
    if filters.top_company:
        predicates.append(_flag("top_company"))
    if filters.years:
        predicates.append(_year_in(frozenset(filters.years)))
    if filters.tags:
        predicates.append(_any_in("tags", frozenset(filters.tags)))
    if filters.industries:
        predicates.append(_industry_in(frozenset(filters.industries)))
    if filters.stages:
        predicates.append(_scalar_in("stage", frozenset(filters.stages)))
    if filters.batches:
        predicates.append(_scalar_in("batch", frozenset(filters.batches)))
    if filters.regions:
        predicates.append(_any_in("regions", frozenset(filters.regions)))
    return predicates


def company_predicate(filters: SearchFilters) -> CompanyPredicate:
    """AND-compose the per-dimension predicates into one callable."""
    predicates = company_predicates(filters)
    return lambda company: all(p(company) for p in predicates)
