"""Repository layer: company filter predicates shared by search and analytics."""

from apps.api.repositories.company_filters import (
    company_filter_clauses,
    company_predicate,
    company_predicates,
    keyword_clause,
    launched_year_expr,
    select_companies_matching,
)

__all__ = [
    "company_filter_clauses",
    "company_predicate",
    "company_predicates",
    "keyword_clause",
    "launched_year_expr",
    "select_companies_matching",
]
