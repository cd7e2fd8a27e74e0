"""Request schemas: search parameters, filter set and chat body.

Wire names are camelCase (pageSize, isHiring); Python attributes are snake_case.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SortMode = Literal["relevance", "newest", "team_size", "name"]
ColorBy = Literal["none", "tags", "industries"]

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50


class SearchFilters(BaseModel):
    """Filter set. Empty list = no constraint on that dimension.
    OR within a dimension, AND across dimensions; flags only constrain when True."""

    model_config = ConfigDict(extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True)

    tags: tuple[str, ...] = ()
    industries: tuple[str, ...] = ()
    regions: tuple[str, ...] = ()
    stages: tuple[str, ...] = ()
    batches: tuple[str, ...] = ()
    years: tuple[int, ...] = ()
    is_hiring: bool = False
    nonprofit: bool = False
    top_company: bool = False


class SearchParams(BaseModel):
    """Query text, filters, sort and pagination for keyword/semantic search and analytics."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    query: str = ""
    page: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: SortMode = "relevance"
    filters: SearchFilters = Field(default_factory=SearchFilters)


class ChatRequest(BaseModel):
    """Request body for POST /chat."""

    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )

    question: str = Field(..., min_length=1, description="Question about the company corpus")
    top_k: int = Field(8, ge=1, le=20, description="Number of companies used as context")
    filters: SearchFilters = Field(default_factory=SearchFilters)
