"""Response schemas for API endpoints. Contract-frozen: extra fields forbidden.

Envelope fields go over the wire in camelCase (pageSize, totalCompanies,
selectedCompanyId); company rows keep their column names.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_ENVELOPE = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class CompanyResult(BaseModel):
    """A hydrated search result row. score is set only by semantic search."""

    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    slug: str | None = None
    website: str | None = None
    one_liner: str | None = None
    long_description: str | None = None
    batch: str | None = None
    stage: str | None = None
    industry: str | None = None
    all_locations: str | None = None
    launched_at: int | None = None
    launched_year: int | None = None
    team_size: int | None = None
    is_hiring: bool = False
    nonprofit: bool = False
    top_company: bool = False
    tags: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    regions: list[str] = Field(default_factory=list)
    url: str | None = None
    small_logo_thumb_url: str | None = None
    status: str | None = None
    score: float | None = None


class SearchResponse(BaseModel):
    """Response for keyword and semantic search. total is independent of pagination."""

    model_config = _ENVELOPE

    total: int
    page: int
    page_size: int
    results: list[CompanyResult] = Field(default_factory=list)


class FacetItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: str | int
    count: int


class FacetsResponse(BaseModel):
    """Distinct value counts per facet, count descending (years: newest first)."""

    model_config = ConfigDict(extra="forbid")

    tags: list[FacetItem] = Field(default_factory=list)
    industries: list[FacetItem] = Field(default_factory=list)
    regions: list[FacetItem] = Field(default_factory=list)
    stages: list[FacetItem] = Field(default_factory=list)
    years: list[FacetItem] = Field(default_factory=list)


class AnalyticsResponse(BaseModel):
    """Per-batch counts. rows carry 'batch', 'total' and one key per series entry."""

    model_config = _ENVELOPE

    color_by: Literal["none", "tags", "industries"]
    total_companies: int
    series: list[str] = Field(default_factory=list)
    rows: list[dict[str, str | int]] = Field(default_factory=list)


class EmbeddingMapPoint(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    x: float
    y: float
    group: Literal["selected", "similar"]


class EmbeddingMapResponse(BaseModel):
    """2D PCA layout of the selected company and its nearest neighbours."""

    model_config = _ENVELOPE

    method: Literal["PCA"] = "PCA"
    selected_company_id: int
    points: list[EmbeddingMapPoint] = Field(default_factory=list)


class SimilarCompany(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    slug: str | None = None
    one_liner: str | None = None
    industry: str | None = None
    batch: str | None = None
    stage: str | None = None
    small_logo_thumb_url: str | None = None
    website: str | None = None
    url: str | None = None
    similarity: float


class CompanyDetail(BaseModel):
    """Full company record plus the preferred website snapshot (crawl4ai, then firecrawl)."""

    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    slug: str | None = None
    former_names: list[str] = Field(default_factory=list)
    small_logo_thumb_url: str | None = None
    website: str | None = None
    all_locations: str | None = None
    long_description: str | None = None
    one_liner: str | None = None
    team_size: int | None = None
    industry: str | None = None
    subindustry: str | None = None
    launched_at: int | None = None
    launched_year: int | None = None
    tags: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    regions: list[str] = Field(default_factory=list)
    top_company: bool = False
    is_hiring: bool = False
    nonprofit: bool = False
    batch: str | None = None
    status: str | None = None
    stage: str | None = None
    url: str | None = None
    search_text: str = ""
    content_markdown: str | None = None
    website_url: str | None = None
    scraped_at: str | None = None
    scrape_error: str | None = None
    content_markdown_crawl4ai: str | None = None
    content_markdown_firecrawl: str | None = None
    has_embedding: bool = False


class ChatCitation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company_id: int
    name: str
    score: float


class ChatResponse(BaseModel):
    """Narrative answer grounded in retrieved companies. Citations only reference retrieved ids."""

    model_config = ConfigDict(extra="forbid")

    answer: str
    citations: list[ChatCitation] = Field(default_factory=list)
