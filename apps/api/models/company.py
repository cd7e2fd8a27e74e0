"""companies model. Owned by the ingestion pipeline; read-only to search."""

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from apps.api.models.base import Base


class Company(Base):
    __tablename__ = "companies"
    __table_args__ = (
        Index("ix_companies_batch", "batch"),
        Index("ix_companies_launched_at", "launched_at"),
        Index("ix_companies_stage", "stage"),
        Index("ix_companies_industry", "industry"),
        Index("ix_companies_top_company", "top_company"),
        Index("ix_companies_needs_embed", "needs_embed"),
        Index("ix_companies_tags", "tags", postgresql_using="gin"),
        Index("ix_companies_industries", "industries", postgresql_using="gin"),
        Index("ix_companies_regions", "regions", postgresql_using="gin"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    former_names: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    small_logo_thumb_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    all_locations: Mapped[str | None] = mapped_column(Text, nullable=True)
    long_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    one_liner: Mapped[str | None] = mapped_column(Text, nullable=True)
    team_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    industry: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subindustry: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Unix seconds (UTC)
    launched_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    industries: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    regions: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    top_company: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_hiring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    nonprofit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    batch: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str | None] = mapped_column(String(64), nullable=True)
    stage: Mapped[str | None] = mapped_column(String(64), nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    search_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    company_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    needs_embed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=True)
