"""Base schema: companies, company_embeddings, website_snapshots, sync_state.

company_embeddings.vector is JSON text; readers decode it row by row.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "000_base"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_EMPTY_ARRAY = sa.text("'[]'::jsonb")


def upgrade() -> None:
    # 1) companies (everything else references it)
    op.create_table(
        "companies",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(255), nullable=True),
        sa.Column("former_names", JSONB(), nullable=False, server_default=_EMPTY_ARRAY),
        sa.Column("small_logo_thumb_url", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("all_locations", sa.Text(), nullable=True),
        sa.Column("long_description", sa.Text(), nullable=True),
        sa.Column("one_liner", sa.Text(), nullable=True),
        sa.Column("team_size", sa.Integer(), nullable=True),
        sa.Column("industry", sa.String(255), nullable=True),
        sa.Column("subindustry", sa.String(255), nullable=True),
        sa.Column("launched_at", sa.BigInteger(), nullable=True),
        sa.Column("tags", JSONB(), nullable=False, server_default=_EMPTY_ARRAY),
        sa.Column("industries", JSONB(), nullable=False, server_default=_EMPTY_ARRAY),
        sa.Column("regions", JSONB(), nullable=False, server_default=_EMPTY_ARRAY),
        sa.Column("top_company", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_hiring", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("nonprofit", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("batch", sa.String(64), nullable=True),
        sa.Column("status", sa.String(64), nullable=True),
        sa.Column("stage", sa.String(64), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("search_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("company_hash", sa.String(64), nullable=False, server_default=""),
        sa.Column("needs_embed", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        if_not_exists=True,
    )
    for column in ("batch", "launched_at", "stage", "industry", "top_company", "needs_embed"):
        op.create_index(f"ix_companies_{column}", "companies", [column], if_not_exists=True)
    for column in ("tags", "industries", "regions"):
        op.create_index(f"ix_companies_{column}", "companies", [column], postgresql_using="gin", if_not_exists=True)

    # 2) company_embeddings (one active vector per company)
    op.create_table(
        "company_embeddings",
        sa.Column(
            "company_id",
            sa.BigInteger(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("model", sa.String(128), nullable=False),
        sa.Column("dimensions", sa.Integer(), nullable=False),
        sa.Column("vector", sa.Text(), nullable=False),
        sa.Column("source_hash", sa.String(64), nullable=False),
        sa.Column("embedded_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        if_not_exists=True,
    )
    op.create_index(
        "ix_company_embeddings_source_hash", "company_embeddings", ["source_hash"], if_not_exists=True
    )

    # 3) website_snapshots (one row per company and scrape source)
    op.create_table(
        "website_snapshots",
        sa.Column(
            "company_id",
            sa.BigInteger(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("source", sa.String(32), primary_key=True, server_default="crawl4ai"),
        sa.Column("website_url", sa.Text(), nullable=True),
        sa.Column("content_markdown", sa.Text(), nullable=False, server_default=""),
        sa.Column("content_hash", sa.String(64), nullable=False, server_default=""),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("scraped_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        if_not_exists=True,
    )
    op.create_index(
        "ix_website_snapshots_content_hash", "website_snapshots", ["content_hash"], if_not_exists=True
    )

    # 4) sync_state
    op.create_table(
        "sync_state",
        sa.Column("key", sa.String(128), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        if_not_exists=True,
    )


def downgrade() -> None:
    op.drop_table("sync_state", if_exists=True)
    op.drop_index("ix_website_snapshots_content_hash", table_name="website_snapshots", if_exists=True)
    op.drop_table("website_snapshots", if_exists=True)
    op.drop_index("ix_company_embeddings_source_hash", table_name="company_embeddings", if_exists=True)
    op.drop_table("company_embeddings", if_exists=True)
    for column in ("tags", "industries", "regions", "batch", "launched_at", "stage", "industry", "top_company", "needs_embed"):
        op.drop_index(f"ix_companies_{column}", table_name="companies", if_exists=True)
    op.drop_table("companies", if_exists=True)
