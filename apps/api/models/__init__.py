"""SQLAlchemy models for the company corpus and its derived tables."""

from apps.api.models.base import Base
from apps.api.models.company import Company
from apps.api.models.company_embedding import CompanyEmbedding
from apps.api.models.sync_state import SyncState
from apps.api.models.website_snapshot import WebsiteSnapshot

__all__ = [
    "Base",
    "Company",
    "CompanyEmbedding",
    "SyncState",
    "WebsiteSnapshot",
]
