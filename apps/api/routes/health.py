"""GET /health. Does not touch the database."""

import os
from datetime import datetime, timezone

from fastapi import APIRouter

from apps.api.schemas.health import HealthResponse
from apps.api.services.embedding_provider import get_embedding_provider

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """ok, version (GIT_SHA or dev), current time (ISO) and the active embedding model."""
    return HealthResponse(
        ok=True,
        version=os.getenv("GIT_SHA", "dev").strip() or "dev",
        time=datetime.now(timezone.utc).isoformat(),
        embedding_model=get_embedding_provider().model_name,
    )
