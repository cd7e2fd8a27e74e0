"""Health check response schema."""

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ok: bool
    version: str
    time: str
    embedding_model: str
