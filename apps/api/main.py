"""FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logging.basicConfig(level=logging.INFO)
from fastapi.middleware.cors import CORSMiddleware

from apps.api.db import ensure_tables
from apps.api.routes import chat, companies, health, search

logger = logging.getLogger(__name__)

# CORS: allow only specified origins (no wildcard).
# Env: CORS_ALLOW_ORIGINS="https://search.example.com,http://localhost:3000" (comma-separated).
# If not set, default to localhost only for local dev.
CORS_DEFAULT_ORIGINS = ["http://localhost:3000"]
_cors_origins_raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
CORS_ORIGINS = (
    [o.strip() for o in _cors_origins_raw.split(",") if o.strip()]
    if _cors_origins_raw
    else CORS_DEFAULT_ORIGINS
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup when SCHEMA_AUTHORITY=ensure_tables; otherwise Alembic owns the schema."""
    ensure_tables()
    yield


app = FastAPI(
    title="YC Company Search API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=CORS_ORIGINS, allow_methods=["GET", "POST"], allow_headers=["*"])


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failures (provider errors included) surface as {"error": message}."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})


app.include_router(health.router, tags=["health"])
app.include_router(search.router, tags=["search"])
app.include_router(companies.router, prefix="/companies", tags=["companies"])
app.include_router(chat.router, tags=["chat"])
