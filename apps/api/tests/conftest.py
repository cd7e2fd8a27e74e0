"""Pytest fixtures for API tests."""

import os
import types

import pytest

# Use deterministic embedding provider in tests (no network, no HuggingFace download)
os.environ.setdefault("ENV", "test")
os.environ["EMBED_PROVIDER"] = "deterministic"

# Mirror: use shared marker from tests.conftest (single source of truth)
from tests.conftest import requires_db  # noqa: F401

COMPANY_DEFAULTS = {
    "slug": None,
    "former_names": [],
    "small_logo_thumb_url": None,
    "website": None,
    "all_locations": None,
    "long_description": None,
    "one_liner": None,
    "team_size": None,
    "industry": None,
    "subindustry": None,
    "launched_at": None,
    "tags": [],
    "industries": [],
    "regions": [],
    "top_company": False,
    "is_hiring": False,
    "nonprofit": False,
    "batch": None,
    "status": "Active",
    "stage": None,
    "url": None,
    "search_text": "",
}


def make_company(id: int, name: str | None = None, **fields) -> types.SimpleNamespace:
    """Stand-in for a Company row with every column the services read."""
    return types.SimpleNamespace(id=id, name=name or f"Company {id}", **{**COMPANY_DEFAULTS, **fields})


@pytest.fixture
def company_factory():
    return make_company
