"""Pytest fixtures shared by tests/ and apps/api/tests/."""

import os

import pytest

os.environ.setdefault("ENV", "test")
os.environ.setdefault("EMBED_PROVIDER", "deterministic")

from tests._db_bootstrap import postgres_reachable, run_test_db_schema_fixture


def _db_available_for_tests() -> bool:
    """True if DATABASE_TEST_URL is set and Postgres is reachable (short timeout)."""
    return postgres_reachable(os.environ.get("DATABASE_TEST_URL"))


_DB_AVAILABLE = _db_available_for_tests()


@pytest.fixture(scope="session", autouse=True)
def test_db_schema():
    """Reset test DB schema at session start. Only runs if DATABASE_TEST_URL is set and reachable.
    Safety: db name must contain '_test' or ALLOW_TEST_DB_RESET=true."""
    if not _DB_AVAILABLE:
        return
    run_test_db_schema_fixture()


# Marker for DB tests: skip if DATABASE_TEST_URL not set or Postgres not reachable
requires_db = pytest.mark.skipif(
    not _DB_AVAILABLE,
    reason="DATABASE_TEST_URL not set or Postgres not reachable",
)
