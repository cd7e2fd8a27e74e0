"""Root conftest: env for ALL test paths (tests/, apps/api/tests/)."""

import os
import tempfile

import pytest

# Deterministic embeddings and chat, no network
os.environ.setdefault("ENV", "test")
os.environ.setdefault("EMBED_PROVIDER", "deterministic")
os.environ.setdefault("CRON_LOG_DIR", os.path.join(tempfile.gettempdir(), "yc_search_test_logs"))


@pytest.fixture(autouse=True)
def _fresh_projection_cache():
    """Each test starts with an empty process-wide projection cache."""
    from apps.api.services.projection import get_projection_cache

    get_projection_cache().clear()
    yield
    get_projection_cache().clear()
