"""Fixtures for CLI testing."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from crate_query_common import get_settings


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def index_dir() -> Path:
    """On-disk test index shared with the crate_index tests."""
    return Path(__file__).parent.parent.parent / "index" / "tests" / "data" / "index"


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate every test from the caller's CRATE_QUERY_* environment."""
    for var in ("CRATE_QUERY_INDEX_DIR", "CRATE_QUERY_INDEX_URL", "CRATE_QUERY_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
