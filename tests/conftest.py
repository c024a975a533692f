"""Shared pytest fixtures for fts-search-mcp tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from fts_search_mcp.index import SearchEngine
from fts_search_mcp.samples import SAMPLE_DOCUMENTS


@pytest.fixture
def engine():
    """In-memory engine with the default title/content columns."""
    eng = SearchEngine(":memory:", ["title", "content"])
    yield eng
    eng.close()


@pytest.fixture
def sample_documents() -> list[dict]:
    """Return sample documents for testing."""
    return [dict(doc) for doc in SAMPLE_DOCUMENTS]


@pytest.fixture
def populated_engine(engine: SearchEngine, sample_documents: list[dict]):
    """Engine with the sample documents inserted."""
    engine.add_documents(sample_documents)
    return engine


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Return a temporary path for a database file."""
    return tmp_path / "test_search.db"


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SEARCH_* variables so config defaults apply."""
    for var in (
        "SEARCH_PREFIX",
        "SEARCH_TABLE_NAME",
        "SEARCH_COLUMNS",
        "SEARCH_DB_PATH",
        "SEARCH_DEFAULT_LIMIT",
    ):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def configured_env(clean_env, temp_db_path: Path):
    """Point the configured engine at a temporary database."""
    clean_env.setenv("SEARCH_DB_PATH", str(temp_db_path))
    SearchEngine.reset_instance()
    yield clean_env
    SearchEngine.reset_instance()
