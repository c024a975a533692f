"""Tests for the SearchEngine facade.

Tests the central class around the FTS5 table:
- Configuration and table naming
- Document insertion
- Search features (keywords, phrases, negation, limits)
- Error mapping
- Connection lifecycle and singleton
"""

from __future__ import annotations

import os
import stat
from unittest.mock import patch

import pytest

from fts_search_mcp.exceptions import (
    BackendError,
    ConfigurationError,
    InvalidQuery,
)
from fts_search_mcp.index import SearchEngine
from fts_search_mcp.index.schema import table_exists


def _text(row: dict) -> str:
    return f"{row['title']} {row['content']}".lower()


class TestConfiguration:
    """Tests for construction and table naming."""

    def test_default_table_name_and_prefix(self):
        with SearchEngine(":memory:", ["title"]) as engine:
            engine.add_document({"title": "Test"})
            assert engine.table == "search_documents"
            assert table_exists(engine._get_conn(), "search_documents")

    def test_custom_table_name_and_prefix(self):
        with SearchEngine(
            ":memory:", ["title"], table_name="articles", prefix="idx_"
        ) as engine:
            engine.add_document({"title": "Test"})
            assert table_exists(engine._get_conn(), "idx_articles")

    def test_empty_prefix(self):
        with SearchEngine(":memory:", ["title"], prefix="") as engine:
            assert engine.table == "documents"

    def test_empty_columns_raises(self):
        with pytest.raises(ConfigurationError):
            SearchEngine(":memory:", [])

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"columns": ["title; DROP TABLE x"]},
            {"columns": ["1title"]},
            {"columns": ["title"], "table_name": "docs-2"},
            {"columns": ["title"], "prefix": "bad prefix "},
        ],
    )
    def test_rejects_unsafe_identifiers(self, kwargs):
        with pytest.raises(ConfigurationError):
            SearchEngine(":memory:", **kwargs)

    def test_columns_are_copied(self):
        columns = ["title", "content"]
        with SearchEngine(":memory:", columns) as engine:
            columns.append("extra")
            assert engine.columns == ["title", "content"]

    def test_file_database_is_created_with_secure_permissions(
        self, tmp_path
    ):
        db_path = tmp_path / "nested" / "search.db"
        with SearchEngine(db_path, ["title"]) as engine:
            engine.add_document({"title": "Test"})

        assert db_path.exists()
        mode = stat.S_IMODE(os.stat(db_path).st_mode)
        assert mode == 0o600

    def test_reopening_keeps_documents(self, temp_db_path):
        with SearchEngine(temp_db_path, ["title"]) as engine:
            engine.add_document({"title": "Persistent"})

        with SearchEngine(temp_db_path, ["title"]) as engine:
            assert engine.count() == 1
            assert len(engine.search("persistent")) == 1


class TestDocuments:
    """Tests for document insertion."""

    def test_add_and_retrieve(self, engine: SearchEngine):
        doc = {
            "title": "TypeScript Guide",
            "content": "A comprehensive guide to TypeScript",
        }
        engine.add_document(doc)

        results = engine.search("typescript")

        assert len(results) == 1
        assert results[0]["title"] == doc["title"]
        assert results[0]["content"] == doc["content"]

    def test_multiple_documents(self, engine: SearchEngine):
        engine.add_document({"title": "TypeScript", "content": "Programming"})
        engine.add_document({"title": "JavaScript", "content": "Web programming"})
        engine.add_document({"title": "Python", "content": "Programming"})

        assert len(engine.search("programming")) == 3

    def test_missing_fields_are_null(self, engine: SearchEngine):
        engine.add_document({"title": "Only a title"})
        (row,) = engine.search("title")
        assert row["content"] is None

    def test_unknown_fields_are_ignored(self, engine: SearchEngine):
        engine.add_document({"title": "Hello", "author": "someone"})
        (row,) = engine.search("hello")
        assert "author" not in row

    def test_add_documents_returns_count(
        self, engine: SearchEngine, sample_documents
    ):
        assert engine.add_documents(sample_documents) == 4
        assert engine.count() == 4

    def test_add_documents_empty(self, engine: SearchEngine):
        assert engine.add_documents([]) == 0
        assert engine.count() == 0

    def test_unencodable_text_is_backend_error(self, engine: SearchEngine):
        with pytest.raises(BackendError) as exc_info:
            engine.add_document({"title": "bad \ud800 text"})
        assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)
        assert engine.count() == 0


class TestSearchFeatures:
    """Tests for the query syntax against the sample documents."""

    def test_keyword_search(self, populated_engine: SearchEngine):
        results = populated_engine.search("typescript")
        assert len(results) > 0
        assert all("typescript" in _text(r) for r in results)

    def test_phrase_search(self, populated_engine: SearchEngine):
        results = populated_engine.search('"programming language"')
        # Porter stemming also matches "Programming Languages"
        assert len(results) == 2

    def test_negative_keyword(self, populated_engine: SearchEngine):
        results = populated_engine.search("typescript -javascript")
        assert len(results) > 0
        for r in results:
            assert "typescript" in _text(r)
            assert "javascript" not in _text(r)

    def test_negative_phrase(self, populated_engine: SearchEngine):
        results = populated_engine.search('web -"programming language"')
        assert len(results) > 0
        for r in results:
            assert "web" in _text(r)
            assert "programming language" not in _text(r)

    def test_negative_phrase_sugar(self, populated_engine: SearchEngine):
        sugar = populated_engine.search('web "-programming language"')
        plain = populated_engine.search('web -"programming language"')
        assert sugar == plain

    def test_combined_features(self, populated_engine: SearchEngine):
        results = populated_engine.search(
            'typescript "web development" -basics'
        )
        assert len(results) > 0
        for r in results:
            text = _text(r)
            assert "typescript" in text
            assert "web development" in text
            assert "basics" not in text

    def test_multiple_negative_terms(self, populated_engine: SearchEngine):
        results = populated_engine.search("programming -javascript -python")
        assert len(results) > 0
        for r in results:
            assert "javascript" not in _text(r)
            assert "python" not in _text(r)

    def test_respects_limit(self, populated_engine: SearchEngine):
        assert len(populated_engine.search("programming", 2)) == 2

    def test_no_results(self, populated_engine: SearchEngine):
        assert populated_engine.search("xyznonexistent123") == []

    def test_count_matches(self, populated_engine: SearchEngine):
        assert populated_engine.count_matches("programming") == 3
        assert populated_engine.count_matches("") == 0


class TestEdgeCases:
    """Tests for malformed and unusual input."""

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query_skips_backend(
        self, populated_engine: SearchEngine, query
    ):
        with patch("fts_search_mcp.index.engine.search_fts") as mock_search:
            assert populated_engine.search(query) == []
        mock_search.assert_not_called()

    @pytest.mark.parametrize(
        "query",
        [
            "type&script",
            '"typescript',
            "typescript    javascript",
            "col:value",
            "(broken",
            "meet*",
        ],
    )
    def test_special_input_does_not_raise(
        self, populated_engine: SearchEngine, query
    ):
        assert isinstance(populated_engine.search(query), list)

    def test_unmatched_quote_still_matches(
        self, populated_engine: SearchEngine
    ):
        assert len(populated_engine.search('"typescript')) > 0

    def test_lone_negation_is_invalid_query(
        self, populated_engine: SearchEngine
    ):
        """FTS5 NOT needs a left operand."""
        with pytest.raises(InvalidQuery) as exc_info:
            populated_engine.search("-javascript")

        assert exc_info.value.query == "-javascript"
        assert str(exc_info.value) == "Invalid search query: -javascript"

    @pytest.mark.parametrize("query", ['"\ud800"', "caf\udce9"])
    def test_lone_surrogate_is_invalid_query(
        self, populated_engine: SearchEngine, query
    ):
        with pytest.raises(InvalidQuery) as exc_info:
            populated_engine.search(query)

        assert exc_info.value.query == query
        assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)

    def test_lone_surrogate_count_is_invalid_query(
        self, populated_engine: SearchEngine
    ):
        with pytest.raises(InvalidQuery):
            populated_engine.count_matches("\ud800")

    def test_missing_table_is_backend_error(self, engine: SearchEngine):
        engine._get_conn().execute(f"DROP TABLE {engine.table}")
        with pytest.raises(BackendError):
            engine.search("anything")


class TestLifecycle:
    """Tests for connection release and the shared instance."""

    def test_close_is_idempotent(self):
        engine = SearchEngine(":memory:", ["title"])
        engine.close()
        engine.close()
        assert engine.closed

    def test_closed_engine_raises_backend_error(self):
        engine = SearchEngine(":memory:", ["title"])
        engine.close()
        with pytest.raises(BackendError):
            engine.search("anything")

    def test_context_manager_closes_on_error(self):
        with pytest.raises(RuntimeError):
            with SearchEngine(":memory:", ["title"]) as engine:
                raise RuntimeError("boom")
        assert engine.closed

    def test_get_instance_returns_same_object(self, configured_env):
        e1 = SearchEngine.get_instance()
        e2 = SearchEngine.get_instance()
        assert e1 is e2

    def test_get_instance_uses_configuration(
        self, configured_env, temp_db_path
    ):
        configured_env.setenv("SEARCH_PREFIX", "env_")
        configured_env.setenv("SEARCH_COLUMNS", "name,body")

        engine = SearchEngine.get_instance()

        assert engine.table == "env_documents"
        assert engine.columns == ["name", "body"]
        assert engine.db_path == temp_db_path

    def test_reset_instance_closes_engine(self, configured_env):
        e1 = SearchEngine.get_instance()
        SearchEngine.reset_instance()
        assert e1.closed
        assert SearchEngine.get_instance() is not e1
