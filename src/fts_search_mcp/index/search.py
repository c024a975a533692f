"""FTS5 full-text search over the document table.

Provides:
- search_fts(): Run a user query against the index with rank ordering
- is_syntax_error(): Classify FTS5 errors caused by a malformed query

User queries go through the translator in ``fts_search_mcp.query``
before reaching FTS5, so users write:
- Keywords: typescript javascript
- Phrases: "programming language"
- Negation: typescript -javascript, -"web development"
"""

from __future__ import annotations

import logging
import sqlite3

from ..exceptions import BackendError, InvalidQuery
from ..query import translate
from .schema import get_match_sql

logger = logging.getLogger(__name__)

# Substrings of sqlite3.OperationalError messages raised for bad MATCH input
_SYNTAX_ERROR_MARKERS = (
    "fts5: syntax error",
    "unterminated string",
    "malformed match",
)


def is_syntax_error(error: sqlite3.Error) -> bool:
    """Check whether FTS5 rejected the query text itself."""
    if not isinstance(error, sqlite3.OperationalError):
        return False
    message = str(error).lower()
    return any(marker in message for marker in _SYNTAX_ERROR_MARKERS)


def search_fts(
    conn: sqlite3.Connection,
    table: str,
    query: str,
    limit: int = 10,
) -> list[dict]:
    """
    Search the index using FTS5 rank ordering.

    Args:
        conn: Database connection
        table: Full FTS5 table name (prefix included)
        query: Search query in user syntax
        limit: Maximum results (default: 10)

    Returns:
        Matching rows as dicts, best match first

    Raises:
        InvalidQuery: If FTS5 rejects the translated query
        BackendError: On any other database failure
    """
    if not query or not query.strip():
        return []

    fts_query = translate(query)
    logger.debug("Translated %r -> %r", query, fts_query)

    try:
        cursor = conn.execute(get_match_sql(table), (fts_query, limit))
        return [dict(row) for row in cursor]
    except UnicodeEncodeError as e:
        # Lone surrogates cannot be bound as UTF-8
        raise InvalidQuery(query) from e
    except sqlite3.Error as e:
        if is_syntax_error(e):
            logger.warning("Rejected query %r (%s): %s", query, fts_query, e)
            raise InvalidQuery(query) from e
        raise BackendError(str(e)) from e


def count_matches(conn: sqlite3.Connection, table: str, query: str) -> int:
    """
    Count total matches for a query without returning rows.

    Returns:
        Number of matching documents (0 for an empty query)
    """
    if not query or not query.strip():
        return 0

    sql = f"SELECT COUNT(*) FROM {table} WHERE {table} MATCH ?"
    try:
        return conn.execute(sql, (translate(query),)).fetchone()[0]
    except UnicodeEncodeError as e:
        raise InvalidQuery(query) from e
    except sqlite3.Error as e:
        if is_syntax_error(e):
            raise InvalidQuery(query) from e
        raise BackendError(str(e)) from e
