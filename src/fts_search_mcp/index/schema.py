"""SQLite schema for the FTS5 document index.

The index is a single FTS5 virtual table named ``<prefix><table_name>``
whose columns are chosen by the caller. Table and column names are
interpolated into SQL, so they must be plain identifiers.
"""

from __future__ import annotations

import logging
import os
import re
import sqlite3
from collections.abc import Sequence
from pathlib import Path

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

# Default PRAGMAs for all connections (centralized to avoid drift)
DEFAULT_PRAGMAS = {
    "journal_mode": "WAL",  # Better concurrent read performance
    "synchronous": "NORMAL",  # Good balance of safety and speed
    "busy_timeout": 5000,  # Wait up to 5s for locks
}

# Porter stemmer for English + unicode61 for international text
FTS_TOKENIZER = "porter unicode61"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """
    Check that a name is safe to interpolate into SQL.

    Raises:
        ConfigurationError: If the name is not a plain identifier
    """
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise ConfigurationError(f"Invalid {kind} name: {name!r}")
    return name


def get_schema_sql(table: str, columns: Sequence[str]) -> str:
    """Return the FTS5 table creation SQL."""
    column_defs = ", ".join(columns)
    return (
        f"CREATE VIRTUAL TABLE IF NOT EXISTS {table} "
        f"USING fts5({column_defs}, tokenize='{FTS_TOKENIZER}')"
    )


def get_insert_sql(table: str, columns: Sequence[str]) -> str:
    """Return the row insertion SQL, one placeholder per column."""
    placeholders = ", ".join("?" for _ in columns)
    return (
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    )


def get_match_sql(table: str) -> str:
    """Return the ranked MATCH query SQL (params: query, limit)."""
    return f"""
        SELECT * FROM {table}
        WHERE {table} MATCH ?
        ORDER BY rank
        LIMIT ?
    """


def create_connection(db_path: Path | str) -> sqlite3.Connection:
    """
    Create a database connection with standard configuration.

    Args:
        db_path: Path to the SQLite database file, or ":memory:"

    Returns:
        Configured connection with WAL mode, busy timeout, and Row factory
    """
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row

    for pragma, value in DEFAULT_PRAGMAS.items():
        conn.execute(f"PRAGMA {pragma}={value}")

    return conn


def init_database(
    db_path: Path | str, table: str, columns: Sequence[str]
) -> sqlite3.Connection:
    """
    Open the database and make sure the FTS5 table exists.

    Creates parent directories for file databases. New database files
    get 0600 permissions (owner read/write only).

    Returns:
        Open database connection

    Raises:
        sqlite3.Error: If the table cannot be created (the connection
            is closed first)
    """
    is_new_db = False
    if str(db_path) != MEMORY_DB:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_db = not db_path.exists()

    conn = create_connection(db_path)

    if is_new_db:
        try:
            os.chmod(db_path, 0o600)
            logger.debug("Set secure permissions (0600) on %s", db_path)
        except OSError as e:
            logger.warning(
                "Could not set secure permissions on %s: %s", db_path, e
            )

    try:
        conn.execute(get_schema_sql(table, columns))
        conn.commit()
    except sqlite3.Error:
        conn.close()
        raise

    logger.info("Opened FTS5 table %s (%s)", table, ", ".join(columns))
    return conn


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    """Check whether a table is present in the schema."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table,),
    )
    return cursor.fetchone() is not None


def optimize_fts_index(conn: sqlite3.Connection, table: str) -> None:
    """
    Merge the FTS index segments for better query performance.

    Call after large batch insertions.
    """
    conn.execute(f"INSERT INTO {table}({table}) VALUES('optimize')")
    conn.commit()
