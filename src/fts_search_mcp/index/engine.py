"""SearchEngine - Facade over one SQLite FTS5 document table.

Provides:
- add_document() / add_documents(): Insert records into the index
- search(): Translate a user query and return ranked rows
- count() / count_matches(): Document and match counts
- close(): Release the connection (also via ``with``)

Thread Safety:
- get_instance() uses a class-level lock
- Queries are not locked; one connection is shared with
  check_same_thread=False, so concurrent use is only as safe as SQLite
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from ..config import (
    DEFAULT_PREFIX,
    DEFAULT_TABLE_NAME,
    get_columns,
    get_db_path,
    get_prefix,
    get_table_name,
)
from ..exceptions import BackendError, ConfigurationError
from .schema import (
    get_insert_sql,
    init_database,
    optimize_fts_index,
    validate_identifier,
)
from .search import count_matches, search_fts

logger = logging.getLogger(__name__)


class SearchEngine:
    """
    Full-text search over a configurable FTS5 table.

    The table is named ``<prefix><table_name>`` and is created on
    construction if missing. The engine never reads the environment;
    use get_instance() for an engine built from configuration.

    Example:
        with SearchEngine(":memory:", ["title", "content"]) as engine:
            engine.add_document({"title": "TypeScript", "content": "..."})
            engine.search('typescript -"web development"')
    """

    _instance: SearchEngine | None = None
    _instance_lock = threading.Lock()

    def __init__(
        self,
        db_path: Path | str,
        columns: Sequence[str],
        table_name: str = DEFAULT_TABLE_NAME,
        prefix: str = DEFAULT_PREFIX,
    ):
        """
        Open the database and create the FTS5 table.

        Args:
            db_path: Database file path, or ":memory:"
            columns: Indexed column names (at least one)
            table_name: Table name without prefix
            prefix: Table name prefix

        Raises:
            ConfigurationError: If columns is empty or a name is not
                a plain SQL identifier
            BackendError: If the database cannot be opened
        """
        columns = list(columns)
        if not columns:
            raise ConfigurationError("At least one column is required")
        for column in columns:
            validate_identifier(column, "column")
        validate_identifier(table_name, "table")
        if prefix:
            validate_identifier(prefix, "prefix")

        self._db_path = db_path
        self._columns = columns
        self._table = f"{prefix}{table_name}"
        self._insert_sql = get_insert_sql(self._table, columns)

        try:
            self._conn: sqlite3.Connection | None = init_database(
                db_path, self._table, columns
            )
        except sqlite3.Error as e:
            raise BackendError(str(e)) from e

    @classmethod
    def from_config(cls) -> SearchEngine:
        """Build an engine from SEARCH_* environment configuration."""
        return cls(
            get_db_path(),
            get_columns(),
            table_name=get_table_name(),
            prefix=get_prefix(),
        )

    @classmethod
    def get_instance(cls) -> SearchEngine:
        """Get the shared configured engine (thread-safe)."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls.from_config()
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Close and forget the shared engine."""
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.close()
                cls._instance = None

    def __enter__(self) -> SearchEngine:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def db_path(self) -> Path | str:
        """Get the database location."""
        return self._db_path

    @property
    def table(self) -> str:
        """Full FTS5 table name, prefix included."""
        return self._table

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    @property
    def closed(self) -> bool:
        return self._conn is None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise BackendError("Search engine is closed")
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_values(self, record: Mapping[str, object]) -> tuple:
        # Missing fields are stored as NULL
        return tuple(record.get(column) for column in self._columns)

    def add_document(self, record: Mapping[str, object]) -> None:
        """
        Insert one document.

        Args:
            record: Field values keyed by column name. Keys outside the
                configured columns are ignored.
        """
        self.add_documents([record])

    def add_documents(self, records: Iterable[Mapping[str, object]]) -> int:
        """
        Insert documents in a single transaction.

        Returns:
            Number of documents inserted
        """
        rows = [self._row_values(record) for record in records]
        if not rows:
            return 0

        conn = self._get_conn()
        try:
            conn.executemany(self._insert_sql, rows)
            conn.commit()
        except (sqlite3.Error, UnicodeEncodeError) as e:
            conn.rollback()
            raise BackendError(str(e)) from e

        logger.debug("Inserted %d document(s) into %s", len(rows), self._table)
        return len(rows)

    def search(self, query: str, limit: int = 10) -> list[dict]:
        """
        Search documents using the user query syntax.

        An empty or whitespace-only query returns [] without touching
        the database.

        Args:
            query: Keywords, "quoted phrases" and -negated terms
            limit: Maximum results (default: 10)

        Returns:
            Matching rows as column dicts, best match first

        Raises:
            InvalidQuery: If FTS5 rejects the translated query
            BackendError: On any other database failure
        """
        if not query.strip():
            return []
        return search_fts(self._get_conn(), self._table, query, limit)

    def count_matches(self, query: str) -> int:
        """Count all documents matching a query."""
        return count_matches(self._get_conn(), self._table, query)

    def count(self) -> int:
        """Number of documents in the index."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(f"SELECT COUNT(*) FROM {self._table}")
            return cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise BackendError(str(e)) from e

    def optimize(self) -> None:
        """Merge FTS5 index segments after bulk loading."""
        try:
            optimize_fts_index(self._get_conn(), self._table)
        except sqlite3.Error as e:
            raise BackendError(str(e)) from e
