"""Command-line interface for fts-search-mcp.

Provides commands for:
- serve: Run the MCP server (default)
- translate: Show the FTS5 expression for a query
- search: Search the index
- add: Insert a document
- seed: Create a database with sample documents
- status: Show index statistics

Usage:
    fts-search-mcp                          # Run MCP server (default)
    fts-search-mcp translate 'a -"b c"'     # Print FTS5 query
    fts-search-mcp search typescript -l 5   # Search the index
    fts-search-mcp add -f title=Hello -f content=World
    fts-search-mcp seed --db test.db --run-queries
    fts-search-mcp status
"""

import logging
import sqlite3
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import cyclopts

from .config import get_db_path, get_default_limit
from .exceptions import SearchError

app = cyclopts.App(
    name="fts-search-mcp",
    help="MCP server and CLI for SQLite FTS5 search with a simple query syntax.",
)

Verbose = Annotated[
    bool,
    cyclopts.Parameter(
        name=["--verbose", "-v"],
        help="Enable verbose output",
    ),
]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fail(error: Exception) -> NoReturn:
    print(f"✗ Error: {error}", file=sys.stderr)
    sys.exit(1)


def _format_row(row: dict) -> str:
    """Format a result row for display."""
    return " | ".join(f"{k}: {v}" for k, v in row.items() if v is not None)


def _parse_fields(fields: list[str]) -> dict[str, str]:
    """Parse name=value pairs into a record."""
    record: dict[str, str] = {}
    for field in fields:
        name, sep, value = field.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Expected name=value, got {field!r}")
        record[name.strip()] = value
    return record


def _run_serve() -> None:
    """Internal function to run the MCP server."""
    from .server import mcp

    print(f"Search database: {get_db_path()}", file=sys.stderr)
    mcp.run()


@app.command
def serve(verbose: Verbose = False) -> None:
    """
    Run the MCP server.

    This is the default command when no subcommand is specified.
    The database location and table come from the SEARCH_* environment
    variables.
    """
    _setup_logging(verbose)
    _run_serve()


@app.command
def translate(query: str, verbose: Verbose = False) -> None:
    """
    Print the FTS5 expression for a query without running it.

    Parameters
    ----------
    query
        Query in the user search syntax.
    """
    from .query import translate as translate_query

    _setup_logging(verbose)
    print(translate_query(query))


@app.command
def search(
    query: str,
    limit: Annotated[
        int | None,
        cyclopts.Parameter(
            name=["--limit", "-l"],
            help="Maximum results (default: SEARCH_DEFAULT_LIMIT or 10)",
        ),
    ] = None,
    verbose: Verbose = False,
) -> None:
    """
    Search the index.

    Parameters
    ----------
    query
        Keywords, "quoted phrases" and -negated terms.
    """
    from .index import SearchEngine

    _setup_logging(verbose)
    if limit is None:
        limit = get_default_limit()

    try:
        with SearchEngine.from_config() as engine:
            results = engine.search(query, limit)
            total = engine.count_matches(query)
    except SearchError as e:
        _fail(e)

    for i, row in enumerate(results, 1):
        print(f"{i}. {_format_row(row)}")
    print(f"\n{len(results)} of {total} matches")


@app.command
def add(
    fields: Annotated[
        list[str],
        cyclopts.Parameter(
            name=["--field", "-f"],
            help="Column value as name=value (repeatable)",
        ),
    ],
    verbose: Verbose = False,
) -> None:
    """Insert a document into the index."""
    from .index import SearchEngine

    _setup_logging(verbose)

    try:
        record = _parse_fields(fields)
        with SearchEngine.from_config() as engine:
            unknown = set(record) - set(engine.columns)
            if unknown:
                print(
                    f"Warning: ignoring unknown columns: "
                    f"{', '.join(sorted(unknown))}",
                    file=sys.stderr,
                )
            engine.add_document(record)
            count = engine.count()
    except (SearchError, ValueError) as e:
        _fail(e)

    print(f"✓ Added document ({count:,} in index)")


def _run_demo_queries(db_path: Path, table: str) -> None:
    """Run raw FTS5 demo queries and print ranks."""
    from .index.schema import create_connection
    from .samples import DEMO_FTS_QUERIES

    conn = create_connection(db_path)
    try:
        print("Running test queries:\n")
        for query in DEMO_FTS_QUERIES:
            print(f"Query: {query}")
            rows = conn.execute(
                f"SELECT *, rank FROM {table} WHERE {table} MATCH ? "
                "ORDER BY rank",
                (query,),
            ).fetchall()
            print(f"Results: {len(rows)}")
            for row in rows:
                print(
                    f"- {row['title']}: {row['content']} "
                    f"(rank: {row['rank']})"
                )
            print()
    finally:
        conn.close()


@app.command
def seed(
    db: Annotated[
        Path | None,
        cyclopts.Parameter(
            name=["--db"],
            help="Database file to (re)create (default: SEARCH_DB_PATH)",
        ),
    ] = None,
    run_queries: Annotated[
        bool,
        cyclopts.Parameter(
            name=["--run-queries"],
            help="Run demo FTS5 queries after seeding",
        ),
    ] = False,
    verbose: Verbose = False,
) -> None:
    """
    Create a fresh database filled with sample documents.

    Any existing database at the target path is deleted first.
    """
    from .config import get_columns, get_prefix, get_table_name
    from .index import SearchEngine
    from .samples import SAMPLE_COLUMNS, SAMPLE_DOCUMENTS

    _setup_logging(verbose)
    if get_columns() != list(SAMPLE_COLUMNS):
        print(
            f"Warning: sample index uses columns "
            f"{', '.join(SAMPLE_COLUMNS)}, not SEARCH_COLUMNS "
            f"({', '.join(get_columns())})",
            file=sys.stderr,
        )
    db_path = db or get_db_path()
    db_path.unlink(missing_ok=True)

    try:
        with SearchEngine(
            db_path,
            SAMPLE_COLUMNS,
            table_name=get_table_name(),
            prefix=get_prefix(),
        ) as engine:
            count = engine.add_documents(SAMPLE_DOCUMENTS)
            engine.optimize()
            table = engine.table

        if run_queries:
            _run_demo_queries(db_path, table)
    except (SearchError, sqlite3.Error) as e:
        _fail(e)

    print(f"✓ Seeded {count} documents into {table}")
    print(f"  Database: {db_path}")


@app.command
def status(verbose: Verbose = False) -> None:
    """
    Show index statistics.

    Displays the database location, table name and document count.
    """
    from .index import SearchEngine

    _setup_logging(verbose)
    db_path = get_db_path()

    if not db_path.exists():
        print("No index found.")
        print(f"Expected location: {db_path}")
        print()
        print("Run 'fts-search-mcp seed' or 'fts-search-mcp add' first.")
        sys.exit(1)

    try:
        with SearchEngine.from_config() as engine:
            count = engine.count()
            table = engine.table
            columns = engine.columns
    except SearchError as e:
        _fail(e)

    print("FTS Search Index Status")
    print("=" * 40)
    print(f"Location:     {db_path}")
    print(f"Table:        {table}")
    print(f"Columns:      {', '.join(columns)}")
    print(f"Documents:    {count:,}")


@app.default
def default_handler(verbose: Verbose = False) -> None:
    """Run the MCP server (default when no command specified)."""
    _setup_logging(verbose)
    _run_serve()


def main() -> None:
    """Entry point for the CLI."""
    app()
