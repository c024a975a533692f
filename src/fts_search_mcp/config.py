"""Configuration for the FTS search MCP server."""

import os
from pathlib import Path

# Default database location
DEFAULT_DB_PATH = Path.home() / ".fts-search-mcp" / "search.db"

DEFAULT_PREFIX = "search_"
DEFAULT_TABLE_NAME = "documents"
DEFAULT_COLUMNS = ("title", "content")
DEFAULT_LIMIT = 10


def get_prefix() -> str:
    """
    Get the table name prefix from environment variable.

    Set SEARCH_PREFIX to namespace the FTS5 table.
    Defaults to "search_".

    Returns:
        Table name prefix.
    """
    return os.environ.get("SEARCH_PREFIX") or DEFAULT_PREFIX


def get_table_name() -> str:
    """
    Get the base table name from environment variable.

    Set SEARCH_TABLE_NAME to customize. Defaults to "documents".
    The full table name is the prefix followed by this name.

    Returns:
        Table name without prefix.
    """
    return os.environ.get("SEARCH_TABLE_NAME") or DEFAULT_TABLE_NAME


def get_columns() -> list[str]:
    """
    Get the indexed columns.

    Set SEARCH_COLUMNS to a comma-separated list.
    Defaults to "title,content".

    Returns:
        Column names in declaration order.
    """
    env_val = os.environ.get("SEARCH_COLUMNS")
    if env_val is not None:
        return [c.strip() for c in env_val.split(",") if c.strip()]
    return list(DEFAULT_COLUMNS)


def get_db_path() -> Path:
    """
    Get the search database path.

    Set SEARCH_DB_PATH to customize the location.
    Defaults to ~/.fts-search-mcp/search.db

    Returns:
        Path to the database file.
    """
    env_path = os.environ.get("SEARCH_DB_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_DB_PATH


def get_default_limit() -> int:
    """
    Get the default number of search results.

    Set SEARCH_DEFAULT_LIMIT to customize. Defaults to 10.

    Returns:
        Maximum results per search.
    """
    return int(os.environ.get("SEARCH_DEFAULT_LIMIT", str(DEFAULT_LIMIT)))
