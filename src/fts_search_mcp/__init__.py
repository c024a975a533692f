"""FTS Search MCP - SQLite FTS5 search with a simple query syntax.

Features:
- Keywords, "quoted phrases" and -negated terms, translated to FTS5
- Configurable FTS5 table with porter stemming and rank ordering
- MCP server and CLI

Usage:
    fts-search-mcp                # Run MCP server (default)
    fts-search-mcp translate Q    # Show FTS5 translation
    fts-search-mcp search Q       # Search the index
    fts-search-mcp seed           # Create a sample index
"""

from .cli import main
from .exceptions import BackendError, ConfigurationError, InvalidQuery
from .index import SearchEngine
from .query import translate
from .server import mcp

__all__ = [
    "BackendError",
    "ConfigurationError",
    "InvalidQuery",
    "SearchEngine",
    "main",
    "mcp",
    "translate",
]
