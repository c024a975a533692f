"""
FTS Search MCP Server

Provides MCP tools over an SQLite FTS5 document index. Queries use a
simple syntax that is translated to FTS5 before execution:
keywords, "quoted phrases" and -negated terms.

TOOLS (3 total):
- search(query, limit?) - Ranked full-text search
- add_document(fields) - Insert a document into the index
- translate_query(query) - Show the FTS5 expression for a query
"""

from __future__ import annotations

import asyncio
from typing import TypedDict

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .config import get_default_limit
from .exceptions import SearchError
from .query import translate

mcp = FastMCP("FTS Search")


# ========== Response Type Definitions ==========


class AddResult(TypedDict):
    """Result of inserting a document."""

    status: str
    count: int


class Translation(TypedDict):
    """A user query and its FTS5 translation."""

    query: str
    fts_query: str


# ========== Helper Functions ==========


def _get_engine():
    """Get the SearchEngine singleton, lazily imported."""
    from .index import SearchEngine

    return SearchEngine.get_instance()


async def run_search(query: str, limit: int | None = None) -> list[dict]:
    """Run a search off the event loop, mapping errors to ToolError."""
    if limit is None:
        limit = get_default_limit()
    try:
        engine = _get_engine()
        return await asyncio.to_thread(engine.search, query, limit)
    except SearchError as e:
        raise ToolError(str(e)) from e


async def run_add_document(fields: dict[str, str]) -> AddResult:
    """Insert a document off the event loop."""
    try:
        engine = _get_engine()
        await asyncio.to_thread(engine.add_document, fields)
        count = await asyncio.to_thread(engine.count)
    except SearchError as e:
        raise ToolError(str(e)) from e
    return {"status": "ok", "count": count}


def run_translate(query: str) -> Translation:
    return {"query": query, "fts_query": translate(query)}


# ========== Tools ==========


@mcp.tool
async def search(query: str, limit: int | None = None) -> list[dict]:
    """
    Search documents by relevance.

    Args:
        query: Keywords, "quoted phrases" and -negated terms.
            Terms are combined with AND.
        limit: Maximum results (default: SEARCH_DEFAULT_LIMIT or 10)

    Returns:
        Matching documents, best match first. An empty query
        returns no results.

    Examples:
        >>> search("typescript")
        >>> search('"programming language" -javascript')
    """
    return await run_search(query, limit)


@mcp.tool
async def add_document(fields: dict[str, str]) -> AddResult:
    """
    Add a document to the index.

    Args:
        fields: Column values keyed by column name. Missing columns
            are stored as null.

    Returns:
        Status and the new document count
    """
    return await run_add_document(fields)


@mcp.tool
def translate_query(query: str) -> Translation:
    """
    Show how a query is translated to FTS5 syntax without running it.

    Args:
        query: Query in the user search syntax

    Returns:
        The original query and its FTS5 expression
    """
    return run_translate(query)


if __name__ == "__main__":
    mcp.run()
