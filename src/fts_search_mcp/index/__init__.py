"""FTS5 document index.

This module provides:
- SearchEngine: Facade for creating, filling and searching the index
- search_fts(): Ranked FTS5 search for an open connection
"""

from .engine import SearchEngine
from .search import search_fts

__all__ = ["SearchEngine", "search_fts"]
