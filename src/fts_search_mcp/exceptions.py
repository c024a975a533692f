"""Exceptions raised by the search engine."""


class SearchError(Exception):
    """Base exception for all search errors."""


class ConfigurationError(SearchError):
    """Raised when the engine is constructed with an invalid configuration."""


class InvalidQuery(SearchError):
    """Raised when the backend rejects a translated query as malformed.

    Carries the query as the user typed it, not the FTS5 translation.
    """

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Invalid search query: {query}")


class BackendError(SearchError):
    """Raised on any other backend failure (I/O, locking, corruption)."""
