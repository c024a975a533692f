"""Render structured terms as an FTS5 MATCH expression.

FTS5 query syntax relied on:
- Juxtaposed clauses are an implicit AND: '"a" "b"'
- NOT excludes the clause that follows: '"a" NOT "b"'
- Double quotes delimit a phrase: '"exact phrase"'

The builder does no validation. Expressions FTS5 rejects (an empty
phrase, a leading NOT with no left operand) are passed through and
reported when the query is executed.
"""

from __future__ import annotations

from collections.abc import Iterable

from .normalizer import StructuredTerm, normalize
from .tokenizer import tokenize

# Sentinel for "no terms" (matches every document)
WILDCARD_QUERY = "*"


def build(terms: Iterable[StructuredTerm]) -> str:
    """
    Join structured terms into a single FTS5 expression.

    Args:
        terms: Terms in the order the user typed them

    Returns:
        Space-separated clauses, or ``*`` when there are no terms
    """
    clauses = [term.clause for term in terms]
    if not clauses:
        return WILDCARD_QUERY
    return " ".join(clauses).strip()


def parse_query(raw: str) -> list[StructuredTerm]:
    """Scan and normalize a raw query into structured terms."""
    return normalize(tokenize(raw))


def translate(raw: str) -> str:
    """
    Translate user search syntax into an FTS5 expression.

    Examples:
        >>> translate('alpha "beta gamma" -delta')
        '"alpha" "beta gamma" NOT "delta"'
        >>> translate('"-hello world"')
        'NOT "hello world"'
        >>> translate("   ")
        '*'
    """
    if not raw.strip():
        return WILDCARD_QUERY
    return build(parse_query(raw))
