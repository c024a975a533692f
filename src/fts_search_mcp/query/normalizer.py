"""Turn scanned terms into structured search terms."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .tokenizer import NEGATION_MARKER, QUOTE, RawTerm


@dataclass(frozen=True)
class StructuredTerm:
    """One search term, with negation and phrase state held as flags.

    ``text`` never includes the negation marker or the outer quotes.
    """

    text: str
    is_phrase: bool = False
    is_negated: bool = False

    @property
    def clause(self) -> str:
        """The term as an FTS5 phrase clause."""
        phrase = f"{QUOTE}{self.text}{QUOTE}"
        return f"NOT {phrase}" if self.is_negated else phrase


def normalize_term(term: RawTerm) -> StructuredTerm:
    """
    Apply the sugar and negation rules to a single term.

    Sugar: a quoted term starting with the marker (``"-foo bar"``) is a
    negated phrase, the same as ``-"foo bar"``. Only the leading marker
    is consumed; interior hyphens stay literal.
    """
    text = term.text
    negated = term.has_negation_marker
    if negated:
        text = text[len(NEGATION_MARKER) :]

    return StructuredTerm(text=text, is_phrase=term.quoted, is_negated=negated)


def normalize(terms: Iterable[RawTerm]) -> list[StructuredTerm]:
    """Normalize scanned terms, preserving their order."""
    return [normalize_term(term) for term in terms]
