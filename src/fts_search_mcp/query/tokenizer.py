"""Scanner for the user-facing search syntax.

Splits raw query text into terms while tracking quote state:
- Bare words are separated by spaces
- Double quotes delimit phrases (spaces inside are literal)
- A hyphen at the start of the input or after a space marks negation

The scanner is an explicit two-state machine rather than a regex because
whether a hyphen is a negation marker depends on both its position and
the current quote state.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

QUOTE = '"'
NEGATION_MARKER = "-"
DELIMITER = " "


class ScanState(enum.Enum):
    """Scanner state."""

    NORMAL = "normal"
    IN_QUOTES = "in_quotes"


@dataclass(frozen=True)
class RawTerm:
    """A run of characters emitted by the scanner.

    ``text`` is the scan buffer verbatim; when the term carries a
    negation marker it is the first character of ``text``.
    """

    text: str
    quoted: bool = False

    @property
    def has_negation_marker(self) -> bool:
        return self.text.startswith(NEGATION_MARKER)


def _at_term_start(raw: str, i: int) -> bool:
    return i == 0 or raw[i - 1] == DELIMITER


def tokenize(raw: str) -> list[RawTerm]:
    """
    Split a raw query into terms.

    Never raises: unmatched quotes and stray hyphens are absorbed into
    the terms rather than rejected.

    Args:
        raw: User-entered query text

    Returns:
        Terms in input order. An unclosed quote keeps its in-progress
        term, emitted with ``quoted=True``.
    """
    terms: list[RawTerm] = []
    state = ScanState.NORMAL
    buffer = ""

    for i, char in enumerate(raw):
        if char == QUOTE:
            if state is ScanState.IN_QUOTES:
                # Closing quote always emits, even an empty phrase
                terms.append(RawTerm(buffer, quoted=True))
                buffer = ""
                state = ScanState.NORMAL
            else:
                state = ScanState.IN_QUOTES
        elif (
            char == NEGATION_MARKER
            and state is ScanState.NORMAL
            and _at_term_start(raw, i)
        ):
            buffer = NEGATION_MARKER
        elif char == DELIMITER and state is ScanState.NORMAL:
            if buffer:
                terms.append(RawTerm(buffer))
                buffer = ""
        else:
            buffer += char

    if buffer:
        terms.append(RawTerm(buffer, quoted=state is ScanState.IN_QUOTES))

    return terms
