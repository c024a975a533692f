"""Translator from user search syntax to FTS5 boolean queries.

Three stages, each usable on its own:
- tokenize(): scan raw text into RawTerm values
- normalize(): apply sugar and negation rules, giving StructuredTerm values
- build(): render terms as an FTS5 expression

translate() runs the whole pipeline.
"""

from .builder import WILDCARD_QUERY, build, parse_query, translate
from .normalizer import StructuredTerm, normalize
from .tokenizer import RawTerm, ScanState, tokenize

__all__ = [
    "WILDCARD_QUERY",
    "RawTerm",
    "ScanState",
    "StructuredTerm",
    "build",
    "normalize",
    "parse_query",
    "tokenize",
    "translate",
]
