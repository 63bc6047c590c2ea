"""Combinator parser module.

Module Organization:
- core.py: Parser class, ParserRunner and the run() entry point
- context.py: Per-run ParseContext (depth, deadline, cancellation)
- primitives.py: Parsers built directly against the Cursor (char, literal)
- combinators.py: Higher-order parsers (or_, and_, seq, many0, map_, ...)
- lazy.py: Deferred references for recursive rules

Public API:
    Parser, ParserRunner, run
    char, literal, satisfy, char_in, any_char, eof
    or_, and_, choice, seq, between, many0, many1, optional,
    sep_by, sep_by1, map_, not_followed_by, skip_spaces, token
    Lazy, lazy
    ParseContext, CancellationToken
"""

from combiparse.parser.combinators import (
    and_,
    between,
    choice,
    many0,
    many1,
    map_,
    not_followed_by,
    optional,
    or_,
    sep_by,
    sep_by1,
    seq,
    skip_spaces,
    token,
)
from combiparse.parser.context import CancellationToken, ParseContext
from combiparse.parser.core import Parser, ParserRunner, run
from combiparse.parser.lazy import Lazy, lazy
from combiparse.parser.primitives import any_char, char, char_in, eof, literal, satisfy

__all__ = [
    "CancellationToken",
    "Lazy",
    "ParseContext",
    "Parser",
    "ParserRunner",
    "and_",
    "any_char",
    "between",
    "char",
    "char_in",
    "choice",
    "eof",
    "lazy",
    "literal",
    "many0",
    "many1",
    "map_",
    "not_followed_by",
    "optional",
    "or_",
    "run",
    "satisfy",
    "sep_by",
    "sep_by1",
    "seq",
    "skip_spaces",
    "token",
]
