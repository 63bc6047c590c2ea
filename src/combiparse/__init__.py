"""combiparse - composable parser combinators with safe recursive rules.

Build recursive-descent parsers for small languages and data formats by
combining primitive parsers with higher-order operators instead of
generating a parser from a grammar file.

Public API:
    run - Parse text with a parser, returning the value or a Failure
    make_cursor / Cursor - Immutable input position
    char, literal - Primitive parsers
    or_, and_, seq, many0, many1, map_, between, lazy - Core combinators
    Atom, ValueList, Node - Parsed payload shapes
    Success, Failure, FailureKind - Parse outcomes

Exceptions:
    CombiparseError - Base exception class
    GrammarDefinitionError - Broken grammar (e.g. failing Lazy builder)
    ParseFailedError - Raised by ParserRunner.run_or_raise
    ParseAbortedError - Parse cancelled, past its deadline or nested too deep

Example:
    >>> from combiparse import char, many1, map_, Node, run
    >>> digits = map_(many1(char("1")), lambda v: Node(len(v)))
    >>> run(digits, "111")
    Node(data=3)
"""

from .cursor import Cursor, make_cursor
from .diagnostics import (
    CombiparseError,
    DeadlineExceededError,
    DepthLimitExceededError,
    EndOfInputError,
    GrammarDefinitionError,
    ParseAbortedError,
    ParseCancelledError,
    ParseFailedError,
)
from .outcome import Failure, FailureKind, Outcome, Success
from .parser import (
    CancellationToken,
    Lazy,
    Parser,
    ParserRunner,
    and_,
    any_char,
    between,
    char,
    char_in,
    choice,
    eof,
    lazy,
    literal,
    many0,
    many1,
    map_,
    not_followed_by,
    optional,
    or_,
    run,
    satisfy,
    sep_by,
    sep_by1,
    seq,
    skip_spaces,
    token,
)
from .values import Atom, Node, Value, ValueList

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("combiparse")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Atom",
    "CancellationToken",
    "CombiparseError",
    "Cursor",
    "DeadlineExceededError",
    "DepthLimitExceededError",
    "EndOfInputError",
    "Failure",
    "FailureKind",
    "GrammarDefinitionError",
    "Lazy",
    "Node",
    "Outcome",
    "ParseAbortedError",
    "ParseCancelledError",
    "ParseFailedError",
    "Parser",
    "ParserRunner",
    "Success",
    "Value",
    "ValueList",
    "__version__",
    "and_",
    "any_char",
    "between",
    "char",
    "char_in",
    "choice",
    "eof",
    "lazy",
    "literal",
    "make_cursor",
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
