"""Diagnostic codes, source spans and the Diagnostic record.

Every failure kind, abort and grammar error has a stable numeric code. The
thousands digit encodes the category, so tooling can group codes without a
lookup table.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "CodeCategory",
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class CodeCategory(StrEnum):
    """What produced a diagnostic."""

    PARSE = "parse"  # returned as a Failure
    ABORT = "abort"  # raised as ParseAbortedError or ValueError
    GRAMMAR = "grammar"  # raised as GrammarDefinitionError or TypeError


class DiagnosticCode(Enum):
    """Stable identifiers for every diagnostic.

    1xxx parse failures, 2xxx aborted parses, 3xxx grammar definition errors.
    """

    END_OF_INPUT = 1001
    UNEXPECTED_CHAR = 1002
    UNEXPECTED_LITERAL = 1003
    INSUFFICIENT_REPETITION = 1004
    ALL_ALTERNATIVES_FAILED = 1005
    SEQUENCE_ELEMENT_FAILED = 1006
    EXPECTED_END_OF_INPUT = 1007
    NOT_EXPECTED = 1008

    DEADLINE_EXCEEDED = 2001
    PARSE_CANCELLED = 2002
    SOURCE_TOO_LARGE = 2003
    NESTING_DEPTH_EXCEEDED = 2004

    LAZY_BUILDER_FAILED = 3001
    LAZY_BUILDER_INVALID = 3002
    LAZY_REENTRANT_BUILD = 3003
    MAP_RESULT_INVALID = 3004

    @property
    def category(self) -> CodeCategory:
        """Category encoded in the thousands digit.

        Example:
            >>> DiagnosticCode.UNEXPECTED_CHAR.category
            <CodeCategory.PARSE: 'parse'>
        """
        match self.value // 1000:
            case 1:
                return CodeCategory.PARSE
            case 2:
                return CodeCategory.ABORT
            case _:
                return CodeCategory.GRAMMAR


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open character range [start, end) plus its 1-based line/column.

    Offsets count characters (code points) of the parsed str, matching
    Cursor.pos. A failure at end of input has start == end == len(source).
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Reject negative offsets, reversed ranges and 0-based positions.

        Raises:
            ValueError: Naming the offending field
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) precedes start ({self.start})"
            raise ValueError(msg)
        if self.line < 1 or self.column < 1:
            field_name = "line" if self.line < 1 else "column"
            msg = f"SourceSpan.{field_name} is 1-based, got {getattr(self, field_name)}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reportable problem, independent of how it is rendered.

    Attributes:
        code: Stable identifier
        message: One-sentence description ("Expected X but found Y")
        span: Where in the input, when there is an input position
        hint: How to fix it, when there is something to suggest
        expected: What would have been accepted at span
        rule_name: Grammar rule involved, when known
        severity: "error" or "warning"
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    expected: tuple[str, ...] = ()
    rule_name: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        return self.message

    def format_error(self) -> str:
        """Render with the default (rust style) DiagnosticFormatter.

        Example output:
            error[UNEXPECTED_CHAR]: Expected ']' but found ','
              --> line 1, column 6
              = expected: ']'
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
