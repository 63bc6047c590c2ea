"""Parse outcomes: the success/failure shape every parser returns.

Every Parser returns exactly one Outcome per call:

    Success(value, next)   parsed value and the cursor after the match
    Failure(kind, ...)     typed failure; carries NO cursor

Because a Failure never carries a cursor, a combinator that retries
(or_, many0, optional) can only retry from the cursor it originally
passed in. Backtracking is structural, not a convention.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from combiparse.cursor import Cursor, LineOffsetCache
from combiparse.diagnostics import Diagnostic, DiagnosticCode, ErrorTemplate, SourceSpan

__all__ = ["Failure", "FailureKind", "Outcome", "Success"]


class FailureKind(StrEnum):
    """Failure taxonomy.

    Inherits from ``StrEnum`` so log aggregation and JSON output receive
    plain strings (``"end_of_input"``) rather than the ``Enum`` repr.
    """

    END_OF_INPUT = "end_of_input"
    UNEXPECTED_CHAR = "unexpected_char"
    UNEXPECTED_LITERAL = "unexpected_literal"
    INSUFFICIENT_REPETITION = "insufficient_repetition"
    ALL_ALTERNATIVES_FAILED = "all_alternatives_failed"
    SEQUENCE_ELEMENT_FAILED = "sequence_element_failed"
    EXPECTED_END_OF_INPUT = "expected_end_of_input"
    NOT_EXPECTED = "not_expected"

    @property
    def code(self) -> DiagnosticCode:
        """Diagnostic code for this kind."""
        return DiagnosticCode[self.name]


@dataclass(frozen=True, slots=True)
class Success[T]:
    """Parsed value and the cursor positioned after the match.

    Example:
        >>> from combiparse.values import Atom
        >>> cursor = Cursor("hello", 0)
        >>> outcome = Success(Atom("h"), cursor.advance())
        >>> outcome.next.pos
        1
        >>> bool(outcome)
        True
    """

    value: T
    next: Cursor

    def __bool__(self) -> Literal[True]:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """Typed parse failure.

    Attributes:
        kind: Failure category
        position: Offset at which the failure occurred
        message: Human-readable description ("expected X but found Y")
        expected: What would have been accepted at position
        index: Failing element index (SEQUENCE_ELEMENT_FAILED only)
        causes: Underlying failures (composite kinds only)
    """

    kind: FailureKind
    position: int
    message: str
    expected: tuple[str, ...] = ()
    index: int | None = None
    causes: tuple["Failure", ...] = ()

    def __bool__(self) -> Literal[False]:
        return False

    @classmethod
    def from_diagnostic(
        cls, kind: FailureKind, position: int, diagnostic: Diagnostic
    ) -> "Failure":
        """Build a leaf failure from an ErrorTemplate diagnostic."""
        return cls(kind, position, diagnostic.message, expected=diagnostic.expected)

    def deepest(self) -> "Failure":
        """Return the leaf failure that reached furthest into the input.

        Ties go to the last such leaf in cause order, matching how or_
        picks its reported branch.
        """
        if not self.causes:
            return self
        best = self
        for cause in self.causes:
            leaf = cause.deepest()
            if leaf.position >= best.position or best is self:
                best = leaf
        return best

    def format_error(self, source: str) -> str:
        """Format failure with line:column.

        Example:
            >>> failure = Failure(FailureKind.UNEXPECTED_CHAR, 7, "Expected ']'")
            >>> failure.format_error("hello\\nworld")
            "2:2: Expected ']'"
        """
        line, col = Cursor(source, min(self.position, len(source))).compute_line_col()
        return f"{line}:{col}: {self.message}"

    def format_with_context(self, source: str, context_lines: int = 2) -> str:
        """Format failure with source context and a caret pointer.

        Args:
            source: The text that was parsed
            context_lines: Number of lines to show before/after the failure

        Returns:
            Multi-line formatted failure with context

        Example:
            >>> source = "[ 1,\\n  2, ]"
            >>> failure = Failure(FailureKind.UNEXPECTED_CHAR, 10, "Expected value")
            >>> print(failure.format_with_context(source))
            2:6: Expected value
            <BLANKLINE>
               1 | [ 1,
               2 |   2, ]
                 |      ^
        """
        line, col = Cursor(source, min(self.position, len(source))).compute_line_col()
        lines = source.split("\n")

        result_lines = [self.format_error(source), ""]

        start_line = max(1, line - context_lines)
        end_line = min(len(lines), line + context_lines)

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i:4} | "
            result_lines.append(line_num_str + lines[i - 1])

            if i == line:
                pointer = " " * (len(line_num_str) - 2) + "| " + " " * (col - 1) + "^"
                result_lines.append(pointer)

        return "\n".join(result_lines)

    def to_diagnostic(self, source: str, rule_name: str | None = None) -> Diagnostic:
        """Convert to a Diagnostic positioned in source.

        Args:
            source: The text that was parsed
            rule_name: Optional name of the top-level parser

        Returns:
            Diagnostic with a one-character SourceSpan at position
        """
        cache = LineOffsetCache(source)
        pos = min(self.position, len(source))
        line, column = cache.get_line_col(pos)
        span = SourceSpan(start=pos, end=min(pos + 1, len(source)), line=line, column=column)
        hint: str | None = None
        match self.kind:
            case FailureKind.SEQUENCE_ELEMENT_FAILED:
                hint = ErrorTemplate.sequence_element_hint(self.index)
            case FailureKind.ALL_ALTERNATIVES_FAILED:
                hint = ErrorTemplate.alternatives_hint(len(self.causes))
        return Diagnostic(
            code=self.kind.code,
            message=self.message,
            span=span,
            hint=hint,
            expected=self.expected,
            rule_name=rule_name,
        )


type Outcome[T] = Success[T] | Failure
