"""Primitive parsers built directly against the Cursor.

Every primitive checks availability explicitly before comparing, so a
short remaining input is always reported as END_OF_INPUT rather than as a
mismatch.
"""

from collections.abc import Callable

from combiparse.cursor import Cursor
from combiparse.diagnostics import ErrorTemplate
from combiparse.outcome import Failure, FailureKind, Outcome, Success
from combiparse.parser.core import Parser
from combiparse.values import Atom

__all__ = ["any_char", "char", "char_in", "eof", "literal", "satisfy"]


def char(c: str) -> Parser[Atom]:
    """Match exactly one character equal to c.

    Args:
        c: The expected character

    Returns:
        Parser yielding Atom(c)

    Raises:
        ValueError: If c is not a single character
    """
    if len(c) != 1:
        msg = f"char() expects a single character, got {c!r}"
        raise ValueError(msg)
    expected = repr(c)

    def parse_char(cursor: Cursor) -> Outcome[Atom]:
        if not cursor.has_available(1):
            return Failure.from_diagnostic(
                FailureKind.END_OF_INPUT, cursor.pos, ErrorTemplate.end_of_input(expected)
            )
        found = cursor.peek()
        if found != c:
            return Failure.from_diagnostic(
                FailureKind.UNEXPECTED_CHAR,
                cursor.pos,
                ErrorTemplate.unexpected_char(expected, found),
            )
        return Success(Atom(c), cursor.advance())

    return Parser(parse_char, expected)


def literal(s: str) -> Parser[Atom]:
    """Match the fixed string s.

    Compares against exactly len(s) characters, after an explicit
    availability check.

    Raises:
        ValueError: If s is empty
    """
    if not s:
        msg = "literal() expects a non-empty string"
        raise ValueError(msg)
    size = len(s)
    expected = repr(s)

    def parse_literal(cursor: Cursor) -> Outcome[Atom]:
        if not cursor.has_available(size):
            return Failure.from_diagnostic(
                FailureKind.END_OF_INPUT, cursor.pos, ErrorTemplate.end_of_input(expected)
            )
        found = cursor.consume(size)
        if found != s:
            return Failure.from_diagnostic(
                FailureKind.UNEXPECTED_LITERAL,
                cursor.pos,
                ErrorTemplate.unexpected_literal(s, found),
            )
        return Success(Atom(s), cursor.advance(size))

    return Parser(parse_literal, expected)


def satisfy(predicate: Callable[[str], bool], description: str = "character") -> Parser[Atom]:
    """Match one character for which predicate returns True.

    Args:
        predicate: Test applied to the current character
        description: What the predicate accepts, for failure messages

    Example:
        >>> digit = satisfy(str.isdigit, "digit")
        >>> digit.parse("7")
        Atom(text='7')
    """

    def parse_satisfy(cursor: Cursor) -> Outcome[Atom]:
        if not cursor.has_available(1):
            return Failure.from_diagnostic(
                FailureKind.END_OF_INPUT, cursor.pos, ErrorTemplate.end_of_input(description)
            )
        found = cursor.peek()
        if not predicate(found):
            return Failure.from_diagnostic(
                FailureKind.UNEXPECTED_CHAR,
                cursor.pos,
                ErrorTemplate.unexpected_char(description, found),
            )
        return Success(Atom(found), cursor.advance())

    return Parser(parse_satisfy, description)


def char_in(chars: str, description: str | None = None) -> Parser[Atom]:
    """Match one character contained in chars."""
    allowed = frozenset(chars)
    return satisfy(allowed.__contains__, description or f"one of {chars!r}")


def any_char() -> Parser[Atom]:
    """Match any single character (fails only at end of input)."""
    return satisfy(lambda _: True, "any character")


def eof() -> Parser[Atom]:
    """Succeed with Atom("") only at end of input, consuming nothing."""

    def parse_eof(cursor: Cursor) -> Outcome[Atom]:
        if not cursor.is_eof:
            return Failure.from_diagnostic(
                FailureKind.EXPECTED_END_OF_INPUT,
                cursor.pos,
                ErrorTemplate.expected_end_of_input(cursor.peek()),
            )
        return Success(Atom(""), cursor)

    return Parser(parse_eof, "end of input")
