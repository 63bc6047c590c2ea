"""Combinators: higher-order operations building Parsers from Parsers.

Backtracking contract:
    A Failure carries no cursor. Whenever a combinator abandons a failed
    sub-parse (or_, many0, optional, sep_by) it continues from a cursor it
    already held before the attempt, so partial consumption of a failed
    attempt is never observable.

Failure payloads:
    seq      SEQUENCE_ELEMENT_FAILED(index=k, causes=(f,)), positioned at f
    or_      ALL_ALTERNATIVES_FAILED(causes=every branch failure, nested
             or_ failures spliced in); position, message and expected come
             from the deepest branch, ties going to the last one
    many1    INSUFFICIENT_REPETITION(causes=(first attempt failure,))
    between  first failing sub-parser's failure, unchanged
    and_     a's failure unchanged, else b's outcome
    map_     p's failure unchanged
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from combiparse.cursor import Cursor
from combiparse.diagnostics import ErrorTemplate
from combiparse.outcome import Failure, FailureKind, Outcome, Success
from combiparse.parser.context import current_context
from combiparse.parser.core import Parser
from combiparse.values import Atom, Value, ValueList, is_value

__all__ = [
    "and_",
    "between",
    "choice",
    "many0",
    "many1",
    "map_",
    "not_followed_by",
    "optional",
    "or_",
    "sep_by",
    "sep_by1",
    "seq",
    "skip_spaces",
    "token",
]

logger = logging.getLogger(__name__)

_WHITESPACE: frozenset[str] = frozenset(" \t\n\r")


# =============================================================================
# Choice
# =============================================================================


def _alternatives_failed(failures: Sequence[Failure]) -> Failure:
    """Combine branch failures of an ordered choice.

    Splicing nested ALL_ALTERNATIVES_FAILED causes makes the result depend
    only on the flat list of branches, so ``or_(or_(a, b), c)`` and
    ``or_(a, or_(b, c))`` produce equal failures.
    """
    causes: list[Failure] = []
    for failure in failures:
        if failure.kind is FailureKind.ALL_ALTERNATIVES_FAILED:
            causes.extend(failure.causes)
        else:
            causes.append(failure)

    deepest = causes[0]
    for cause in causes[1:]:
        if cause.position >= deepest.position:
            deepest = cause

    expected: list[str] = []
    for cause in causes:
        if cause.position == deepest.position:
            expected.extend(e for e in cause.expected if e not in expected)

    return Failure(
        FailureKind.ALL_ALTERNATIVES_FAILED,
        deepest.position,
        deepest.message,
        expected=tuple(expected),
        causes=tuple(causes),
    )


def or_[A, B](a: Parser[A], b: Parser[B]) -> Parser[A | B]:
    """Ordered choice: try a, else try b from the SAME starting cursor.

    Example:
        >>> from combiparse.parser.primitives import literal
        >>> ab_or_ac = or_(literal("ab"), literal("ac"))
        >>> ab_or_ac.parse("ac")
        Atom(text='ac')
    """

    def parse_or(cursor: Cursor) -> Outcome[A | B]:
        first = a.fn(cursor)
        if isinstance(first, Success):
            return first
        second = b.fn(cursor)
        if isinstance(second, Success):
            return second
        return _alternatives_failed((first, second))

    return Parser(parse_or, f"({a.name} | {b.name})")


def choice(*parsers: Parser[Any]) -> Parser[Any]:
    """N-ary ordered choice; same outcome as nested or_ calls.

    Raises:
        ValueError: If no parsers are given
    """
    if not parsers:
        msg = "choice() requires at least one parser"
        raise ValueError(msg)

    def parse_choice(cursor: Cursor) -> Outcome[Any]:
        failures: list[Failure] = []
        for parser in parsers:
            outcome = parser.fn(cursor)
            if isinstance(outcome, Success):
                return outcome
            failures.append(outcome)
        return _alternatives_failed(failures)

    return Parser(parse_choice, "(" + " | ".join(p.name for p in parsers) + ")")


def and_[A, B](a: Parser[A], b: Parser[B]) -> Parser[B]:
    """Conjunction: a and b must both succeed at the same starting cursor.

    Returns b's outcome (value and next cursor). a acts as a lookahead
    check: its value and its advance are discarded. When a fails, its
    failure is returned and b never runs.

    Example:
        >>> from combiparse.parser.primitives import literal, satisfy
        >>> # an identifier character that starts the keyword "if"
        >>> starts_if = and_(literal("if"), satisfy(str.isalpha, "letter"))
        >>> starts_if.parse("if", partial=True)
        Atom(text='i')
    """

    def parse_and(cursor: Cursor) -> Outcome[B]:
        check = a.fn(cursor)
        if isinstance(check, Failure):
            return check
        return b.fn(cursor)

    return Parser(parse_and, f"({a.name} & {b.name})")


def not_followed_by(p: Parser[Any]) -> Parser[Atom]:
    """Negative lookahead: succeed with Atom("") iff p fails, consuming nothing."""

    def parse_not(cursor: Cursor) -> Outcome[Atom]:
        outcome = p.fn(cursor)
        if isinstance(outcome, Success):
            return Failure.from_diagnostic(
                FailureKind.NOT_EXPECTED, cursor.pos, ErrorTemplate.not_expected(p.name)
            )
        return Success(Atom(""), cursor)

    return Parser(parse_not, f"!{p.name}")


# =============================================================================
# Sequencing
# =============================================================================


def seq(*parsers: Parser[Any]) -> Parser[ValueList]:
    """Sequential composition.

    Threads the cursor through each parser in order and fails fast: if
    element k fails, elements after k never run and the failure reports
    ``index=k``.

    Raises:
        ValueError: If no parsers are given

    Example:
        >>> from combiparse.parser.primitives import char
        >>> seq(char("a"), char("b")).parse("ab")
        ValueList(items=(Atom(text='a'), Atom(text='b')))
    """
    if not parsers:
        msg = "seq() requires at least one parser"
        raise ValueError(msg)

    def parse_seq(cursor: Cursor) -> Outcome[ValueList]:
        values: list[Value] = []
        current = cursor
        for index, parser in enumerate(parsers):
            outcome = parser.fn(current)
            if isinstance(outcome, Failure):
                return Failure(
                    FailureKind.SEQUENCE_ELEMENT_FAILED,
                    outcome.position,
                    outcome.message,
                    expected=outcome.expected,
                    index=index,
                    causes=(outcome,),
                )
            values.append(outcome.value)
            current = outcome.next
        return Success(ValueList(tuple(values)), current)

    return Parser(parse_seq, "seq(" + ", ".join(p.name for p in parsers) + ")")


def between[T](open_: Parser[Any], content: Parser[T], close: Parser[Any]) -> Parser[T]:
    """Bracketed content: open, content, close; keeps only content's value.

    Example:
        >>> from combiparse.parser.primitives import char, literal
        >>> between(char("("), literal("x"), char(")")).parse("(x)")
        Atom(text='x')
    """

    def parse_between(cursor: Cursor) -> Outcome[T]:
        opened = open_.fn(cursor)
        if isinstance(opened, Failure):
            return opened
        inner = content.fn(opened.next)
        if isinstance(inner, Failure):
            return inner
        closed = close.fn(inner.next)
        if isinstance(closed, Failure):
            return closed
        return Success(inner.value, closed.next)

    return Parser(parse_between, f"{open_.name} {content.name} {close.name}")


# =============================================================================
# Repetition
# =============================================================================


def _repeat(
    p: Parser[Any], cursor: Cursor
) -> tuple[list[Value], Cursor, Failure | None]:
    """Apply p until it fails.

    Returns:
        (values, cursor after the last match, failure of the final attempt).
        The failure is None when a zero-width match ended the loop.
    """
    context = current_context()
    values: list[Value] = []
    current = cursor
    while True:
        if context is not None:
            context.check(current.pos)
        outcome = p.fn(current)
        if isinstance(outcome, Failure):
            return values, current, outcome
        values.append(outcome.value)
        if outcome.next.pos == current.pos:
            # p matched without consuming; repeating would never terminate
            logger.debug(
                "Zero-width match of %s at position %d ends repetition", p.name, current.pos
            )
            return values, current, None
        current = outcome.next


def many0(p: Parser[Any]) -> Parser[ValueList]:
    """Zero or more repetitions of p. Never fails.

    Example:
        >>> from combiparse.parser.primitives import char
        >>> many0(char("a")).parse("aab", partial=True)
        ValueList(items=(Atom(text='a'), Atom(text='a')))
    """

    def parse_many0(cursor: Cursor) -> Outcome[ValueList]:
        values, current, _ = _repeat(p, cursor)
        return Success(ValueList(tuple(values)), current)

    return Parser(parse_many0, f"{p.name}*")


def many1(p: Parser[Any]) -> Parser[ValueList]:
    """One or more repetitions of p.

    Fails with INSUFFICIENT_REPETITION iff many0(p) would match nothing.
    """

    def parse_many1(cursor: Cursor) -> Outcome[ValueList]:
        values, current, failure = _repeat(p, cursor)
        if not values and failure is not None:
            diagnostic = ErrorTemplate.insufficient_repetition(p.name, failure.message)
            return Failure(
                FailureKind.INSUFFICIENT_REPETITION,
                cursor.pos,
                diagnostic.message,
                expected=failure.expected,
                causes=(failure,),
            )
        return Success(ValueList(tuple(values)), current)

    return Parser(parse_many1, f"{p.name}+")


def optional[T](p: Parser[T]) -> Parser[T | ValueList]:
    """Match p or nothing; yields an empty ValueList when p fails."""

    def parse_optional(cursor: Cursor) -> Outcome[T | ValueList]:
        outcome = p.fn(cursor)
        if isinstance(outcome, Failure):
            return Success(ValueList(()), cursor)
        return outcome

    return Parser(parse_optional, f"{p.name}?")


def _sep_by_tail(
    p: Parser[Any], sep: Parser[Any], first: Success[Any]
) -> Success[ValueList]:
    context = current_context()
    values: list[Value] = [first.value]
    current = first.next
    while True:
        if context is not None:
            context.check(current.pos)
        separator = sep.fn(current)
        if isinstance(separator, Failure):
            break
        item = p.fn(separator.next)
        if isinstance(item, Failure) or item.next.pos == current.pos:
            break
        values.append(item.value)
        current = item.next
    return Success(ValueList(tuple(values)), current)


def sep_by(p: Parser[Any], sep: Parser[Any]) -> Parser[ValueList]:
    """Zero or more p separated by sep; separator values are dropped.

    A trailing separator is not consumed: when sep matches but p does not
    follow, the cursor stays before the separator.

    Example:
        >>> from combiparse.parser.primitives import char
        >>> sep_by(char("a"), char(",")).parse("a,a").unwrap()
        ['a', 'a']
    """

    def parse_sep_by(cursor: Cursor) -> Outcome[ValueList]:
        first = p.fn(cursor)
        if isinstance(first, Failure):
            return Success(ValueList(()), cursor)
        return _sep_by_tail(p, sep, first)

    return Parser(parse_sep_by, f"sep_by({p.name}, {sep.name})")


def sep_by1(p: Parser[Any], sep: Parser[Any]) -> Parser[ValueList]:
    """One or more p separated by sep; fails with p's failure if none."""

    def parse_sep_by1(cursor: Cursor) -> Outcome[ValueList]:
        first = p.fn(cursor)
        if isinstance(first, Failure):
            return first
        return _sep_by_tail(p, sep, first)

    return Parser(parse_sep_by1, f"sep_by1({p.name}, {sep.name})")


# =============================================================================
# Transformation
# =============================================================================


def map_[A, B: Value](p: Parser[A], f: Callable[[A], B]) -> Parser[B]:
    """Apply pure function f to p's value; the cursor is left exactly as p left it.

    f must return a member of the Value union (wrap author data in Node).

    Raises:
        TypeError: At parse time, if f returns a value outside the union

    Example:
        >>> from combiparse.parser.primitives import satisfy
        >>> from combiparse.values import Node
        >>> digit = map_(satisfy(str.isdigit, "digit"), lambda a: Node(int(a.text)))
        >>> digit.parse("7")
        Node(data=7)
    """

    def parse_map(cursor: Cursor) -> Outcome[B]:
        outcome = p.fn(cursor)
        if isinstance(outcome, Failure):
            return outcome
        result = f(outcome.value)
        if not is_value(result):
            raise TypeError(ErrorTemplate.map_result_invalid(p.name, result).message)
        return Success(result, outcome.next)

    return Parser(parse_map, p.name)


# =============================================================================
# Whitespace helpers
# =============================================================================


def skip_spaces() -> Parser[Atom]:
    """Match zero or more whitespace characters (space, tab, CR, LF)."""

    def parse_spaces(cursor: Cursor) -> Outcome[Atom]:
        current = cursor
        while not current.is_eof and current.peek() in _WHITESPACE:
            current = current.advance()
        return Success(Atom(cursor.slice_to(current.pos)), current)

    return Parser(parse_spaces, "whitespace")


def token[T](p: Parser[T]) -> Parser[T]:
    """Match p, then skip trailing whitespace; keeps p's value."""
    spaces = skip_spaces()

    def parse_token(cursor: Cursor) -> Outcome[T]:
        outcome = p.fn(cursor)
        if isinstance(outcome, Failure):
            return outcome
        trailing = spaces.fn(outcome.next)
        # skip_spaces never fails
        assert isinstance(trailing, Success)
        return Success(outcome.value, trailing.next)

    return Parser(parse_token, p.name)
