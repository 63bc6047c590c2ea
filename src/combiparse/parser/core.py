"""Parser abstraction and the run() entry point.

Architecture:
    A :class:`Parser` wraps a pure function ``Cursor -> Outcome``. Every
    primitive (:mod:`~combiparse.parser.primitives`) and combinator
    (:mod:`~combiparse.parser.combinators`) produces a Parser from smaller
    ones; :class:`~combiparse.parser.lazy.Lazy` is the only Parser with
    internal state (its one-shot construction cell).

    :func:`run` is the single entry point a consumer calls. It builds the
    initial cursor, activates a fresh
    :class:`~combiparse.parser.context.ParseContext` and invokes the
    parser once.

Security:
    Includes configurable input size limit and nesting depth limit, plus
    optional timeout/cancellation for pathological grammars.

See Also:
    - :mod:`combiparse.cursor` - Cursor type
    - :mod:`combiparse.outcome` - Success / Failure
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from combiparse.constants import MAX_DEPTH, MAX_SOURCE_SIZE
from combiparse.cursor import Cursor, make_cursor
from combiparse.diagnostics import DiagnosticFormatter, ErrorTemplate, ParseFailedError
from combiparse.outcome import Failure, FailureKind, Outcome, Success
from combiparse.parser.context import CancellationToken, ParseContext, activate

if TYPE_CHECKING:
    from combiparse.values import Value

__all__ = ["Parser", "ParserRunner", "run"]

logger = logging.getLogger(__name__)


class Parser[T]:
    """A pure parsing function ``Cursor -> Outcome[T]`` with a name.

    Type Parameters:
        T: Payload type of successful outcomes (a member of the Value union)

    Combinators call ``p.fn(cursor)`` directly to keep the interpreter
    stack shallow; ``p(cursor)`` is equivalent.

    Operator sugar:
        ``a | b``   or_(a, b)
        ``a & b``   and_(a, b)
        ``p >> f``  map_(p, f)

    Example:
        >>> from combiparse.parser.primitives import char
        >>> ab = char("a") | char("b")
        >>> ab.parse("b")
        Atom(text='b')
    """

    __slots__ = ("fn", "name")

    def __init__(self, fn: Callable[[Cursor], Outcome[T]], name: str = "parser") -> None:
        """Wrap fn into a Parser.

        Args:
            fn: Pure function from Cursor to Outcome
            name: Human-readable rule name (used in messages and logs)
        """
        self.fn = fn
        self.name = name

    def __call__(self, cursor: Cursor) -> Outcome[T]:
        return self.fn(cursor)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

    def named(self, name: str) -> Parser[T]:
        """Return a copy of this parser with a different name."""
        return Parser(self.fn, name)

    def parse(self, source: str, **options: Any) -> T | Failure:
        """Shortcut for ``run(self, source, **options)``."""
        return run(self, source, **options)

    def __or__[U](self, other: Parser[U]) -> Parser[T | U]:
        from combiparse.parser.combinators import or_  # noqa: PLC0415 - circular

        return or_(self, other)

    def __and__[U](self, other: Parser[U]) -> Parser[U]:
        from combiparse.parser.combinators import and_  # noqa: PLC0415 - circular

        return and_(self, other)

    def __rshift__[U: Value](self, f: Callable[[T], U]) -> Parser[U]:
        from combiparse.parser.combinators import map_  # noqa: PLC0415 - circular

        return map_(self, f)


class ParserRunner:
    """Configured engine for running parsers over whole inputs.

    Security:
    - Configurable max_source_size rejects oversized input up front
    - Configurable max_depth bounds nested Lazy delegations
    - Optional timeout bounds wall-clock time of one run

    Attributes:
        max_source_size: Maximum input length in characters (0 disables)
        max_depth: Maximum nested Lazy delegations
        timeout: Seconds allowed per run (None = unlimited)
        partial: Accept a successful parse that leaves input unconsumed
    """

    __slots__ = ("_max_depth", "_max_source_size", "_partial", "_timeout")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_depth: int | None = None,
        timeout: float | None = None,
        partial: bool = False,
    ) -> None:
        """Initialize runner with optional limits.

        Args:
            max_source_size: Maximum input length (default: 10 MB).
                            Set to 0 to disable the size limit.
            max_depth: Maximum nested Lazy delegations (default: 64).
            timeout: Seconds allowed per run (default: unlimited).
            partial: Accept input left over after a successful parse.
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_depth = max_depth if max_depth is not None else MAX_DEPTH
        self._timeout = timeout
        self._partial = partial

    @property
    def max_source_size(self) -> int:
        """Maximum allowed input length in characters."""
        return self._max_source_size

    @property
    def max_depth(self) -> int:
        """Maximum nested Lazy delegations."""
        return self._max_depth

    @property
    def timeout(self) -> float | None:
        """Seconds allowed per run."""
        return self._timeout

    @property
    def partial(self) -> bool:
        """Whether unconsumed trailing input is accepted."""
        return self._partial

    def parse[T](
        self,
        parser: Parser[T],
        source: str,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> Outcome[T]:
        """Run parser over source and return the full Outcome.

        Args:
            parser: Top-level parser
            source: Input text
            cancel_token: Optional token to cancel the run from another thread

        Returns:
            Success with the parsed value and final cursor, or Failure

        Raises:
            ValueError: If source exceeds max_source_size
            ParseAbortedError: If the run is cancelled, times out or nests
                Lazy rules deeper than max_depth
            GrammarDefinitionError: If a Lazy builder is broken
        """
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            diagnostic = ErrorTemplate.source_too_large(len(source), self._max_source_size)
            raise ValueError(diagnostic.message)

        context = ParseContext(
            max_depth=self._max_depth, timeout=self._timeout, cancel_token=cancel_token
        )
        logger.debug("Running %s over %d characters", parser.name, len(source))

        with activate(context):
            outcome = parser.fn(make_cursor(source))

        if isinstance(outcome, Success) and not self._partial and not outcome.next.is_eof:
            cursor = outcome.next
            outcome = Failure.from_diagnostic(
                FailureKind.EXPECTED_END_OF_INPUT,
                cursor.pos,
                ErrorTemplate.expected_end_of_input(cursor.peek()),
            )

        if isinstance(outcome, Failure):
            logger.debug(
                "%s failed at position %d: %s", parser.name, outcome.position, outcome.message
            )
        return outcome

    def run[T](
        self,
        parser: Parser[T],
        source: str,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> T | Failure:
        """Run parser over source and return the parsed value or the Failure.

        Note:
            Check the result with ``isinstance(result, Failure)``: an empty
            ValueList is falsy too.
        """
        outcome = self.parse(parser, source, cancel_token=cancel_token)
        if isinstance(outcome, Failure):
            return outcome
        return outcome.value

    def run_or_raise[T](
        self,
        parser: Parser[T],
        source: str,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> T:
        """Run parser over source, raising on failure.

        Raises:
            ParseFailedError: With the Failure and a formatted diagnostic
        """
        outcome = self.parse(parser, source, cancel_token=cancel_token)
        if isinstance(outcome, Failure):
            diagnostic = outcome.to_diagnostic(source, rule_name=parser.name)
            if logger.isEnabledFor(logging.DEBUG):
                formatter = DiagnosticFormatter()
                logger.debug("%s", formatter.format_failure(outcome, source, parser.name))
            raise ParseFailedError(diagnostic, failure=outcome, source=source)
        return outcome.value


def run[T](
    parser: Parser[T],
    source: str,
    *,
    partial: bool = False,
    max_source_size: int | None = None,
    max_depth: int | None = None,
    timeout: float | None = None,
    cancel_token: CancellationToken | None = None,
) -> T | Failure:
    """Parse source with parser and return the value or the Failure.

    Args:
        parser: Top-level parser
        source: Input text
        partial: Accept input left over after a successful parse
        max_source_size: Maximum input length (default: 10 MB)
        max_depth: Maximum nested Lazy delegations (default: 64)
        timeout: Seconds allowed for the run (default: unlimited)
        cancel_token: Optional token to cancel the run from another thread

    Returns:
        The parsed value, or a Failure with the offset and message needed
        to report "expected X at position N"

    Raises:
        DepthLimitExceededError: If input nests Lazy rules past max_depth
        DeadlineExceededError: If timeout elapses
        ParseCancelledError: If cancel_token is cancelled

    Example:
        >>> from combiparse.parser.primitives import literal
        >>> run(literal("hi"), "hi")
        Atom(text='hi')
        >>> run(literal("hi"), "ho").position
        0
    """
    runner = ParserRunner(
        max_source_size=max_source_size,
        max_depth=max_depth,
        timeout=timeout,
        partial=partial,
    )
    return runner.run(parser, source, cancel_token=cancel_token)
