"""Deferred parser references for recursive grammar rules.

A grammar rule that refers to itself, or to a rule defined later, cannot
be built eagerly: the referenced Parser does not exist yet. Lazy defers the
construction until the first parse attempt, when every rule has been
assigned:

    value: Parser[Value]
    array = between(char("["), sep_by(lazy(lambda: value), char(",")), char("]"))
    value = choice(number, string, array)

Cell lifecycle:
    uninitialized -> built once -> frozen

The builder runs at most once for the lifetime of the Lazy, no matter how
many times or from how many threads the parser is invoked. If the builder
raises or returns something that is not a Parser, the cell freezes in a
failed state and every later call raises GrammarDefinitionError chained to
the original cause; the builder is not retried.

Thread Safety:
    Construction is guarded by a re-entrant lock with a double-checked
    fast path. Re-entrancy is only ever the builder's own thread calling
    back into this Lazy, which is reported as a grammar error instead of
    recursing forever.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from combiparse.cursor import Cursor
from combiparse.diagnostics import ErrorTemplate, GrammarDefinitionError
from combiparse.outcome import Outcome
from combiparse.parser.context import current_context
from combiparse.parser.core import Parser

__all__ = ["Lazy", "lazy"]

logger = logging.getLogger(__name__)


class Lazy[T](Parser[T]):
    """Parser whose underlying parser is built on first use.

    Example:
        >>> from combiparse.parser.primitives import char
        >>> calls = []
        >>> ref = Lazy(lambda: calls.append(1) or char("a"), name="a-rule")
        >>> ref.is_built
        False
        >>> ref.parse("a")
        Atom(text='a')
        >>> ref.parse("a")
        Atom(text='a')
        >>> len(calls)
        1
    """

    __slots__ = ("_builder", "_building", "_error", "_lock", "_parser")

    def __init__(self, builder: Callable[[], Parser[T]], name: str = "lazy") -> None:
        """Create an unbuilt deferred reference.

        Args:
            builder: Zero-argument function returning the real Parser
            name: Rule name used in messages and logs
        """
        super().__init__(self._delegate, name)
        self._builder = builder
        self._lock = threading.RLock()
        self._parser: Parser[T] | None = None
        self._error: GrammarDefinitionError | None = None
        self._building = False

    @property
    def is_built(self) -> bool:
        """Whether the builder has run successfully."""
        return self._parser is not None

    def resolve(self) -> Parser[T]:
        """Return the underlying parser, building it on first call.

        Raises:
            GrammarDefinitionError: If the builder raises, returns a
                non-Parser, or invokes this Lazy while building it
        """
        parser = self._parser
        if parser is not None:
            return parser

        with self._lock:
            if self._parser is not None:
                return self._parser
            if self._error is not None:
                raise GrammarDefinitionError(
                    self._error.diagnostic or str(self._error)
                ) from self._error.__cause__
            if self._building:
                raise GrammarDefinitionError(ErrorTemplate.lazy_reentrant_build(self.name))

            self._building = True
            try:
                built = self._builder()
            except Exception as e:
                logger.error("Lazy builder for %s failed: %s", self.name, e)
                error = GrammarDefinitionError(ErrorTemplate.lazy_builder_failed(self.name, e))
                self._error = error
                raise error from e
            finally:
                self._building = False

            if not isinstance(built, Parser):
                logger.error("Lazy builder for %s returned %r", self.name, built)
                error = GrammarDefinitionError(
                    ErrorTemplate.lazy_builder_invalid(self.name, built)
                )
                self._error = error
                raise error

            logger.debug("Built lazy parser %s -> %s", self.name, built.name)
            self._parser = built
            return built

    def _delegate(self, cursor: Cursor) -> Outcome[T]:
        parser = self._parser
        if parser is None:
            parser = self.resolve()

        context = current_context()
        if context is None:
            return parser.fn(cursor)

        context.check(cursor.pos)
        guard = context.guard
        guard.check(cursor.pos, self.name)
        guard.increment()
        try:
            return parser.fn(cursor)
        finally:
            guard.decrement()


def lazy[T](builder: Callable[[], Parser[T]], name: str = "lazy") -> Lazy[T]:
    """Create a deferred reference; see :class:`Lazy`."""
    return Lazy(builder, name)
