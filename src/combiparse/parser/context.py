"""Per-run parse context: depth guard, deadline and cancellation.

Parsers keep the single-argument ``Cursor -> Outcome`` shape, so the
context for one run travels alongside the cursor in thread-local storage
instead of as a parameter. ``run`` activates a fresh ParseContext for the
duration of the call; parsers invoked directly on a Cursor (outside any
run) see no context and skip these checks.

Checked by:
    - Lazy on every delegation (depth, deadline, cancellation)
    - many0 / many1 on every iteration (deadline, cancellation)

Thread Safety:
    Each thread has its own active context. A CancellationToken may be
    shared across threads; cancel() is safe to call from any thread.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import local as thread_local
from typing import TYPE_CHECKING

from combiparse.constants import MAX_DEPTH
from combiparse.core import DepthGuard
from combiparse.diagnostics import (
    DeadlineExceededError,
    ErrorTemplate,
    ParseCancelledError,
)

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "CancellationToken",
    "ParseContext",
    "activate",
    "current_context",
]

_context_thread_local = thread_local()


class CancellationToken:
    """Cooperative cancellation flag for long-running parses.

    Example:
        >>> token = CancellationToken()
        >>> token.is_cancelled
        False
        >>> token.cancel()
        >>> token.is_cancelled
        True
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        """Initialize an uncancelled token."""
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation of every parse observing this token."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._event.is_set()


@dataclass(slots=True)
class ParseContext:
    """Explicit context for one parse run.

    Attributes:
        max_depth: Maximum nested Lazy delegations
        timeout: Seconds allowed for the run (None = unlimited)
        cancel_token: Optional cooperative cancellation token
        guard: Depth tracker (created from max_depth)
        deadline: Monotonic deadline derived from timeout
    """

    max_depth: int = MAX_DEPTH
    timeout: float | None = None
    cancel_token: CancellationToken | None = None
    guard: DepthGuard = field(init=False)
    deadline: float | None = field(init=False)

    def __post_init__(self) -> None:
        """Create depth guard and compute the deadline."""
        self.guard = DepthGuard(max_depth=self.max_depth)
        self.deadline = (
            time.monotonic() + self.timeout if self.timeout is not None else None
        )

    def check(self, position: int) -> None:
        """Raise if the run has been cancelled or has run out of time.

        Args:
            position: Current cursor position (reported in the error)

        Raises:
            ParseCancelledError: If the cancel token has been triggered
            DeadlineExceededError: If the deadline has passed
        """
        if self.cancel_token is not None and self.cancel_token.is_cancelled:
            raise ParseCancelledError(
                ErrorTemplate.parse_cancelled(position), position=position
            )
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise DeadlineExceededError(
                ErrorTemplate.deadline_exceeded(self.timeout or 0.0, position),
                position=position,
            )


def current_context() -> ParseContext | None:
    """Get the context of the run active on this thread (if any)."""
    return getattr(_context_thread_local, "context", None)


@contextmanager
def activate(context: ParseContext) -> Generator[ParseContext]:
    """Make context the active one on this thread for the with-block.

    Nested activations (a mapping function that itself calls run) restore
    the outer context on exit.
    """
    previous = current_context()
    _context_thread_local.context = context
    try:
        yield context
    finally:
        _context_thread_local.context = previous
