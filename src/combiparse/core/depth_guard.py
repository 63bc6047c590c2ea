"""Nesting limit for Lazy delegations.

A recursive rule such as ``value -> '[' value ']'`` recurses once per level
of input nesting. Counting Lazy delegations lets a run stop with
DepthLimitExceededError long before the interpreter would raise
RecursionError.

The limit is raised, never returned as a Failure: a Failure would be
absorbed by optional, many0 or sep_by and turn a resource limit into a
misleading syntax error or a silently truncated result.

Each ParseContext owns one DepthGuard, so guards are never shared between
threads.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from combiparse.constants import MAX_DEPTH
from combiparse.diagnostics import DepthLimitExceededError, ErrorTemplate

__all__ = ["DepthGuard", "depth_clamp"]

logger = logging.getLogger(__name__)

# Interpreter frames one nesting level costs: the Lazy call itself plus the
# combinators between it and the next Lazy in a typical grammar.
_FRAMES_PER_LEVEL = 12

# Frames left for the caller, the runner and logging.
_RESERVED_FRAMES = 50


@dataclass(slots=True)
class DepthGuard:
    """Counter of active Lazy delegations in one run.

    Lazy calls check() before delegating, then brackets the delegation
    with increment() and decrement():

        guard.check(cursor.pos, rule_name)
        guard.increment()
        try:
            return target(cursor)
        finally:
            guard.decrement()

    Not frozen: current_depth changes on every delegation.

    Attributes:
        max_depth: Limit after clamping to the recursion limit
        current_depth: Delegations currently on the stack
    """

    max_depth: int = MAX_DEPTH
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.max_depth = depth_clamp(self.max_depth)

    @property
    def depth(self) -> int:
        return self.current_depth

    def is_exceeded(self) -> bool:
        """True once max_depth delegations are active."""
        return self.current_depth >= self.max_depth

    def check(self, position: int, rule_name: str) -> None:
        """Refuse one more level once the limit is reached.

        Raises:
            DepthLimitExceededError: If max_depth delegations are active
        """
        if self.is_exceeded():
            logger.warning(
                "Nesting depth %d reached in %s at position %d",
                self.max_depth,
                rule_name,
                position,
            )
            raise DepthLimitExceededError(
                ErrorTemplate.nesting_depth_exceeded(self.max_depth, rule_name, position),
                position=position,
                max_depth=self.max_depth,
            )

    def increment(self) -> None:
        self.current_depth += 1

    def decrement(self) -> None:
        """Leave one level. Never goes below zero."""
        self.current_depth = max(0, self.current_depth - 1)

    def reset(self) -> None:
        self.current_depth = 0


def depth_clamp(
    requested_depth: int,
    frames_per_level: int = _FRAMES_PER_LEVEL,
    reserve_frames: int = _RESERVED_FRAMES,
) -> int:
    """Lower requested_depth to what the interpreter stack can hold.

    The ceiling is ``(sys.getrecursionlimit() - reserve_frames) //
    frames_per_level``, never less than 1. Clamping logs a warning on the
    ``combiparse.core.depth_guard`` logger.

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(1000)
        >>> depth_clamp(64)
        64
        >>> depth_clamp(500)
        79
    """
    limit = sys.getrecursionlimit()
    ceiling = max(1, (limit - reserve_frames) // frames_per_level)
    if requested_depth <= ceiling:
        return requested_depth
    logger.warning(
        "Nesting depth %d needs more stack than recursion limit %d allows. "
        "Clamping to %d; raise sys.setrecursionlimit() for deeper input.",
        requested_depth,
        limit,
        ceiling,
    )
    return ceiling
