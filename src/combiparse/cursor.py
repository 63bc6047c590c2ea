"""Input positions for parsers.

A Cursor is a (source, pos) pair. Parsers never mutate one: reading is done
with peek() and consume(), moving with advance(), which builds a new Cursor.
Holding on to an old cursor is therefore all backtracking needs.

Lines are split on ``\\n`` only. CRLF text numbers lines correctly; a lone
``\\r`` does not start a new line.

Python 3.13+. Zero external dependencies.
"""

from bisect import bisect_right
from dataclasses import dataclass

from combiparse.diagnostics import EndOfInputError, ErrorTemplate

__all__ = ["Cursor", "LineOffsetCache", "make_cursor"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable position in a source string, ``0 <= pos <= len(source)``.

    Cursors with equal source and pos compare and hash equal.

    Example:
        >>> cursor = Cursor("hello", 0)
        >>> cursor.peek()
        'h'
        >>> cursor.consume(3)
        'hel'
        >>> cursor.pos
        0
        >>> cursor.advance(3).peek()
        'l'
        >>> Cursor("hi", 2).peek()
        Traceback (most recent call last):
        ...
        combiparse.diagnostics.errors.EndOfInputError: Unexpected end of input at position 2 (needed 1)
    """

    source: str
    pos: int

    def __post_init__(self) -> None:
        """Raises ValueError when pos falls outside the source."""
        if not 0 <= self.pos <= len(self.source):
            msg = f"Cursor position {self.pos} outside 0..{len(self.source)}"
            raise ValueError(msg)

    @property
    def is_eof(self) -> bool:
        return self.pos >= len(self.source)

    @property
    def remaining(self) -> int:
        return len(self.source) - self.pos

    def has_available(self, n: int) -> bool:
        """True when n more characters can be read from here."""
        return self.pos + n <= len(self.source)

    def _exhausted(self, requested: int) -> EndOfInputError:
        diagnostic = ErrorTemplate.cursor_exhausted(self.pos, requested)
        return EndOfInputError(diagnostic.message, position=self.pos, requested=requested)

    def peek(self) -> str:
        """Character at pos.

        Raises:
            EndOfInputError: At end of input
        """
        if self.is_eof:
            raise self._exhausted(1)
        return self.source[self.pos]

    def consume(self, n: int) -> str:
        """The n characters starting at pos. The cursor itself does not move.

        Parsers look first and advance(n) only when the text matches.

        Raises:
            EndOfInputError: When fewer than n characters remain
        """
        if not self.has_available(n):
            raise self._exhausted(n)
        return self.source[self.pos : self.pos + n]

    def advance(self, count: int = 1) -> "Cursor":
        """New cursor count characters further on, stopping at end of input.

        Never moves backwards: a negative count leaves the position as is.

        Example:
            >>> Cursor("hello", 0).advance().pos
            1
            >>> Cursor("hello", 0).advance(99).pos
            5
            >>> Cursor("hello", 2).advance(-1).pos
            2
        """
        return Cursor(self.source, min(self.pos + max(count, 0), len(self.source)))

    def slice_to(self, end_pos: int) -> str:
        """Text between pos and end_pos, typically a later cursor's pos.

        Example:
            >>> start = Cursor("hello world", 0)
            >>> start.slice_to(start.advance(5).pos)
            'hello'
        """
        return self.source[self.pos : end_pos]

    def slice_ahead(self, n: int) -> str:
        """Up to n characters from pos; shorter near the end."""
        return self.source[self.pos : self.pos + n]

    def compute_line_col(self) -> tuple[int, int]:
        """1-based (line, column) of pos.

        Scans the text before pos, so it is meant for error reporting.
        Use LineOffsetCache when many positions of one source are needed.

        Example:
            >>> Cursor("line1\\nline2", 8).compute_line_col()
            (2, 3)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        line_start = self.source.rfind("\n", 0, self.pos) + 1
        return (line, self.pos - line_start + 1)


def make_cursor(text: str) -> Cursor:
    return Cursor(text, 0)


class LineOffsetCache:
    """Line start offsets of one source, for repeated line/column lookups.

    Building is one pass over the source. Each lookup is a binary search,
    which pays off when reporting every cause of an
    ALL_ALTERNATIVES_FAILED failure.

    Immutable after construction, so it can be shared between threads.

    Example:
        >>> cache = LineOffsetCache("line1\\nline2\\nline3")
        >>> cache.get_line_col(8)
        (2, 3)
    """

    __slots__ = ("_line_starts", "_source_len")

    def __init__(self, source: str) -> None:
        starts = [0]
        starts.extend(i + 1 for i, char in enumerate(source) if char == "\n")
        self._line_starts: tuple[int, ...] = tuple(starts)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """1-based (line, column) of pos, clamped into the source."""
        pos = min(max(pos, 0), self._source_len)
        line = bisect_right(self._line_starts, pos)
        return (line, pos - self._line_starts[line - 1] + 1)
