"""combiparse exception hierarchy with structured diagnostics.

Parse failures are ordinary return values (see combiparse.outcome). The
exceptions below cover everything that is NOT a parse outcome: grammar
definition mistakes, aborted parses, and the opt-in raising entry point.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from combiparse.outcome import Failure

__all__ = [
    "CombiparseError",
    "DeadlineExceededError",
    "DepthLimitExceededError",
    "EndOfInputError",
    "GrammarDefinitionError",
    "ParseAbortedError",
    "ParseCancelledError",
    "ParseFailedError",
]


class CombiparseError(Exception):
    """Base exception for all combiparse errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize CombiparseError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class GrammarDefinitionError(CombiparseError):
    """The grammar itself is wrong, independent of any input.

    Examples:
    - A Lazy builder raised or returned a non-Parser
    - A Lazy builder ran its own parser while building it
    """


class ParseFailedError(CombiparseError):
    """Raised by ParserRunner.run_or_raise when the parse fails.

    Attributes:
        failure: The Failure value returned by the parser
        source: The input text
    """

    def __init__(self, message: str | Diagnostic, *, failure: Failure, source: str) -> None:
        """Initialize ParseFailedError.

        Args:
            message: Error message string OR Diagnostic object
            failure: The Failure value returned by the parser
            source: The input text
        """
        super().__init__(message)
        self.failure = failure
        self.source = source


class ParseAbortedError(CombiparseError):
    """A parse was stopped before producing an outcome.

    Attributes:
        position: Cursor position when the abort was noticed
    """

    def __init__(self, message: str | Diagnostic, *, position: int) -> None:
        """Initialize ParseAbortedError.

        Args:
            message: Error message string OR Diagnostic object
            position: Cursor position when the abort was noticed
        """
        super().__init__(message)
        self.position = position


class DeadlineExceededError(ParseAbortedError, TimeoutError):
    """The parse ran past the deadline configured by ``timeout``."""


class ParseCancelledError(ParseAbortedError):
    """The parse was cancelled through a CancellationToken."""


class DepthLimitExceededError(ParseAbortedError):
    """Input nested Lazy rules deeper than the run's max_depth.

    Raised rather than returned so that optional, many0 and sep_by cannot
    mistake a resource limit for an absent element.

    Attributes:
        max_depth: The limit that was hit
    """

    def __init__(self, message: str | Diagnostic, *, position: int, max_depth: int) -> None:
        super().__init__(message, position=position)
        self.max_depth = max_depth


class EndOfInputError(EOFError):
    """Cursor read past the end of its source.

    Attributes:
        position: Cursor position of the failed read
        requested: Number of characters requested
    """

    def __init__(self, message: str, *, position: int, requested: int) -> None:
        """Initialize EndOfInputError.

        Args:
            message: Error message
            position: Cursor position of the failed read
            requested: Number of characters requested
        """
        super().__init__(message)
        self.position = position
        self.requested = requested
