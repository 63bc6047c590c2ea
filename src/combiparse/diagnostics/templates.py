"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This provides:
        - Testable error messages
        - Consistent formatting
        - Documentation of all error cases
    """

    # ------------------------------------------------------------------
    # Parse failures
    # ------------------------------------------------------------------

    @staticmethod
    def end_of_input(expected: str) -> Diagnostic:
        """Input exhausted where more characters were required.

        Args:
            expected: Human-readable description of what was expected

        Returns:
            Diagnostic for END_OF_INPUT
        """
        msg = f"Unexpected end of input, expected {expected}"
        return Diagnostic(
            code=DiagnosticCode.END_OF_INPUT,
            message=msg,
            hint="The input ends before the construct is complete",
            expected=(expected,),
        )

    @staticmethod
    def cursor_exhausted(position: int, requested: int) -> Diagnostic:
        """Cursor read past the end of its source.

        Args:
            position: Cursor position of the read
            requested: Number of characters requested

        Returns:
            Diagnostic for END_OF_INPUT
        """
        msg = f"Unexpected end of input at position {position} (needed {requested})"
        return Diagnostic(code=DiagnosticCode.END_OF_INPUT, message=msg)

    @staticmethod
    def unexpected_char(expected: str, found: str) -> Diagnostic:
        """Single character did not match.

        Args:
            expected: Human-readable description of the expected character
            found: The character actually present

        Returns:
            Diagnostic for UNEXPECTED_CHAR
        """
        msg = f"Expected {expected} but found {found!r}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_CHAR,
            message=msg,
            expected=(expected,),
        )

    @staticmethod
    def unexpected_literal(expected: str, found: str) -> Diagnostic:
        """Fixed string did not match.

        Args:
            expected: The literal that was expected
            found: The same number of characters actually present

        Returns:
            Diagnostic for UNEXPECTED_LITERAL
        """
        msg = f"Expected {expected!r} but found {found!r}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_LITERAL,
            message=msg,
            expected=(repr(expected),),
        )

    @staticmethod
    def insufficient_repetition(rule_name: str, cause_message: str) -> Diagnostic:
        """many1 matched zero times.

        Args:
            rule_name: Name of the repeated parser
            cause_message: Message of the first failed attempt

        Returns:
            Diagnostic for INSUFFICIENT_REPETITION
        """
        msg = f"Expected at least one {rule_name}: {cause_message}"
        return Diagnostic(
            code=DiagnosticCode.INSUFFICIENT_REPETITION,
            message=msg,
            rule_name=rule_name,
        )

    @staticmethod
    def expected_end_of_input(found: str) -> Diagnostic:
        """Input remained after the top-level parser succeeded.

        Args:
            found: The first unconsumed character

        Returns:
            Diagnostic for EXPECTED_END_OF_INPUT
        """
        msg = f"Expected end of input but found {found!r}"
        return Diagnostic(
            code=DiagnosticCode.EXPECTED_END_OF_INPUT,
            message=msg,
            hint="Pass partial=True to accept a prefix of the input",
            expected=("end of input",),
        )

    @staticmethod
    def not_expected(rule_name: str) -> Diagnostic:
        """Negative lookahead matched.

        Args:
            rule_name: Name of the parser that must not match

        Returns:
            Diagnostic for NOT_EXPECTED
        """
        msg = f"Unexpected {rule_name}"
        return Diagnostic(
            code=DiagnosticCode.NOT_EXPECTED,
            message=msg,
            rule_name=rule_name,
        )

    # ------------------------------------------------------------------
    # Hints attached to composite failures
    # ------------------------------------------------------------------

    @staticmethod
    def sequence_element_hint(index: int | None) -> str:
        """Hint for SEQUENCE_ELEMENT_FAILED naming the failing element."""
        return f"Sequence element {index} failed"

    @staticmethod
    def alternatives_hint(count: int) -> str:
        """Hint for ALL_ALTERNATIVES_FAILED with the number of branches tried."""
        return f"None of {count} alternatives matched"

    # ------------------------------------------------------------------
    # Aborted parses
    # ------------------------------------------------------------------

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, rule_name: str, position: int) -> Diagnostic:
        """Input nested Lazy rules deeper than max_depth.

        Args:
            max_depth: The configured depth limit
            rule_name: Name of the Lazy rule that hit the limit
            position: Cursor position of the delegation that was refused

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = (
            f"Maximum nesting depth ({max_depth}) exceeded in {rule_name} "
            f"at position {position}"
        )
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            hint="Increase max_depth or reduce nesting in the input",
            rule_name=rule_name,
        )

    @staticmethod
    def deadline_exceeded(timeout: float, position: int) -> Diagnostic:
        """Parse did not finish before its deadline.

        Args:
            timeout: Configured timeout in seconds
            position: Cursor position when the deadline was noticed

        Returns:
            Diagnostic for DEADLINE_EXCEEDED
        """
        msg = f"Parse exceeded its {timeout:g}s deadline at position {position}"
        return Diagnostic(
            code=DiagnosticCode.DEADLINE_EXCEEDED,
            message=msg,
            hint="Check for repetition over parsers that match little input",
        )

    @staticmethod
    def parse_cancelled(position: int) -> Diagnostic:
        """Parse cancelled through its CancellationToken.

        Args:
            position: Cursor position when cancellation was noticed

        Returns:
            Diagnostic for PARSE_CANCELLED
        """
        msg = f"Parse cancelled at position {position}"
        return Diagnostic(code=DiagnosticCode.PARSE_CANCELLED, message=msg)

    @staticmethod
    def source_too_large(size: int, limit: int) -> Diagnostic:
        """Input exceeds the configured size limit.

        Args:
            size: Input length in characters
            limit: Configured maximum

        Returns:
            Diagnostic for SOURCE_TOO_LARGE
        """
        msg = (
            f"Source size ({size:,} characters) exceeds maximum "
            f"({limit:,} characters)"
        )
        return Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=msg,
            hint="Configure max_source_size to increase the limit",
        )

    # ------------------------------------------------------------------
    # Grammar definition errors
    # ------------------------------------------------------------------

    @staticmethod
    def lazy_builder_failed(rule_name: str, error: BaseException) -> Diagnostic:
        """Lazy builder raised while constructing its parser.

        Args:
            rule_name: Name of the Lazy rule
            error: The exception raised by the builder

        Returns:
            Diagnostic for LAZY_BUILDER_FAILED
        """
        msg = f"Builder for {rule_name} failed: {type(error).__name__}: {error}"
        return Diagnostic(
            code=DiagnosticCode.LAZY_BUILDER_FAILED,
            message=msg,
            hint="Lazy builders run once; fix the grammar definition and rebuild it",
            rule_name=rule_name,
        )

    @staticmethod
    def lazy_builder_invalid(rule_name: str, result: object) -> Diagnostic:
        """Lazy builder returned something that is not a Parser.

        Args:
            rule_name: Name of the Lazy rule
            result: The value returned by the builder

        Returns:
            Diagnostic for LAZY_BUILDER_INVALID
        """
        msg = f"Builder for {rule_name} returned {type(result).__name__}, not a Parser"
        return Diagnostic(
            code=DiagnosticCode.LAZY_BUILDER_INVALID,
            message=msg,
            hint="Return a Parser built from primitives and combinators",
            rule_name=rule_name,
        )

    @staticmethod
    def lazy_reentrant_build(rule_name: str) -> Diagnostic:
        """Lazy builder invoked its own parser while building it.

        Args:
            rule_name: Name of the Lazy rule

        Returns:
            Diagnostic for LAZY_REENTRANT_BUILD
        """
        msg = f"Builder for {rule_name} invoked {rule_name} before it was built"
        return Diagnostic(
            code=DiagnosticCode.LAZY_REENTRANT_BUILD,
            message=msg,
            hint="Builders must only construct parsers, not run them",
            rule_name=rule_name,
        )

    @staticmethod
    def map_result_invalid(rule_name: str, result: object) -> Diagnostic:
        """map_ function returned a value outside the payload union.

        Args:
            rule_name: Name of the mapped parser
            result: The value returned by the mapping function

        Returns:
            Diagnostic for MAP_RESULT_INVALID
        """
        msg = (
            f"Mapping function of {rule_name} returned {type(result).__name__}; "
            "expected Atom, ValueList or Node"
        )
        return Diagnostic(
            code=DiagnosticCode.MAP_RESULT_INVALID,
            message=msg,
            hint="Wrap author-defined results in Node(...)",
            rule_name=rule_name,
        )
