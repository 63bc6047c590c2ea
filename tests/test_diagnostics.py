"""Tests for diagnostics: codes, spans, templates, formatter and exceptions."""

from __future__ import annotations

import json

import pytest

from combiparse import (
    CombiparseError,
    DeadlineExceededError,
    DepthLimitExceededError,
    EndOfInputError,
    GrammarDefinitionError,
    ParseAbortedError,
    ParseCancelledError,
    ParseFailedError,
)
from combiparse.diagnostics import (
    CodeCategory,
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    ErrorTemplate,
    OutputFormat,
    SourceSpan,
)
from combiparse.outcome import Failure, FailureKind

# ============================================================================
# SOURCE SPAN
# ============================================================================


class TestSourceSpan:
    """Test SourceSpan validation."""

    def test_valid_span(self) -> None:
        """A well-formed span is accepted."""
        span = SourceSpan(start=3, end=4, line=1, column=4)

        assert span.end - span.start == 1

    @pytest.mark.parametrize(
        ("start", "end", "line", "column", "match"),
        [
            (-1, 0, 1, 1, "start"),
            (5, 4, 1, 1, "end"),
            (0, 0, 0, 1, "line"),
            (0, 0, 1, 0, "column"),
        ],
    )
    def test_invalid_span(self, start: int, end: int, line: int, column: int, match: str) -> None:
        """Invalid spans raise ValueError naming the bad field."""
        with pytest.raises(ValueError, match=match):
            SourceSpan(start=start, end=end, line=line, column=column)


# ============================================================================
# TEMPLATES
# ============================================================================


class TestErrorTemplate:
    """Test message templates."""

    def test_unexpected_char(self) -> None:
        """unexpected_char() names what was expected and found."""
        diagnostic = ErrorTemplate.unexpected_char("digit", "x")

        assert diagnostic.code is DiagnosticCode.UNEXPECTED_CHAR
        assert diagnostic.message == "Expected digit but found 'x'"
        assert diagnostic.expected == ("digit",)

    def test_unexpected_literal_quotes_expected(self) -> None:
        """unexpected_literal() reports the literal in repr form."""
        diagnostic = ErrorTemplate.unexpected_literal("true", "tru!")

        assert diagnostic.message == "Expected 'true' but found 'tru!'"
        assert diagnostic.expected == ("'true'",)

    def test_end_of_input(self) -> None:
        """end_of_input() carries a hint."""
        diagnostic = ErrorTemplate.end_of_input("']'")

        assert diagnostic.message == "Unexpected end of input, expected ']'"
        assert diagnostic.hint is not None

    def test_source_too_large_uses_separators(self) -> None:
        """Sizes are formatted with thousands separators."""
        diagnostic = ErrorTemplate.source_too_large(2_000_000, 1_000_000)

        assert "2,000,000" in diagnostic.message
        assert "1,000,000" in diagnostic.message

    def test_lazy_builder_failed_names_exception(self) -> None:
        """The builder failure message includes the exception type."""
        diagnostic = ErrorTemplate.lazy_builder_failed("expr", ValueError("bad"))

        assert diagnostic.message == "Builder for expr failed: ValueError: bad"
        assert diagnostic.rule_name == "expr"

    def test_composite_failure_hints(self) -> None:
        """Hints for composite failures are built by the template class."""
        assert ErrorTemplate.sequence_element_hint(2) == "Sequence element 2 failed"
        assert ErrorTemplate.alternatives_hint(3) == "None of 3 alternatives matched"

    def test_nesting_depth_exceeded(self) -> None:
        """The depth message names the limit, the rule and the position."""
        diagnostic = ErrorTemplate.nesting_depth_exceeded(8, "value", 9)

        assert diagnostic.code is DiagnosticCode.NESTING_DEPTH_EXCEEDED
        assert diagnostic.message == "Maximum nesting depth (8) exceeded in value at position 9"
        assert diagnostic.rule_name == "value"

    def test_every_failure_kind_has_a_code(self) -> None:
        """Failure kinds and parse-failure codes line up one to one."""
        parse_codes = {code for code in DiagnosticCode if 1000 <= code.value < 2000}

        assert {kind.code for kind in FailureKind} == parse_codes

    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (DiagnosticCode.UNEXPECTED_CHAR, CodeCategory.PARSE),
            (DiagnosticCode.NESTING_DEPTH_EXCEEDED, CodeCategory.ABORT),
            (DiagnosticCode.PARSE_CANCELLED, CodeCategory.ABORT),
            (DiagnosticCode.LAZY_REENTRANT_BUILD, CodeCategory.GRAMMAR),
        ],
    )
    def test_code_category(self, code: DiagnosticCode, category: CodeCategory) -> None:
        """The thousands digit selects the category."""
        assert code.category is category


# ============================================================================
# FORMATTER
# ============================================================================


def _positioned() -> Diagnostic:
    failure = Failure(
        FailureKind.UNEXPECTED_CHAR, 5, "Expected ']' but found ','", expected=("']'",)
    )
    return failure.to_diagnostic("[1, 2, 3", rule_name="array")


class TestDiagnosticFormatter:
    """Test output formats."""

    def test_rust_format(self) -> None:
        """Rust style shows code, location, rule and expected set."""
        text = DiagnosticFormatter().format(_positioned())

        assert text.splitlines() == [
            "error[UNEXPECTED_CHAR]: Expected ']' but found ','",
            "  --> line 1, column 6",
            "  = rule: array",
            "  = expected: ']'",
        ]

    def test_rust_format_includes_hint(self) -> None:
        """Hints are rendered as help lines."""
        text = DiagnosticFormatter().format(ErrorTemplate.end_of_input("x"))

        assert "  = help: The input ends before the construct is complete" in text

    def test_simple_format(self) -> None:
        """Simple style is one line with line:column."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)

        assert formatter.format(_positioned()) == (
            "UNEXPECTED_CHAR at 1:6: Expected ']' but found ','"
        )

    def test_simple_format_without_span(self) -> None:
        """Diagnostics without a span omit the location."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)

        assert formatter.format(ErrorTemplate.parse_cancelled(4)) == (
            "PARSE_CANCELLED: Parse cancelled at position 4"
        )

    def test_json_format(self) -> None:
        """JSON style is machine-readable."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)

        data = json.loads(formatter.format(_positioned()))

        assert data["code"] == "UNEXPECTED_CHAR"
        assert data["code_value"] == 1002
        assert data["line"] == 1
        assert data["column"] == 6
        assert data["start"] == 5
        assert data["end"] == 6
        assert data["rule_name"] == "array"
        assert data["expected"] == ["']'"]

    def test_sanitize_truncates(self) -> None:
        """sanitize=True truncates long messages."""
        formatter = DiagnosticFormatter(
            output_format=OutputFormat.SIMPLE, sanitize=True, max_content_length=10
        )
        diagnostic = Diagnostic(code=DiagnosticCode.NOT_EXPECTED, message="x" * 50)

        assert formatter.format(diagnostic) == "NOT_EXPECTED: " + "x" * 10 + "..."

    def test_color(self) -> None:
        """color=True wraps the severity in ANSI codes."""
        formatter = DiagnosticFormatter(color=True)

        assert formatter.format(_positioned()).startswith("\033[1;31merror\033[0m")

    def test_format_all(self) -> None:
        """format_all() separates diagnostics with blank lines."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        first = ErrorTemplate.parse_cancelled(1)
        second = ErrorTemplate.parse_cancelled(2)

        assert formatter.format_all([first, second]).split("\n\n") == [
            formatter.format(first),
            formatter.format(second),
        ]

    def test_format_failure_rust_excerpt(self) -> None:
        """format_failure() shows the offending line with a caret."""
        source = "[1,\n 2 x]"
        failure = Failure(FailureKind.UNEXPECTED_CHAR, 7, "Expected ']' but found 'x'")

        text = DiagnosticFormatter().format_failure(failure, source, rule_name="array")

        assert text.splitlines() == [
            "error[UNEXPECTED_CHAR]: Expected ']' but found 'x'",
            "  --> line 2, column 4",
            "   |",
            " 2 |  2 x]",
            "   |    ^",
            "  = rule: array",
        ]

    def test_format_failure_json_counts_causes(self) -> None:
        """The json style of format_failure() reports how many causes were combined."""
        causes = (
            Failure(FailureKind.UNEXPECTED_CHAR, 0, "a"),
            Failure(FailureKind.UNEXPECTED_CHAR, 0, "b"),
        )
        failure = Failure(FailureKind.ALL_ALTERNATIVES_FAILED, 0, "b", causes=causes)
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)

        data = json.loads(formatter.format_failure(failure, "z"))

        assert data["causes"] == 2
        assert data["hint"] == "None of 2 alternatives matched"

    def test_format_failure_simple(self) -> None:
        """The simple style of format_failure() matches format() on the diagnostic."""
        failure = Failure(FailureKind.UNEXPECTED_CHAR, 1, "bad")
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)

        assert formatter.format_failure(failure, "ab") == "UNEXPECTED_CHAR at 1:2: bad"

    def test_diagnostic_format_error_delegates(self) -> None:
        """Diagnostic.format_error() uses the default formatter."""
        diagnostic = _positioned()

        assert diagnostic.format_error() == DiagnosticFormatter().format(diagnostic)
        assert str(diagnostic) == diagnostic.message


# ============================================================================
# EXCEPTIONS
# ============================================================================


class TestExceptions:
    """Test the exception hierarchy."""

    def test_hierarchy(self) -> None:
        """All library errors except EndOfInputError share CombiparseError."""
        for error_type in (
            GrammarDefinitionError,
            ParseFailedError,
            ParseAbortedError,
            DeadlineExceededError,
            ParseCancelledError,
            DepthLimitExceededError,
        ):
            assert issubclass(error_type, CombiparseError)

        assert issubclass(DepthLimitExceededError, ParseAbortedError)

        assert issubclass(DeadlineExceededError, TimeoutError)
        assert issubclass(EndOfInputError, EOFError)

    def test_diagnostic_message(self) -> None:
        """A Diagnostic argument becomes the message and is kept."""
        diagnostic = ErrorTemplate.lazy_reentrant_build("expr")
        error = GrammarDefinitionError(diagnostic)

        assert error.diagnostic is diagnostic
        assert str(error) == diagnostic.message

    def test_plain_message(self) -> None:
        """A plain string message has no diagnostic."""
        error = CombiparseError("plain")

        assert error.diagnostic is None
        assert str(error) == "plain"

    def test_aborted_position(self) -> None:
        """Abort errors record the position."""
        error = ParseCancelledError(ErrorTemplate.parse_cancelled(9), position=9)

        assert error.position == 9
