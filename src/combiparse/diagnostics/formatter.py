"""Rendering of diagnostics and parse failures.

Three output styles share one Diagnostic model:

    rust     multi-line, compiler style, optionally with a source excerpt
    simple   one line per diagnostic, for logs
    json     one JSON object per diagnostic, for tooling

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from combiparse.outcome import Failure

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]

_ANSI_RED = "\033[1;31m"
_ANSI_YELLOW = "\033[1;33m"
_ANSI_RESET = "\033[0m"


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"
    SIMPLE = "simple"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Render Diagnostic objects (and Failures with their source).

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate message and hint text to max_content_length
        color: Wrap the severity label in ANSI color codes (rust style only)
        max_content_length: Maximum message length when sanitizing

    Example:
        >>> from combiparse.diagnostics import ErrorTemplate
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.unexpected_char("']'", ",")
        >>> print(formatter.format(diagnostic))
        error[UNEXPECTED_CHAR]: Expected ']' but found ','
          = expected: ']'

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        UNEXPECTED_CHAR: Expected ']' but found ','
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic in the configured style."""
        match self.output_format:
            case OutputFormat.RUST:
                return "\n".join(self._rust_lines(diagnostic, excerpt=()))
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return json.dumps(self._json_fields(diagnostic), ensure_ascii=False)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def format_failure(
        self, failure: Failure, source: str, rule_name: str | None = None
    ) -> str:
        """Format a parse Failure against the text it was produced from.

        The rust style adds the offending source line with a caret under the
        failure column. The json style adds the number of alternatives tried
        when the failure comes from an ordered choice.

        Args:
            failure: Failure returned by a parser
            source: The text that was parsed
            rule_name: Optional name of the top-level parser

        Example:
            >>> from combiparse import char, run
            >>> source = "ab"
            >>> failure = run(char("a"), source)
            >>> print(DiagnosticFormatter().format_failure(failure, source))
            error[EXPECTED_END_OF_INPUT]: Expected end of input but found 'b'
              --> line 1, column 2
               |
             1 | ab
               |  ^
              = expected: end of input
              = help: Pass partial=True to accept a prefix of the input
        """
        diagnostic = failure.to_diagnostic(source, rule_name=rule_name)
        match self.output_format:
            case OutputFormat.RUST:
                excerpt = self._excerpt(diagnostic, source)
                return "\n".join(self._rust_lines(diagnostic, excerpt=excerpt))
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                fields = self._json_fields(diagnostic)
                if failure.causes:
                    fields["causes"] = len(failure.causes)
                return json.dumps(fields, ensure_ascii=False)

    def _severity_label(self, diagnostic: Diagnostic) -> str:
        severity = "warning" if diagnostic.severity == "warning" else "error"
        if not self.color:
            return severity
        color = _ANSI_YELLOW if severity == "warning" else _ANSI_RED
        return f"{color}{severity}{_ANSI_RESET}"

    def _rust_lines(self, diagnostic: Diagnostic, excerpt: Iterable[str]) -> list[str]:
        """Rust compiler style.

        Example output:
            error[UNEXPECTED_LITERAL]: Expected 'true' but found 'tru!'
              --> line 1, column 1
              = rule: boolean
              = expected: 'true'
        """
        message = self._maybe_sanitize(diagnostic.message)
        lines = [f"{self._severity_label(diagnostic)}[{diagnostic.code.name}]: {message}"]

        if diagnostic.span is not None:
            lines.append(f"  --> line {diagnostic.span.line}, column {diagnostic.span.column}")
        lines.extend(excerpt)
        if diagnostic.rule_name:
            lines.append(f"  = rule: {diagnostic.rule_name}")
        if diagnostic.expected:
            lines.append(f"  = expected: {', '.join(diagnostic.expected)}")
        if diagnostic.hint:
            lines.append(f"  = help: {self._maybe_sanitize(diagnostic.hint)}")
        return lines

    @staticmethod
    def _excerpt(diagnostic: Diagnostic, source: str) -> list[str]:
        """Source line under a numbered gutter, with a caret at the column."""
        if diagnostic.span is None:
            return []
        line_no, column = diagnostic.span.line, diagnostic.span.column
        text = source.split("\n")[line_no - 1]
        gutter = " " * (len(str(line_no)) + 2)
        return [
            f"{gutter}|",
            f" {line_no} | {text}",
            f"{gutter}| {' ' * (column - 1)}^",
        ]

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Single line: ``CODE at L:C: message`` or ``CODE: message``."""
        message = self._maybe_sanitize(diagnostic.message)
        if diagnostic.span is not None:
            line, column = diagnostic.span.line, diagnostic.span.column
            return f"{diagnostic.code.name} at {line}:{column}: {message}"
        return f"{diagnostic.code.name}: {message}"

    def _json_fields(self, diagnostic: Diagnostic) -> dict[str, str | int | list[str]]:
        data: dict[str, str | int | list[str]] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }
        if diagnostic.span is not None:
            data |= {
                "line": diagnostic.span.line,
                "column": diagnostic.span.column,
                "start": diagnostic.span.start,
                "end": diagnostic.span.end,
            }
        if diagnostic.rule_name:
            data["rule_name"] = diagnostic.rule_name
        if diagnostic.expected:
            data["expected"] = list(diagnostic.expected)
        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)
        return data

    def _maybe_sanitize(self, text: str) -> str:
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
