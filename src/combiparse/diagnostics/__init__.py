"""Diagnostic system for combiparse errors.

Provides structured error diagnostics with codes, spans and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import CodeCategory, Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    CombiparseError,
    DeadlineExceededError,
    DepthLimitExceededError,
    EndOfInputError,
    GrammarDefinitionError,
    ParseAbortedError,
    ParseCancelledError,
    ParseFailedError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "CodeCategory",
    "CombiparseError",
    "DeadlineExceededError",
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "EndOfInputError",
    "ErrorTemplate",
    "GrammarDefinitionError",
    "OutputFormat",
    "ParseAbortedError",
    "ParseCancelledError",
    "ParseFailedError",
    "SourceSpan",
]
