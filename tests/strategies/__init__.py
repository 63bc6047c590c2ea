"""Hypothesis strategies for combiparse property-based testing.

Usage:
    from tests.strategies import alphabet_text, parsers, consuming_parsers
"""

from .grammar import (
    ALPHABET,
    alphabet_text,
    consuming_parsers,
    parsers,
    short_literals,
    single_chars,
)

__all__ = [
    "ALPHABET",
    "alphabet_text",
    "consuming_parsers",
    "parsers",
    "short_literals",
    "single_chars",
]
