"""End-to-end tests: a small JSON-like grammar built from the public API."""

from __future__ import annotations

import pytest

from combiparse import DepthLimitExceededError, Failure, FailureKind, ParserRunner, run
from tests.helpers.json_grammar import build_json_grammar


class TestJsonGrammar:
    """Parse numbers, strings and nested arrays."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("123", 123),
            ("-7", -7),
            ('"Hello World"', "Hello World"),
            ('""', ""),
            ('[ 1, 2, "Hello World" ]', [1, 2, "Hello World"]),
            ("[ 1, 2, [ 1, 3 ] ]", [1, 2, [1, 3]]),
            ("[ ]", []),
            ("[]", []),
            ("  [1,[2,[3]]]  ", [1, [2, [3]]]),
        ],
    )
    def test_accepts(self, source: str, expected: object) -> None:
        """Valid documents unwrap to plain Python data."""
        parser, _ = build_json_grammar()

        result = run(parser, source)

        assert not isinstance(result, Failure), result
        assert result.unwrap() == expected

    @pytest.mark.parametrize(
        "source",
        ["[ 1, ]", "[1 2]", "[", '"open', "", "12a", "[1,,2]"],
    )
    def test_rejects(self, source: str) -> None:
        """Malformed documents produce a Failure."""
        parser, _ = build_json_grammar()

        assert isinstance(run(parser, source), Failure)

    def test_trailing_comma_position(self) -> None:
        """The failure for a trailing comma points at the comma."""
        parser, _ = build_json_grammar()

        result = run(parser, "[ 1, ]")

        assert isinstance(result, Failure)
        assert result.position == 3
        assert "']'" in result.expected

    def test_trailing_garbage(self) -> None:
        """Input after a complete value is rejected unless partial=True."""
        parser, _ = build_json_grammar()

        result = run(parser, "12a")
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.EXPECTED_END_OF_INPUT

        assert run(parser, "12a", partial=True).unwrap() == 12  # type: ignore[union-attr]

    def test_value_rule_built_once(self) -> None:
        """The recursive value rule is constructed exactly once across parses."""
        parser, counters = build_json_grammar()

        for source in ("[1]", "[[2]]", "[3, [4]]"):
            assert not isinstance(run(parser, source), Failure)

        assert counters["value_builds"] == 1

    def test_deep_nesting_aborts(self) -> None:
        """Nesting past max_depth aborts instead of reporting a missing "]".

        sep_by would read a refused element as an empty list, so the limit
        must surface as an exception pointing at the refused level.
        """
        parser, _ = build_json_grammar()
        depth = 200
        source = "[" * depth + "]" * depth

        with pytest.raises(DepthLimitExceededError) as exc_info:
            ParserRunner(max_depth=10).run(parser, source)

        assert exc_info.value.position == 11
        assert exc_info.value.max_depth == 10

    def test_deep_nesting_with_default_limit_aborts(self) -> None:
        """The default limit stops runaway nesting before RecursionError."""
        parser, _ = build_json_grammar()
        source = "[" * 200 + "]" * 200

        with pytest.raises(DepthLimitExceededError):
            run(parser, source)

    def test_nesting_within_limit(self) -> None:
        """Nesting below the configured depth parses."""
        parser, _ = build_json_grammar()
        depth = 20
        source = "[" * depth + "]" * depth

        result = ParserRunner(max_depth=30).run(parser, source)

        assert not isinstance(result, Failure)

    def test_error_report(self) -> None:
        """Failures format with line and column for humans."""
        parser, _ = build_json_grammar()
        source = "[ 1,\n  2, ]"

        result = run(parser, source)

        assert isinstance(result, Failure)
        assert result.format_error(source).startswith("2:")
