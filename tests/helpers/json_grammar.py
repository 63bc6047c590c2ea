"""Small JSON-like grammar used as a consumer of the combinator API.

Covers integers, double-quoted strings without escapes, and arrays that
nest through a Lazy reference to ``value``:

    value  ::= number | string | array
    number ::= "-"? digit+
    string ::= '"' (any character except '"')* '"'
    array  ::= "[" ws (value ws ("," ws value ws)*)? "]"
"""

from __future__ import annotations

from typing import Any

from combiparse import (
    Atom,
    Node,
    Parser,
    ValueList,
    between,
    char,
    choice,
    lazy,
    many0,
    many1,
    map_,
    optional,
    satisfy,
    sep_by,
    seq,
    skip_spaces,
    token,
)

__all__ = ["build_json_grammar"]


def build_json_grammar() -> tuple[Parser[Any], dict[str, int]]:
    """Build the grammar.

    Returns:
        (value parser, counters) where counters["value_builds"] records how
        many times the Lazy builder for ``value`` ran.
    """
    counters = {"value_builds": 0}

    digit = satisfy(str.isdigit, "digit")
    number = map_(
        seq(optional(char("-")), many1(digit)),
        lambda v: Node(int(v.joined())),
    ).named("number")

    string = map_(
        between(char('"'), many0(satisfy(lambda c: c != '"', "string character")), char('"')),
        lambda v: Atom(v.joined()),
    ).named("string")

    def build_value() -> Parser[Any]:
        counters["value_builds"] += 1
        return value

    value_ref = lazy(build_value, name="value")

    ws = skip_spaces()
    elements = sep_by(token(value_ref), token(char(",")))
    array: Parser[ValueList] = between(token(char("[")), elements, char("]")).named("array")

    value = choice(number, string, array).named("value")

    return between(ws, value, ws).named("json"), counters
