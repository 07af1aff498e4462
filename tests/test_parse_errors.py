"""Tests for parser error messages and positions."""

from __future__ import annotations

import pytest

from loxcore.errors import ParseError
from loxcore.parser import MAX_NESTING, parse, parse_expression


class TestMissingParts:
    def test_missing_rparen(self):
        with pytest.raises(ParseError, match="expected '\\)' after expression"):
            parse("(1 + 2")

    def test_missing_operand(self):
        with pytest.raises(ParseError, match="expected expression, found end of input"):
            parse("1 +")

    def test_empty_group(self):
        with pytest.raises(ParseError, match="expected expression, found '\\)'"):
            parse("()")

    def test_empty_expression(self):
        with pytest.raises(ParseError, match="expected expression"):
            parse_expression("")


class TestUnsupported:
    def test_identifier(self):
        with pytest.raises(ParseError, match="variables are not supported: 'x'"):
            parse("x + 1")

    def test_nil(self):
        with pytest.raises(ParseError, match="'nil' is not supported"):
            parse("nil")

    def test_statement_keyword(self):
        with pytest.raises(ParseError, match="expected expression, found 'var'"):
            parse("var x = 1;")

    def test_assignment(self):
        with pytest.raises(ParseError, match="expected ';' after expression, found '='"):
            parse("1 = 2")


class TestTrailingInput:
    def test_two_expressions_without_separator(self):
        with pytest.raises(ParseError, match="expected ';'"):
            parse("1 2")

    def test_parse_expression_rejects_second(self):
        with pytest.raises(ParseError, match="unexpected '3' after expression"):
            parse_expression("1 + 2; 3")


class TestPositions:
    def test_error_span(self):
        with pytest.raises(ParseError) as exc_info:
            parse("1 +\n  foo")
        span = exc_info.value.span
        assert span.start.line == 2
        assert span.start.column == 3
        assert span.end.column == 6

    def test_eof_error_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse("(1")
        assert exc_info.value.span.start.column == 3


class TestNesting:
    def test_long_chains_are_not_nesting(self):
        (expr,) = parse("+".join(["1"] * 3000))
        assert expr.span.end.column == 2 * 3000

    def test_parens_at_limit(self):
        parse("(" * MAX_NESTING + "1" + ")" * MAX_NESTING)

    def test_parens_past_limit(self):
        depth = MAX_NESTING + 1
        with pytest.raises(ParseError, match="nesting depth limit") as exc_info:
            parse("(" * depth + "1" + ")" * depth)
        assert exc_info.value.span.start.column == depth

    def test_prefix_operators_past_limit(self):
        with pytest.raises(ParseError, match="nesting depth limit"):
            parse("-" * (MAX_NESTING + 1) + "1")

    def test_siblings_do_not_accumulate(self):
        group = "(" * 60 + "1" + ")" * 60
        parse(f"{group} + {group} + {group}")
