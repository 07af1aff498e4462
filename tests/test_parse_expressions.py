"""Test expression parsing: precedence, associativity, and node spans."""

from __future__ import annotations

from loxcore.ast import (
    Binary,
    BooleanLiteral,
    Grouping,
    Logical,
    NumberLiteral,
    StringLiteral,
    Unary,
)
from loxcore.parser import parse
from loxcore.tokens import TokenType


class TestPrimary:
    def test_number(self, parse_source):
        expr = parse_source("12.5")
        assert isinstance(expr, NumberLiteral)
        assert expr.value == 12.5

    def test_string(self, parse_source):
        expr = parse_source('"hi"')
        assert isinstance(expr, StringLiteral)
        assert expr.value == "hi"

    def test_booleans(self, parse_source):
        assert parse_source("true") == BooleanLiteral(True, parse_source("true").span)
        expr = parse_source("false")
        assert isinstance(expr, BooleanLiteral)
        assert expr.value is False

    def test_grouping(self, parse_source):
        expr = parse_source("(1)")
        assert isinstance(expr, Grouping)
        assert isinstance(expr.expression, NumberLiteral)


class TestPrecedence:
    def test_factor_binds_tighter_than_term(self, parse_source):
        expr = parse_source("1 + 2 * 3")
        assert isinstance(expr, Binary)
        assert expr.operator == TokenType.PLUS
        assert isinstance(expr.right, Binary)
        assert expr.right.operator == TokenType.STAR

    def test_comparison_over_term(self, parse_source):
        expr = parse_source("1 + 2 < 4")
        assert isinstance(expr, Logical)
        assert expr.operator == TokenType.LESS
        assert isinstance(expr.left, Binary)

    def test_equality_lowest(self, parse_source):
        expr = parse_source("1 < 2 == 3 > 4")
        assert isinstance(expr, Logical)
        assert expr.operator == TokenType.EQUAL_EQUAL
        assert isinstance(expr.left, Logical)
        assert isinstance(expr.right, Logical)

    def test_unary_binds_tightest(self, parse_source):
        expr = parse_source("-1 * 2")
        assert isinstance(expr, Binary)
        assert isinstance(expr.left, Unary)
        assert expr.left.operator == TokenType.MINUS

    def test_nested_unary(self, parse_source):
        expr = parse_source("!!true")
        assert isinstance(expr, Unary)
        assert isinstance(expr.operand, Unary)
        assert isinstance(expr.operand.operand, BooleanLiteral)

    def test_grouping_overrides(self, parse_source):
        expr = parse_source("(1 + 2) * 3")
        assert isinstance(expr, Binary)
        assert expr.operator == TokenType.STAR
        assert isinstance(expr.left, Grouping)


class TestAssociativity:
    def test_subtraction_left_assoc(self, parse_source):
        expr = parse_source("1 - 2 - 3")
        assert isinstance(expr, Binary)
        assert isinstance(expr.left, Binary)
        assert isinstance(expr.right, NumberLiteral)
        assert expr.right.value == 3.0

    def test_division_left_assoc(self, parse_source):
        expr = parse_source("8 / 4 / 2")
        assert isinstance(expr.left, Binary)
        assert expr.left.operator == TokenType.SLASH


class TestSpans:
    def test_binary_span(self, parse_source):
        expr = parse_source("10 + 20")
        assert expr.span.start.column == 1
        assert expr.span.end.column == 8

    def test_grouping_span_includes_parens(self, parse_source):
        expr = parse_source(" (1)")
        assert expr.span.start.column == 2
        assert expr.span.end.column == 5

    def test_unary_span_starts_at_operator(self, parse_source):
        expr = parse_source("- 5")
        assert expr.span.start.column == 1
        assert expr.span.end.column == 4


class TestProgram:
    def test_multiple_expressions(self):
        exprs = parse("1 + 1; 2 * 2; true")
        assert len(exprs) == 3
        assert isinstance(exprs[2], BooleanLiteral)

    def test_trailing_semicolon(self):
        assert len(parse("1;")) == 1

    def test_newline_separated_with_semicolons(self):
        assert len(parse("1;\n2;\n")) == 2

    def test_empty(self):
        assert parse("") == ()

    def test_comments_ignored(self):
        exprs = parse("// header\n1 + 2; // sum\n")
        assert len(exprs) == 1
        assert isinstance(exprs[0], Binary)
