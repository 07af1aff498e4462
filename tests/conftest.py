"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from loxcore.ast import Expr
from loxcore.lexer import tokenize
from loxcore.parser import parse_expression
from loxcore.tokens import Position, Span, Token, TokenType

# Convenience span for hand-built expression trees
S = Span(Position(1, 1, 0), Position(1, 1, 0))


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str, keep_comments: bool = True) -> list[Token]:
        tokens = tokenize(source, keep_comments=keep_comments)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses a single expression."""

    def _parse(source: str) -> Expr:
        return parse_expression(source)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str | float]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"

