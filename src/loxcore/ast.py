"""Expression node types.

Nodes are immutable and own their children. Evaluation never changes a tree;
it builds new literal nodes instead.
"""

from __future__ import annotations

from dataclasses import dataclass

from loxcore.tokens import Span, TokenType

ARITHMETIC_OPERATORS = frozenset(
    {TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH}
)

COMPARISON_OPERATORS = frozenset(
    {
        TokenType.EQUAL_EQUAL,
        TokenType.BANG_EQUAL,
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    }
)

UNARY_OPERATORS = frozenset({TokenType.MINUS, TokenType.BANG})


def _check_operator(node: str, operator: TokenType, allowed: frozenset[TokenType]) -> None:
    if operator not in allowed:
        raise ValueError(f"{node} does not support operator {operator.name}")


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    """Double-precision number."""

    value: float
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class BooleanLiteral:
    value: bool
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """String literal (no escape processing)."""

    value: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Grouping:
    """Parenthesized expression. Transparent to evaluation."""

    expression: Expr
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Unary:
    """Prefix operator: - (negation) or ! (logical not)."""

    operator: TokenType
    operand: Expr
    span: Span | None = None

    def __post_init__(self) -> None:
        _check_operator("Unary", self.operator, UNARY_OPERATORS)


@dataclass(frozen=True, slots=True)
class Binary:
    """Arithmetic infix operator: + - * /."""

    left: Expr
    operator: TokenType
    right: Expr
    span: Span | None = None

    def __post_init__(self) -> None:
        _check_operator("Binary", self.operator, ARITHMETIC_OPERATORS)


@dataclass(frozen=True, slots=True)
class Logical:
    """Comparison infix operator: == != > >= < <=. Produces a boolean."""

    left: Expr
    operator: TokenType
    right: Expr
    span: Span | None = None

    def __post_init__(self) -> None:
        _check_operator("Logical", self.operator, COMPARISON_OPERATORS)


Literal = NumberLiteral | BooleanLiteral | StringLiteral

Expr = Binary | Logical | Unary | Grouping | Literal
