"""Source renderer: reconstructs infix text from an expression tree."""

from __future__ import annotations

import math

from loxcore.ast import (
    Binary,
    BooleanLiteral,
    Expr,
    Grouping,
    Logical,
    NumberLiteral,
    StringLiteral,
    Unary,
)
from loxcore.tokens import LEXEMES

# Smallest decimal literal that overflows a float to infinity
_OVERFLOW = "1e999"


def render(expr: Expr) -> str:
    """Render *expr* back to source text. Never evaluates.

    Parentheses appear only where the tree has a Grouping node, so a tree built
    by the parser re-parses to the same shape. Nodes are visited with an
    explicit stack, so arbitrarily deep trees render.
    """
    parts: list[str] = []
    pending: list[tuple[Expr, bool]] = [(expr, False)]
    while pending:
        node, ready = pending.pop()
        if isinstance(node, NumberLiteral):
            parts.append(_source_number(node.value))
        elif isinstance(node, BooleanLiteral):
            parts.append("true" if node.value else "false")
        elif isinstance(node, StringLiteral):
            parts.append(f'"{node.value}"')
        elif ready:
            parts.append(_join(node, parts))
        elif isinstance(node, Grouping):
            pending.append((node, True))
            pending.append((node.expression, False))
        elif isinstance(node, Unary):
            pending.append((node, True))
            pending.append((node.operand, False))
        elif isinstance(node, (Binary, Logical)):
            pending.append((node, True))
            pending.append((node.right, False))
            pending.append((node.left, False))
        else:
            raise TypeError(f"not an expression node: {type(node).__name__}")
    return parts.pop()


def _join(node: Grouping | Unary | Binary | Logical, parts: list[str]) -> str:
    if isinstance(node, Grouping):
        return f"({parts.pop()})"
    if isinstance(node, Unary):
        return f"{LEXEMES[node.operator]} {parts.pop()}"
    right = parts.pop()
    left = parts.pop()
    return f"{left} {LEXEMES[node.operator]} {right}"


def _source_number(value: float) -> str:
    # Infinity has no literal form; an overflowing literal scans back to it
    value = float(value)
    if math.isinf(value):
        return _OVERFLOW if value > 0 else "-" + _OVERFLOW
    return format_number(value)


def format_number(value: float) -> str:
    """Format a number for display: integral values drop their '.0'."""
    value = float(value)
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0 and math.copysign(1.0, value) < 0:
        return "-0"
    if value.is_integer():
        return str(int(value))
    return repr(value)
