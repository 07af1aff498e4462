"""Expression evaluator: reduces an expression tree to a literal value."""

from __future__ import annotations

import math
import operator
from collections.abc import Callable

from loxcore.ast import (
    Binary,
    BooleanLiteral,
    Expr,
    Grouping,
    Literal,
    Logical,
    NumberLiteral,
    StringLiteral,
    Unary,
)
from loxcore.errors import EvalError
from loxcore.render import format_number
from loxcore.tokens import LEXEMES, TokenType


def _divide(a: float, b: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity, 0/0 is NaN."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


_ARITHMETIC: dict[TokenType, Callable[[float, float], float]] = {
    TokenType.PLUS: operator.add,
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
    TokenType.SLASH: _divide,
}

_COMPARISON: dict[TokenType, Callable[[float, float], bool]] = {
    TokenType.EQUAL_EQUAL: operator.eq,
    TokenType.BANG_EQUAL: operator.ne,
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
}


def evaluate(expr: Expr, source: str = "") -> Literal:
    """Evaluate *expr* to a NumberLiteral, BooleanLiteral or StringLiteral.

    Children are evaluated before their parent applies its operator. Operand
    type mismatches raise EvalError; *source* is only used to quote the
    offending code in the error message.

    The walk uses an explicit stack, so tree depth is bounded only by memory.
    """
    values: list[Literal] = []
    pending: list[tuple[Expr, bool]] = [(expr, False)]
    while pending:
        node, ready = pending.pop()
        if isinstance(node, (NumberLiteral, BooleanLiteral, StringLiteral)):
            values.append(node)
        elif isinstance(node, Grouping):
            pending.append((node.expression, False))
        elif ready:
            values.append(_apply(node, values, source))
        elif isinstance(node, Unary):
            pending.append((node, True))
            pending.append((node.operand, False))
        elif isinstance(node, (Binary, Logical)):
            pending.append((node, True))
            pending.append((node.right, False))
            pending.append((node.left, False))
        else:
            raise TypeError(f"not an expression node: {type(node).__name__}")
    return values.pop()


def _apply(expr: Unary | Binary | Logical, values: list[Literal], source: str) -> Literal:
    if isinstance(expr, Unary):
        return _eval_unary(expr, values.pop(), source)

    right = values.pop()
    left = values.pop()
    if isinstance(left, NumberLiteral) and isinstance(right, NumberLiteral):
        if isinstance(expr, Binary):
            result = _ARITHMETIC[expr.operator](left.value, right.value)
            return NumberLiteral(float(result), expr.span)
        return BooleanLiteral(_COMPARISON[expr.operator](left.value, right.value), expr.span)
    raise _mismatch(expr, source, left, right)


def _eval_unary(expr: Unary, operand: Literal, source: str) -> Literal:
    if expr.operator == TokenType.MINUS and isinstance(operand, NumberLiteral):
        return NumberLiteral(-operand.value, expr.span)
    if expr.operator == TokenType.BANG and isinstance(operand, BooleanLiteral):
        return BooleanLiteral(not operand.value, expr.span)
    raise _mismatch(expr, source, operand)


def _mismatch(expr: Unary | Binary | Logical, source: str, *operands: Literal) -> EvalError:
    symbol = LEXEMES[expr.operator]
    types = tuple(type_name(v) for v in operands)
    if isinstance(expr, Unary):
        wanted = "a number" if expr.operator == TokenType.MINUS else "a boolean"
        message = f"operand of '{symbol}' must be {wanted}, got {types[0]}"
    else:
        message = f"operands of '{symbol}' must be numbers, got {types[0]} and {types[1]}"
    return EvalError(message, expr.span, source, symbol, types)


def type_name(value: Literal) -> str:
    """User-facing name of a value's type."""
    if isinstance(value, NumberLiteral):
        return "number"
    if isinstance(value, BooleanLiteral):
        return "boolean"
    return "string"


def stringify(value: Literal) -> str:
    """Display form of a value: no quotes on strings, no '.0' on integral numbers."""
    if isinstance(value, NumberLiteral):
        return format_number(value.value)
    if isinstance(value, BooleanLiteral):
        return "true" if value.value else "false"
    return value.value
