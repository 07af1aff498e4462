"""--tokens and --ast developer dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

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
from loxcore.render import format_number
from loxcore.tokens import LEXEMES, Token, TokenType

_PAYLOAD = frozenset(
    {TokenType.IDENTIFIER, TokenType.STRING, TokenType.NUMBER, TokenType.LINE_COMMENT}
)


def format_token(tok: Token) -> str:
    """One-line developer form of a token, e.g. ``1:5 NUMBER(10)``."""
    where = f"{tok.span.start.line}:{tok.span.start.column}"
    if tok.type == TokenType.NUMBER:
        return f"{where} NUMBER({format_number(float(tok.value))})"
    if tok.type in _PAYLOAD:
        return f"{where} {tok.type.name}({tok.value!r})"
    return f"{where} {tok.type.name}"


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one token per line to *file*."""
    for tok in tokens:
        file.write(format_token(tok) + "\n")


def dump_ast(expr: Expr, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable expression tree to *file*."""
    _dump(expr, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump(expr: Expr, depth: int, f: TextIO) -> None:
    pending: list[tuple[Expr, int]] = [(expr, depth)]
    while pending:
        node, level = pending.pop()
        pad = _indent(level)
        if isinstance(node, NumberLiteral):
            f.write(f"{pad}Number {format_number(node.value)}\n")
        elif isinstance(node, BooleanLiteral):
            f.write(f"{pad}Boolean {'true' if node.value else 'false'}\n")
        elif isinstance(node, StringLiteral):
            f.write(f"{pad}String {node.value!r}\n")
        elif isinstance(node, Grouping):
            f.write(f"{pad}Grouping\n")
            pending.append((node.expression, level + 1))
        elif isinstance(node, Unary):
            f.write(f"{pad}Unary {LEXEMES[node.operator]}\n")
            pending.append((node.operand, level + 1))
        elif isinstance(node, (Binary, Logical)):
            kind = "Binary" if isinstance(node, Binary) else "Logical"
            f.write(f"{pad}{kind} {LEXEMES[node.operator]}\n")
            # Right first so the left child is written first
            pending.append((node.right, level + 1))
            pending.append((node.left, level + 1))
