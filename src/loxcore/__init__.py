"""Lox scripting language front end: lexer, expression trees, evaluator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loxcore.ast import Literal

__version__ = "0.1.0"


def run(source: str) -> tuple[Literal, ...]:
    """Scan, parse, and evaluate Lox source, returning one value per expression."""
    from loxcore.eval import evaluate
    from loxcore.parser import parse

    return tuple(evaluate(expr, source) for expr in parse(source))
