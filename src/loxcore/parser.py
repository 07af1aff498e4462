"""Lox expression parser: converts a token stream into expression trees."""

from __future__ import annotations

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
from loxcore.errors import ParseError
from loxcore.lexer import tokenize
from loxcore.tokens import LEXEMES, Position, Span, Token, TokenType

_EQUALITY = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
_COMPARISON = (
    TokenType.GREATER,
    TokenType.GREATER_EQUAL,
    TokenType.LESS,
    TokenType.LESS_EQUAL,
)
_TERM = (TokenType.MINUS, TokenType.PLUS)
_FACTOR = (TokenType.SLASH, TokenType.STAR)
_UNARY = (TokenType.BANG, TokenType.MINUS)

# Open parentheses plus prefix operators allowed around a single operand
MAX_NESTING = 100


class Parser:
    """Recursive descent parser for Lox expressions.

    All binary levels are left-associative. Comments are dropped before
    parsing. Binary chains are built in loops and may be any length; nesting
    through '(' and prefix operators is limited to MAX_NESTING.
    """

    def __init__(self, tokens: list[Token], source: str) -> None:
        self._tokens = [t for t in tokens if t.type != TokenType.LINE_COMMENT]
        self._source = source
        self._pos = 0
        self._depth = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return self._tokens[-1]  # EOF

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _advance(self) -> Token:
        tok = self._peek()
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _expect(self, tt: TokenType, message: str) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._error(message, tok.span)
        return self._advance()

    def _error(self, message: str, span: Span) -> ParseError:
        return ParseError(message, span, self._source)

    def _nest(self, tok: Token) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING:
            raise self._error(
                f"nesting depth limit ({MAX_NESTING}) exceeded", tok.span
            )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self) -> tuple[Expr, ...]:
        """Parse a sequence of expressions, each optionally ended by ';'."""
        exprs: list[Expr] = []
        while not self._at_eof():
            exprs.append(self._expression())
            if self._at(TokenType.SEMICOLON):
                self._advance()
            elif not self._at_eof():
                raise self._error(
                    f"expected ';' after expression, found {_describe(self._peek())}",
                    self._peek().span,
                )
        return tuple(exprs)

    def parse_expression(self) -> Expr:
        """Parse exactly one expression (optional trailing ';') up to EOF."""
        if self._at_eof():
            raise self._error("expected expression, found end of input", self._peek().span)
        expr = self._expression()
        if self._at(TokenType.SEMICOLON):
            self._advance()
        if not self._at_eof():
            raise self._error(
                f"unexpected {_describe(self._peek())} after expression", self._peek().span
            )
        return expr

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _expression(self) -> Expr:
        return self._equality()

    def _equality(self) -> Expr:
        expr = self._comparison()
        while self._at(*_EQUALITY):
            op = self._advance()
            right = self._comparison()
            expr = Logical(expr, op.type, right, _join(expr, right))
        return expr

    def _comparison(self) -> Expr:
        expr = self._term()
        while self._at(*_COMPARISON):
            op = self._advance()
            right = self._term()
            expr = Logical(expr, op.type, right, _join(expr, right))
        return expr

    def _term(self) -> Expr:
        expr = self._factor()
        while self._at(*_TERM):
            op = self._advance()
            right = self._factor()
            expr = Binary(expr, op.type, right, _join(expr, right))
        return expr

    def _factor(self) -> Expr:
        expr = self._unary()
        while self._at(*_FACTOR):
            op = self._advance()
            right = self._unary()
            expr = Binary(expr, op.type, right, _join(expr, right))
        return expr

    def _unary(self) -> Expr:
        if self._at(*_UNARY):
            op = self._advance()
            self._nest(op)
            operand = self._unary()
            self._depth -= 1
            return Unary(op.type, operand, Span(op.span.start, _end(operand, op)))
        return self._primary()

    def _primary(self) -> Expr:
        tok = self._peek()

        if tok.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(float(tok.value), tok.span)

        if tok.type == TokenType.STRING:
            self._advance()
            return StringLiteral(str(tok.value), tok.span)

        if tok.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return BooleanLiteral(tok.type == TokenType.TRUE, tok.span)

        if tok.type == TokenType.LEFT_PAREN:
            self._advance()
            self._nest(tok)
            inner = self._expression()
            self._depth -= 1
            close = self._expect(TokenType.RIGHT_PAREN, "expected ')' after expression")
            return Grouping(inner, Span(tok.span.start, close.span.end))

        if tok.type == TokenType.IDENTIFIER:
            raise self._error(f"variables are not supported: '{tok.value}'", tok.span)

        if tok.type == TokenType.NIL:
            raise self._error("'nil' is not supported in expressions", tok.span)

        raise self._error(f"expected expression, found {_describe(tok)}", tok.span)


def _describe(tok: Token) -> str:
    if tok.type == TokenType.EOF:
        return "end of input"
    if tok.type in LEXEMES:
        return f"'{LEXEMES[tok.type]}'"
    return f"'{tok.raw}'"


def _end(expr: Expr, fallback: Token) -> Position:
    if expr.span is not None:
        return expr.span.end
    return fallback.span.end


def _join(left: Expr, right: Expr) -> Span | None:
    if left.span is None or right.span is None:
        return None
    return Span(left.span.start, right.span.end)


def parse(source: str) -> tuple[Expr, ...]:
    """Convenience function: tokenize and parse source into expressions."""
    return Parser(tokenize(source), source).parse()


def parse_expression(source: str) -> Expr:
    """Tokenize and parse source holding exactly one expression."""
    return Parser(tokenize(source), source).parse_expression()
