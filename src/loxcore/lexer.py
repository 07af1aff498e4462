"""Lox lexer: converts source text into a flat token stream.

Each position is matched against an ordered list of rules; the first rule that
succeeds emits a token. A rule that fails leaves the cursor where it found it,
so the next rule starts from the same position.
"""

from __future__ import annotations

from collections.abc import Callable

from loxcore.errors import LexError
from loxcore.tokens import (
    KEYWORDS,
    SINGLE_CHAR,
    TWO_CHAR,
    Position,
    Span,
    Token,
    TokenType,
    is_alnum,
    is_alpha,
    is_digit,
)

_WHITESPACE = " \t\r\n"


class Lexer:
    """Tokenize Lox source text into a list of Token objects.

    ``start``/``end`` restrict scanning to a window of ``source`` (used for
    line-at-a-time scanning) while keeping positions and error context relative
    to the whole source. ``line`` is the line number at ``start``.
    """

    def __init__(
        self,
        source: str,
        *,
        keep_comments: bool = True,
        start: int = 0,
        end: int | None = None,
        line: int = 1,
    ) -> None:
        self._source = source
        self._keep_comments = keep_comments
        self._pos = start
        self._end = len(source) if end is None else end
        self._line = line
        self._col = 1
        self._tokens: list[Token] = []
        # Order is significant: earlier rules win ties at the same position
        self._rules: tuple[Callable[[], bool], ...] = (
            self._lex_line_comment,
            self._lex_keyword,
            self._lex_identifier,
            self._lex_number,
            self._lex_string,
            self._lex_two_char,
            self._lex_single_char,
        )

    def tokenize(self) -> list[Token]:
        """Tokenize the full window and return the token list, ending with EOF."""
        self._skip_ws()
        while not self._at_end():
            if not self._lex_token():
                raise self._error(f"unexpected character '{self._peek()}'")
            self._skip_ws()

        self._emit(TokenType.EOF, "", "")
        return self._tokens

    def _lex_token(self) -> bool:
        for rule in self._rules:
            mark = self._mark()
            if rule():
                return True
            self._reset(mark)
        return False

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self._pos >= self._end

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _mark(self) -> tuple[int, int, int]:
        return self._pos, self._line, self._col

    def _reset(self, mark: tuple[int, int, int]) -> None:
        self._pos, self._line, self._col = mark

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < self._end:
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _take_while(self, pred: Callable[[str], bool]) -> str:
        begin = self._pos
        while not self._at_end() and pred(self._peek()):
            self._advance()
        return self._source[begin : self._pos]

    def _emit(
        self, tt: TokenType, value: str | float, raw: str, start: Position | None = None
    ) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        tok = Token(tt, value, raw, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    def _skip_ws(self) -> None:
        self._take_while(lambda ch: ch in _WHITESPACE)

    # ------------------------------------------------------------------
    # Rules, in precedence order
    # ------------------------------------------------------------------

    def _lex_line_comment(self) -> bool:
        if self._peek() != "/" or self._peek(1) != "/":
            return False
        start = self._current_pos()
        self._advance()
        self._advance()
        text = self._take_while(lambda ch: ch not in "\r\n")
        if self._keep_comments:
            self._emit(TokenType.LINE_COMMENT, text, "//" + text, start)
        return True

    def _lex_keyword(self) -> bool:
        start = self._current_pos()
        word = self._take_while(is_alnum)
        tt = KEYWORDS.get(word)
        if tt is None:
            return False
        self._emit(tt, word, word, start)
        return True

    def _lex_identifier(self) -> bool:
        if not is_alpha(self._peek()):
            return False
        start = self._current_pos()
        name = self._take_while(is_alnum)
        self._emit(TokenType.IDENTIFIER, name, name, start)
        return True

    def _lex_number(self) -> bool:
        start = self._current_pos()
        whole = self._take_while(is_digit)
        fraction = ""
        if self._peek() == "." and (whole or is_digit(self._peek(1))):
            self._advance()
            fraction = self._take_while(is_digit)
        if not whole and not fraction:
            return False

        # Exponent only when digits follow, so "2e" lexes as 2 then identifier e
        if self._peek() in ("e", "E"):
            sign = 1 if self._peek(1) in ("+", "-") else 0
            if is_digit(self._peek(1 + sign)):
                for _ in range(1 + sign):
                    self._advance()
                self._take_while(is_digit)

        text = self._source[start.offset : self._pos]
        self._emit(TokenType.NUMBER, float(text), text, start)
        return True

    def _lex_string(self) -> bool:
        if self._peek() != '"':
            return False
        start = self._current_pos()
        self._advance()
        body = self._take_while(lambda ch: ch != '"')
        if self._at_end():
            raise self._error("unterminated string", start)
        self._advance()
        self._emit(TokenType.STRING, body, f'"{body}"', start)
        return True

    def _lex_two_char(self) -> bool:
        pair = self._peek() + self._peek(1)
        tt = TWO_CHAR.get(pair)
        if tt is None:
            return False
        start = self._current_pos()
        self._advance()
        self._advance()
        self._emit(tt, pair, pair, start)
        return True

    def _lex_single_char(self) -> bool:
        ch = self._peek()
        tt = SINGLE_CHAR.get(ch)
        if tt is None:
            return False
        start = self._current_pos()
        self._advance()
        self._emit(tt, ch, ch, start)
        return True


def tokenize(source: str, *, keep_comments: bool = True) -> list[Token]:
    """Convenience function: tokenize a whole buffer and return the token list."""
    return Lexer(source, keep_comments=keep_comments).tokenize()


def scan_line(line: str, *, keep_comments: bool = True) -> list[Token]:
    """Tokenize a single line. The result has no EOF token."""
    return Lexer(line, keep_comments=keep_comments).tokenize()[:-1]


def scan_lines(source: str, *, keep_comments: bool = True) -> list[list[Token]]:
    """Tokenize *source* one line at a time.

    Tokens never span lines, so an unterminated string stops at the end of its
    line. The first error aborts the whole scan.
    """
    texts = source.split("\n")
    if texts[-1] == "":
        texts.pop()

    lines: list[list[Token]] = []
    offset = 0
    for line_no, text in enumerate(texts, start=1):
        lexer = Lexer(
            source,
            keep_comments=keep_comments,
            start=offset,
            end=offset + len(text.rstrip("\r")),
            line=line_no,
        )
        lines.append(lexer.tokenize()[:-1])
        offset += len(text) + 1
    return lines
