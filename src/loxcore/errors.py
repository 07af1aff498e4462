"""Error types with formatted source context."""

from __future__ import annotations

from loxcore.tokens import Position, Span


class LoxError(Exception):
    """Base class for every front-end failure (lex, parse, eval)."""

    message: str

    def format(self, filename: str = "<script>") -> str:
        raise NotImplementedError


def _snippet(
    message: str,
    source: str,
    filename: str,
    line: int,
    col: int,
    underline_len: int | None = None,
) -> str:
    """Render a rustc-style error block with a caret underline."""
    lines = source.splitlines(keepends=True)
    line_idx = line - 1

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    if underline_len is None:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


def _span_underline(span: Span) -> int | None:
    # Underline the full span when on one line, otherwise to end of line
    if span.end.line == span.start.line:
        return max(1, span.end.column - span.start.column)
    return None


class LexError(LoxError):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<script>") -> str:
        return _snippet(
            self.message, self.source, filename, self.position.line, self.position.column, 1
        )


class ParseError(LoxError):
    """Raised on the first parse error, with span and source context."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<script>") -> str:
        return _snippet(
            self.message,
            self.source,
            filename,
            self.span.start.line,
            self.span.start.column,
            _span_underline(self.span),
        )


class EvalError(LoxError):
    """Raised when an operator is applied to operands it does not support.

    Hand-built trees carry no span; the error then formats as a bare message.
    """

    def __init__(
        self,
        message: str,
        span: Span | None,
        source: str = "",
        operator: str | None = None,
        operand_types: tuple[str, ...] = (),
    ) -> None:
        self.message = message
        self.span = span
        self.source = source
        self.operator = operator
        self.operand_types = operand_types
        super().__init__(self.format())

    def format(self, filename: str = "<script>") -> str:
        if self.span is None:
            return f"error: {self.message}"
        return _snippet(
            self.message,
            self.source,
            filename,
            self.span.start.line,
            self.span.start.column,
            _span_underline(self.span),
        )
