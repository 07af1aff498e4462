"""Test whitespace handling, line comments, and line-at-a-time scanning."""

import pytest

from loxcore.errors import LexError
from loxcore.lexer import Lexer, scan_line, scan_lines
from loxcore.tokens import TokenType

from .conftest import assert_types, assert_values


class TestWhitespace:
    def test_only_whitespace(self, lex):
        assert lex("  \t  ") == []

    def test_leading_and_trailing(self, lex):
        tokens = lex("\t 1 \t")
        assert_types(tokens, [TokenType.NUMBER])

    def test_newlines_between_tokens(self, lex):
        tokens = lex("1\n+\r\n2")
        assert_types(tokens, [TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER])
        assert tokens[2].span.start.line == 3
        assert tokens[2].span.start.column == 1

    def test_amount_of_whitespace_irrelevant(self, lex):
        assert [t.type for t in lex("1     +  2")] == [t.type for t in lex("1+2")]


class TestLineComments:
    def test_comment_token(self, lex):
        tokens = lex("// This is a comment\n")
        assert_types(tokens, [TokenType.LINE_COMMENT])
        assert_values(tokens, [" This is a comment"])
        assert tokens[0].raw == "// This is a comment"

    def test_comment_ends_at_newline(self, lex):
        tokens = lex("1 // one\n2")
        assert_types(tokens, [TokenType.NUMBER, TokenType.LINE_COMMENT, TokenType.NUMBER])

    def test_empty_comment(self, lex):
        tokens = lex("//")
        assert_values(tokens, [""])

    def test_comment_before_slash(self, lex):
        tokens = lex("4 / 2 // half")
        assert_types(
            tokens,
            [TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER, TokenType.LINE_COMMENT],
        )

    def test_comments_dropped(self, lex):
        tokens = lex("1 // one\n2", keep_comments=False)
        assert_types(tokens, [TokenType.NUMBER, TokenType.NUMBER])

    def test_dropped_comment_still_consumes_text(self):
        tokens = Lexer("// $ not a token", keep_comments=False).tokenize()
        assert_types(tokens, [TokenType.EOF])


class TestScanLine:
    def test_spec_example(self):
        tokens = scan_line("var x = 10;")
        assert_types(
            tokens,
            [
                TokenType.VAR,
                TokenType.IDENTIFIER,
                TokenType.EQUAL,
                TokenType.NUMBER,
                TokenType.SEMICOLON,
            ],
        )
        assert_values(tokens, ["var", "x", "=", 10.0, ";"])

    def test_no_eof(self):
        assert scan_line("") == []

    def test_comparison_line(self):
        tokens = scan_line("var x <= 10;")
        assert tokens[2].type == TokenType.LESS_EQUAL

    def test_unterminated_string(self):
        with pytest.raises(LexError):
            scan_line('"abc')


class TestScanLines:
    def test_one_list_per_line(self):
        lines = scan_lines("1 + 2\nvar a;\n")
        assert len(lines) == 2
        assert_types(lines[0], [TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER])
        assert_types(lines[1], [TokenType.VAR, TokenType.IDENTIFIER, TokenType.SEMICOLON])

    def test_positions_are_file_relative(self):
        lines = scan_lines("1\n  2")
        tok = lines[1][0]
        assert tok.span.start.line == 2
        assert tok.span.start.column == 3
        assert tok.span.start.offset == 4

    def test_blank_lines_kept(self):
        lines = scan_lines("1\n\n2")
        assert [len(line) for line in lines] == [1, 0, 1]

    def test_crlf(self):
        lines = scan_lines("1\r\n2\r\n")
        assert len(lines) == 2
        assert_values(lines[1], [2.0])

    def test_empty_source(self):
        assert scan_lines("") == []

    def test_string_cannot_span_lines(self):
        with pytest.raises(LexError, match="unterminated string") as exc_info:
            scan_lines('"a\nb"')
        assert exc_info.value.position.line == 1

    def test_error_aborts_whole_scan(self):
        with pytest.raises(LexError) as exc_info:
            scan_lines("1\n2\n3 $ 4\n5")
        err = exc_info.value
        assert err.position.line == 3
        assert err.position.column == 3
        assert "3 $ 4" in err.format()
