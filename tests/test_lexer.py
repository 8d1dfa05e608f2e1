"""
Unit tests for the table-literal lexer.

Tests cover:
- token kinds and positions
- strings, escapes and long brackets
- comments
- numerals
- error reporting
"""

import pytest

from balancediff.parsing.errors import MalformedSourceError
from balancediff.parsing.lexer import Lexer, TokenType, parse_numeral, source_text


def _tokens(source):
    return Lexer(source).tokenize_all()


def _values(source):
    return [(token.type, token.value) for token in _tokens(source)]


class TestTokens:
    """Tests for basic token kinds."""

    def test_return_table(self):
        """A small unit file produces keyword, symbol, name and number tokens."""
        assert _values("return { maxdamage = 100 }") == [
            (TokenType.KEYWORD, "return"),
            (TokenType.SYMBOL, "{"),
            (TokenType.NAME, "maxdamage"),
            (TokenType.SYMBOL, "="),
            (TokenType.NUMBER, "100"),
            (TokenType.SYMBOL, "}"),
            (TokenType.EOF, ""),
        ]

    def test_longest_symbol_wins(self):
        """Multi-character operators are not split."""
        values = [token.value for token in _tokens("a .. b ... == ~= //")]
        assert values == ["a", "..", "b", "...", "==", "~=", "//", ""]

    def test_line_and_column(self):
        """Tokens carry 1-based line and column positions."""
        tokens = _tokens("local x\n  = 1")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (1, 7)
        assert (tokens[2].line, tokens[2].column) == (2, 3)

    def test_shebang_skipped(self):
        """A first line starting with '#' is ignored."""
        assert _values("#!/usr/bin/lua\nreturn")[0] == (TokenType.KEYWORD, "return")


class TestStrings:
    """Tests for string literals."""

    def test_quotes(self):
        tokens = _tokens("'single' \"double\"")
        assert [token.value for token in tokens[:2]] == ["single", "double"]

    def test_simple_escapes(self):
        assert _tokens(r'"a\tb\nc\\d\"e"')[0].value == 'a\tb\nc\\d"e'

    def test_numeric_escapes(self):
        """Decimal and hex escapes produce the single character of that byte value."""
        assert _tokens(r'"\65\x42\067"')[0].value == "ABC"

    def test_unicode_escape_is_utf8_bytes(self):
        """\\u{...} yields the UTF-8 bytes of the code point, one character each."""
        assert _tokens(r'"\u{e9}"')[0].value == "\xc3\xa9"

    def test_z_escape_skips_whitespace(self):
        assert _tokens('"a\\z   \n   b"')[0].value == "ab"

    def test_long_string(self):
        """Long brackets keep their content verbatim, minus a leading newline."""
        assert _tokens("[[\nfirst\nsecond]]")[0].value == "first\nsecond"

    def test_long_string_with_level(self):
        assert _tokens("[==[ a ]] b ]==]")[0].value == " a ]] b "

    def test_high_bytes_survive(self):
        """Bytes >= 0x80 are not decoded as UTF-8."""
        token = _tokens(b'"Caf\xc3\xa9 \xff"')[0]
        assert token.value == "Caf\xc3\xa9 \xff"

    def test_unfinished_string(self):
        with pytest.raises(MalformedSourceError) as exc_info:
            _tokens('x = "abc\ny = 1')
        assert exc_info.value.line == 1
        assert "unfinished string" in str(exc_info.value)

    def test_invalid_escape(self):
        with pytest.raises(MalformedSourceError, match="invalid escape"):
            _tokens(r'"\q"')

    def test_decimal_escape_too_large(self):
        with pytest.raises(MalformedSourceError, match="too large"):
            _tokens(r'"\300"')


class TestComments:
    """Tests for comments."""

    def test_line_comment(self):
        assert _values("-- note\nreturn")[0] == (TokenType.KEYWORD, "return")

    def test_long_comment(self):
        values = _values("--[[ a\nmultiline\ncomment ]] x")
        assert values[0] == (TokenType.NAME, "x")

    def test_long_comment_with_level(self):
        values = _values("--[=[ contains ]] ]=] x")
        assert values[0] == (TokenType.NAME, "x")

    def test_unfinished_long_comment(self):
        with pytest.raises(MalformedSourceError, match="unfinished long"):
            _tokens("--[[ never closed")


class TestNumerals:
    """Tests for number tokens and their conversion."""

    def test_number_forms(self):
        values = [token.value for token in _tokens("3 3.0 0.5 .5 1e3 2E-2 0x1F 0xA.8p1")[:-1]]
        assert values == ["3", "3.0", "0.5", ".5", "1e3", "2E-2", "0x1F", "0xA.8p1"]

    def test_malformed_number(self):
        with pytest.raises(MalformedSourceError, match="malformed number"):
            _tokens("3x")

    def test_parse_numeral(self):
        assert parse_numeral("10") == 10
        assert isinstance(parse_numeral("10"), int)
        assert parse_numeral("1.5") == 1.5
        assert parse_numeral("1e3") == 1000.0
        assert parse_numeral("0x10") == 16
        assert parse_numeral("0x1p4") == 16.0
        assert parse_numeral("0xA.8") == 10.5

    def test_integer_overflow(self):
        assert parse_numeral("9223372036854775807") == 2**63 - 1
        assert isinstance(parse_numeral("9223372036854775808"), float)
        assert parse_numeral("9" * 400) == float("inf")
        assert parse_numeral("0xffffffffffffffff") == -1
        assert parse_numeral("0x1p99999") == float("inf")

    def test_sign_is_a_symbol(self):
        assert _values("-5")[:2] == [(TokenType.SYMBOL, "-"), (TokenType.NUMBER, "5")]


class TestSourceText:
    """Tests for input normalisation."""

    def test_bytes_decoded_one_to_one(self):
        assert source_text(b"\x80\xff") == "\x80\xff"

    def test_utf8_bom_stripped(self):
        assert source_text(b"\xef\xbb\xbfreturn") == "return"
        assert source_text("\ufeffreturn") == "return"

    def test_unexpected_character(self):
        with pytest.raises(MalformedSourceError, match="unexpected symbol"):
            _tokens("x = $")
