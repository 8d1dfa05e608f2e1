"""
Table-literal lexer (Lua syntax).

Converts source text into a stream of tokens.
Handles: names, keywords, numerals, short and long strings, comments, symbols.

Byte input is decoded as ISO-8859-1 so every byte becomes exactly one
character; string contents are never reinterpreted as UTF-8.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional, Union

from balancediff.parsing.errors import MalformedSourceError

SOURCE_ENCODING = "latin-1"

KEYWORDS = frozenset(
    {
        "and", "break", "do", "else", "elseif", "end", "false", "for",
        "function", "goto", "if", "in", "local", "nil", "not", "or",
        "repeat", "return", "then", "true", "until", "while",
    }
)

# Longest first so that "..." wins over ".." and ".".
SYMBOLS = (
    "...", "..", "==", "~=", "<=", ">=", "//", "::", "<<", ">>",
    "+", "-", "*", "/", "%", "^", "#", "&", "~", "|", "<", ">", "=",
    "(", ")", "{", "}", "[", "]", ";", ":", ",", ".",
)

DIGITS = frozenset("0123456789")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
NAME_START = frozenset("_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
NAME_CHARS = NAME_START | DIGITS
WHITESPACE = frozenset(" \t\n\r\f\v")

SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


class TokenType(Enum):
    NAME = auto()      # weapondefs, armcom
    KEYWORD = auto()   # local, return, true, nil
    NUMBER = auto()    # 10, -0.5 (sign is a separate symbol), 0x1F, 1e3
    STRING = auto()    # "quoted", 'quoted', [[long]]
    SYMBOL = auto()    # { } = , ; [ ] and operators
    EOF = auto()


@dataclass
class Token:
    """A single token from the lexer."""

    type: TokenType
    value: str
    line: int
    column: int

    def is_symbol(self, *values: str) -> bool:
        return self.type is TokenType.SYMBOL and self.value in values

    def is_keyword(self, *values: str) -> bool:
        return self.type is TokenType.KEYWORD and self.value in values

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.column})"


def source_text(source: Union[str, bytes]) -> str:
    """Normalise input to text without any multi-byte decoding."""
    if isinstance(source, (bytes, bytearray)):
        text = bytes(source).decode(SOURCE_ENCODING)
        if text.startswith("\xef\xbb\xbf"):
            text = text[3:]
        return text
    if source.startswith("\ufeff"):
        return source[1:]
    return source


class Lexer:
    """
    Tokenizer for table-literal source files.

    Usage:
        lexer = Lexer(source_text)
        tokens = lexer.tokenize_all()
    """

    def __init__(self, source: Union[str, bytes], filename: str = "<unknown>"):
        self.source = source_text(source)
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.length = len(self.source)

    def _current(self) -> Optional[str]:
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.source[pos]

    def _advance(self) -> Optional[str]:
        ch = self._current()
        if ch is not None:
            self.pos += 1
            if ch == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return ch

    def _error(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> MalformedSourceError:
        return MalformedSourceError(
            message,
            self.line if line is None else line,
            self.column if column is None else column,
        )

    def _skip_shebang(self) -> None:
        if self.source.startswith("#"):
            while self._current() not in (None, "\n"):
                self._advance()

    def _long_bracket_level(self) -> Optional[int]:
        """If the text at pos opens a long bracket ``[=*[``, return its level."""
        if self._current() != "[":
            return None
        offset = 1
        while self._peek(offset) == "=":
            offset += 1
        if self._peek(offset) == "[":
            return offset - 1
        return None

    def _read_long_bracket(self, level: int) -> str:
        start_line, start_col = self.line, self.column
        for _ in range(level + 2):
            self._advance()
        # A newline right after the opener is not part of the content.
        if self._current() == "\r":
            self._advance()
            if self._current() == "\n":
                self._advance()
        elif self._current() == "\n":
            self._advance()
            if self._current() == "\r":
                self._advance()
        closer = "]" + "=" * level + "]"
        end = self.source.find(closer, self.pos)
        if end < 0:
            raise self._error("unfinished long string or comment", start_line, start_col)
        content = self.source[self.pos:end]
        while self.pos < end + len(closer):
            self._advance()
        return content

    def _skip_comment(self) -> None:
        self._advance()
        self._advance()
        level = self._long_bracket_level()
        if level is not None:
            self._read_long_bracket(level)
            return
        while self._current() not in (None, "\n"):
            self._advance()

    def _read_escape(self, out: List[str]) -> None:
        esc_line, esc_col = self.line, self.column
        self._advance()  # backslash
        ch = self._current()
        if ch is None:
            raise self._error("unfinished string", esc_line, esc_col)
        if ch in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[ch])
            self._advance()
        elif ch in ("\n", "\r"):
            self._advance()
            nxt = self._current()
            if nxt in ("\n", "\r") and nxt != ch:
                self._advance()
            out.append("\n")
        elif ch == "z":
            self._advance()
            while self._current() in WHITESPACE:
                self._advance()
        elif ch == "x":
            self._advance()
            digits = ""
            while len(digits) < 2 and self._current() in HEX_DIGITS:
                digits += self._advance()
            if len(digits) != 2:
                raise self._error("hexadecimal digit expected", esc_line, esc_col)
            out.append(chr(int(digits, 16)))
        elif ch in DIGITS:
            digits = ""
            while len(digits) < 3 and self._current() in DIGITS:
                digits += self._advance()
            code = int(digits)
            if code > 255:
                raise self._error("decimal escape too large", esc_line, esc_col)
            out.append(chr(code))
        elif ch == "u":
            self._advance()
            if self._current() != "{":
                raise self._error("missing '{' in \\u{xxxx}", esc_line, esc_col)
            self._advance()
            digits = ""
            while self._current() is not None and self._current() != "}":
                digits += self._advance()
            if self._current() != "}":
                raise self._error("missing '}' in \\u{xxxx}", esc_line, esc_col)
            self._advance()
            try:
                code_point = int(digits, 16)
                encoded = chr(code_point).encode("utf-8", "surrogatepass")
            except (ValueError, OverflowError):
                raise self._error("UTF-8 value too large", esc_line, esc_col) from None
            out.append(encoded.decode(SOURCE_ENCODING))
        else:
            raise self._error(f"invalid escape sequence '\\{ch}'", esc_line, esc_col)

    def _read_string(self, quote: str) -> str:
        start_line, start_col = self.line, self.column
        self._advance()
        out: List[str] = []
        while True:
            ch = self._current()
            if ch is None or ch in ("\n", "\r"):
                raise self._error("unfinished string", start_line, start_col)
            if ch == quote:
                self._advance()
                break
            if ch == "\\":
                self._read_escape(out)
            else:
                out.append(ch)
                self._advance()
        return "".join(out)

    def _read_number(self) -> str:
        start = self.pos
        if self._current() == "0" and self._peek() in ("x", "X"):
            self._advance()
            self._advance()
            exponent, digits = "pP", HEX_DIGITS
        else:
            exponent, digits = "eE", DIGITS
        while True:
            ch = self._current()
            if ch is None:
                break
            if ch in exponent:
                self._advance()
                if self._current() in ("+", "-"):
                    self._advance()
            elif ch in digits or ch == ".":
                self._advance()
            else:
                break
        text = self.source[start:self.pos]
        if self._current() in NAME_CHARS:
            raise self._error(f"malformed number near '{text}{self._current()}'")
        return text

    def _read_name(self) -> str:
        start = self.pos
        while self._current() in NAME_CHARS:
            self._advance()
        return self.source[start:self.pos]

    def tokenize(self) -> Iterator[Token]:
        """Generate tokens from the source, ending with a single EOF token."""
        self._skip_shebang()
        while True:
            ch = self._current()
            while ch in WHITESPACE:
                self._advance()
                ch = self._current()

            line, col = self.line, self.column
            if ch is None:
                yield Token(TokenType.EOF, "", line, col)
                return

            if ch == "-" and self._peek() == "-":
                self._skip_comment()
                continue

            if ch in ("'", '"'):
                yield Token(TokenType.STRING, self._read_string(ch), line, col)
                continue

            if ch == "[":
                level = self._long_bracket_level()
                if level is not None:
                    yield Token(TokenType.STRING, self._read_long_bracket(level), line, col)
                    continue

            if ch in DIGITS or (ch == "." and self._peek() in DIGITS):
                yield Token(TokenType.NUMBER, self._read_number(), line, col)
                continue

            if ch in NAME_START:
                name = self._read_name()
                token_type = TokenType.KEYWORD if name in KEYWORDS else TokenType.NAME
                yield Token(token_type, name, line, col)
                continue

            for symbol in SYMBOLS:
                if self.source.startswith(symbol, self.pos):
                    for _ in symbol:
                        self._advance()
                    yield Token(TokenType.SYMBOL, symbol, line, col)
                    break
            else:
                raise self._error(f"unexpected symbol {ch!r}", line, col)

    def tokenize_all(self) -> List[Token]:
        return list(self.tokenize())


INT64_MAX = 2**63 - 1


def wrap_int64(value: int) -> int:
    """Wrap an integer around to a signed 64-bit value, as Lua integer arithmetic does."""
    value &= 2**64 - 1
    return value - 2**64 if value > INT64_MAX else value


def parse_numeral(text: str) -> Union[int, float]:
    """Convert a numeral token to ``int`` when integral, else ``float``.

    Integers follow Lua: hexadecimal ones wrap around to 64 bits and decimal
    ones that do not fit in 64 bits become floats.
    """
    lowered = text.lower()
    if lowered.startswith("0x"):
        if "." in lowered or "p" in lowered:
            if "p" not in lowered:
                lowered += "p0"
            try:
                return float.fromhex(lowered)
            except OverflowError:
                return float("inf")
        return wrap_int64(int(lowered, 16))
    if any(c in lowered for c in ".e"):
        return float(lowered)
    if len(lowered.lstrip("0")) > len(str(INT64_MAX)):
        return float(lowered)
    value = int(lowered)
    return value if value <= INT64_MAX else float(lowered)


__all__ = ["Lexer", "Token", "TokenType", "KEYWORDS", "source_text", "parse_numeral", "wrap_int64"]
