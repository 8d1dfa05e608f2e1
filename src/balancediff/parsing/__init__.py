from .errors import DecodeError, MalformedSourceError
from .lexer import Lexer, Token, TokenType
from .parser import Parser, parse_source

__all__ = [
    "DecodeError",
    "MalformedSourceError",
    "Lexer",
    "Token",
    "TokenType",
    "Parser",
    "parse_source",
]
