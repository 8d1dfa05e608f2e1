"""
Table-literal parser.

Converts a token stream from the lexer into a syntax tree (see ``nodes``).
Recursive descent over the Lua expression grammar with Lua's operator
priorities; statements other than local/assignment/call/return are rejected.
"""

from __future__ import annotations

from typing import List, Optional, Union

from balancediff.parsing.errors import MalformedSourceError
from balancediff.parsing.lexer import Lexer, Token, TokenType, parse_numeral
from balancediff.parsing.nodes import (
    AssignmentStatement,
    BinaryExpression,
    BooleanLiteral,
    CallExpression,
    CallStatement,
    Chunk,
    Expression,
    Identifier,
    IndexExpression,
    KeyedField,
    LocalStatement,
    MemberExpression,
    NamedField,
    NilLiteral,
    NumericLiteral,
    ParenthesizedExpression,
    PositionalField,
    ReturnStatement,
    Statement,
    StringLiteral,
    TableConstructor,
    TableField,
    UnaryExpression,
    VarargLiteral,
)

# (left, right) binding priorities; right < left means right associative.
BINARY_PRIORITY = {
    "or": (1, 1),
    "and": (2, 2),
    "<": (3, 3),
    ">": (3, 3),
    "<=": (3, 3),
    ">=": (3, 3),
    "~=": (3, 3),
    "==": (3, 3),
    "|": (4, 4),
    "~": (5, 5),
    "&": (6, 6),
    "<<": (7, 7),
    ">>": (7, 7),
    "..": (9, 8),
    "+": (10, 10),
    "-": (10, 10),
    "*": (11, 11),
    "/": (11, 11),
    "//": (11, 11),
    "%": (11, 11),
    "^": (14, 13),
}
UNARY_PRIORITY = 12

# Deepest expression nesting accepted, tables and parentheses included.
MAX_NESTING = 100

UNSUPPORTED_KEYWORDS = ("function", "if", "for", "while", "do", "repeat", "goto", "break")


class Parser:
    """
    Parser for table-literal source files.

    Usage:
        parser = Parser(tokens)
        chunk = parser.parse()
    """

    def __init__(self, tokens: List[Token], filename: str = "<unknown>"):
        self.tokens = tokens
        self.filename = filename
        self.pos = 0
        self.depth = 0

    def _current(self) -> Token:
        return self.tokens[min(self.pos, len(self.tokens) - 1)]

    def _peek(self, offset: int = 1) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def _advance(self) -> Token:
        token = self._current()
        if token.type is not TokenType.EOF:
            self.pos += 1
        return token

    def _error(self, message: str, token: Optional[Token] = None) -> MalformedSourceError:
        token = token or self._current()
        return MalformedSourceError(message, token.line, token.column)

    def _describe(self, token: Token) -> str:
        if token.type is TokenType.EOF:
            return "<eof>"
        return repr(token.value)

    def _expect_symbol(self, symbol: str) -> Token:
        token = self._current()
        if not token.is_symbol(symbol):
            raise self._error(f"'{symbol}' expected near {self._describe(token)}")
        return self._advance()

    def _expect_name(self) -> Token:
        token = self._current()
        if token.type is not TokenType.NAME:
            raise self._error(f"<name> expected near {self._describe(token)}")
        return self._advance()

    def parse(self) -> Chunk:
        """Parse the whole token stream into a chunk of statements."""
        chunk = Chunk(line=1, column=1)
        while self._current().type is not TokenType.EOF:
            statement = self._statement()
            if statement is None:
                continue
            chunk.body.append(statement)
            if isinstance(statement, ReturnStatement):
                if self._current().type is not TokenType.EOF:
                    raise self._error(f"'<eof>' expected near {self._describe(self._current())}")
        return chunk

    # Statements

    def _statement(self) -> Optional[Statement]:
        token = self._current()

        if token.is_symbol(";"):
            self._advance()
            return None

        if token.is_keyword("local"):
            return self._local_statement()

        if token.is_keyword("return"):
            return self._return_statement()

        if token.is_keyword(*UNSUPPORTED_KEYWORDS) or token.is_symbol("::"):
            raise self._error(f"unsupported statement '{token.value}'")

        return self._expression_statement()

    def _local_statement(self) -> LocalStatement:
        start = self._advance()
        if self._current().is_keyword("function"):
            raise self._error("unsupported statement 'local function'")
        names = [self._local_name()]
        while self._current().is_symbol(","):
            self._advance()
            names.append(self._local_name())
        init: List[Expression] = []
        if self._current().is_symbol("="):
            self._advance()
            init = self._expression_list()
        return LocalStatement(line=start.line, column=start.column, names=names, init=init)

    def _local_name(self) -> str:
        name = self._expect_name().value
        # Lua 5.4 attributes: local x <const> = 1
        if self._current().is_symbol("<"):
            self._advance()
            self._expect_name()
            self._expect_symbol(">")
        return name

    def _return_statement(self) -> ReturnStatement:
        start = self._advance()
        arguments: List[Expression] = []
        if self._current().type is not TokenType.EOF and not self._current().is_symbol(";"):
            arguments = self._expression_list()
        if self._current().is_symbol(";"):
            self._advance()
        return ReturnStatement(line=start.line, column=start.column, arguments=arguments)

    def _expression_statement(self) -> Union[CallStatement, AssignmentStatement]:
        start = self._current()
        first = self._suffixed_expression()
        if isinstance(first, CallExpression) and not self._current().is_symbol("=", ","):
            return CallStatement(line=start.line, column=start.column, expression=first)

        targets = [first]
        while self._current().is_symbol(","):
            self._advance()
            targets.append(self._suffixed_expression())
        for target in targets:
            if not isinstance(target, (Identifier, MemberExpression, IndexExpression)):
                raise self._error("syntax error: cannot assign to expression", start)
        self._expect_symbol("=")
        init = self._expression_list()
        return AssignmentStatement(line=start.line, column=start.column, targets=targets, init=init)

    # Expressions

    def _expression_list(self) -> List[Expression]:
        expressions = [self._expression()]
        while self._current().is_symbol(","):
            self._advance()
            expressions.append(self._expression())
        return expressions

    def _expression(self, limit: int = 0) -> Expression:
        if self.depth >= MAX_NESTING:
            raise self._error("table nesting too deep")
        self.depth += 1
        try:
            return self._subexpression(limit)
        finally:
            self.depth -= 1

    def _subexpression(self, limit: int) -> Expression:
        token = self._current()
        if token.is_symbol("-", "#", "~") or token.is_keyword("not"):
            self._advance()
            argument = self._expression(UNARY_PRIORITY)
            left: Expression = UnaryExpression(
                line=token.line, column=token.column, operator=token.value, argument=argument
            )
        else:
            left = self._simple_expression()

        while True:
            op_token = self._current()
            if op_token.type not in (TokenType.SYMBOL, TokenType.KEYWORD):
                break
            priority = BINARY_PRIORITY.get(op_token.value)
            if priority is None or priority[0] <= limit:
                break
            self._advance()
            right = self._expression(priority[1])
            left = BinaryExpression(
                line=op_token.line,
                column=op_token.column,
                operator=op_token.value,
                left=left,
                right=right,
            )
        return left

    def _simple_expression(self) -> Expression:
        token = self._current()

        if token.type is TokenType.NUMBER:
            self._advance()
            try:
                value = parse_numeral(token.value)
            except ValueError:
                raise self._error(f"malformed number near '{token.value}'", token) from None
            return NumericLiteral(line=token.line, column=token.column, value=value, raw=token.value)

        if token.type is TokenType.STRING:
            self._advance()
            return StringLiteral(line=token.line, column=token.column, value=token.value)

        if token.is_keyword("nil"):
            self._advance()
            return NilLiteral(line=token.line, column=token.column)

        if token.is_keyword("true", "false"):
            self._advance()
            return BooleanLiteral(line=token.line, column=token.column, value=token.value == "true")

        if token.is_symbol("..."):
            self._advance()
            return VarargLiteral(line=token.line, column=token.column)

        if token.is_symbol("{"):
            return self._table_constructor()

        if token.is_keyword("function"):
            raise self._error("unsupported expression 'function'")

        return self._suffixed_expression()

    def _primary_expression(self) -> Expression:
        token = self._current()
        if token.type is TokenType.NAME:
            self._advance()
            return Identifier(line=token.line, column=token.column, name=token.value)
        if token.is_symbol("("):
            self._advance()
            inner = self._expression()
            self._expect_symbol(")")
            return ParenthesizedExpression(line=token.line, column=token.column, expression=inner)
        raise self._error(f"unexpected symbol near {self._describe(token)}")

    def _suffixed_expression(self) -> Expression:
        expression = self._primary_expression()
        while True:
            token = self._current()
            if token.is_symbol("."):
                self._advance()
                name = self._expect_name().value
                expression = MemberExpression(line=token.line, column=token.column, base=expression, name=name)
            elif token.is_symbol("["):
                self._advance()
                index = self._expression()
                self._expect_symbol("]")
                expression = IndexExpression(line=token.line, column=token.column, base=expression, index=index)
            elif token.is_symbol(":"):
                self._advance()
                name = self._expect_name().value
                method = MemberExpression(
                    line=token.line, column=token.column, base=expression, name=name, indexer=":"
                )
                expression = CallExpression(
                    line=token.line, column=token.column, callee=method, arguments=self._call_arguments()
                )
            elif token.is_symbol("(", "{") or token.type is TokenType.STRING:
                expression = CallExpression(
                    line=token.line, column=token.column, callee=expression, arguments=self._call_arguments()
                )
            else:
                return expression

    def _call_arguments(self) -> List[Expression]:
        token = self._current()
        if token.type is TokenType.STRING:
            self._advance()
            return [StringLiteral(line=token.line, column=token.column, value=token.value)]
        if token.is_symbol("{"):
            return [self._table_constructor()]
        self._expect_symbol("(")
        arguments: List[Expression] = []
        if not self._current().is_symbol(")"):
            arguments = self._expression_list()
        self._expect_symbol(")")
        return arguments

    def _table_constructor(self) -> TableConstructor:
        start = self._expect_symbol("{")
        table = TableConstructor(line=start.line, column=start.column)
        while not self._current().is_symbol("}"):
            table.fields.append(self._table_field())
            if self._current().is_symbol(",", ";"):
                self._advance()
            elif not self._current().is_symbol("}"):
                raise self._error(f"'}}' expected near {self._describe(self._current())}")
        self._advance()
        return table

    def _table_field(self) -> TableField:
        token = self._current()
        if token.is_symbol("["):
            self._advance()
            key = self._expression()
            self._expect_symbol("]")
            self._expect_symbol("=")
            return KeyedField(line=token.line, column=token.column, key=key, value=self._expression())
        if token.type is TokenType.NAME and self._peek().is_symbol("="):
            self._advance()
            self._advance()
            return NamedField(line=token.line, column=token.column, key=token.value, value=self._expression())
        return PositionalField(line=token.line, column=token.column, value=self._expression())


def parse_source(source: Union[str, bytes], filename: str = "<unknown>") -> Chunk:
    """Tokenize and parse source text in one step.

    Raises:
        MalformedSourceError: If the text is not valid table-literal syntax
    """
    tokens = Lexer(source, filename=filename).tokenize_all()
    try:
        return Parser(tokens, filename=filename).parse()
    except RecursionError:
        raise MalformedSourceError("table nesting too deep") from None


__all__ = ["Parser", "parse_source", "BINARY_PRIORITY", "UNARY_PRIORITY", "MAX_NESTING"]
