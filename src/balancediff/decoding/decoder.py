"""
Table-literal decoder.

Walks the syntax tree of a unit-definition file and builds the typed value
tree. The property schema is consulted only for string literals whose key
declares an array shape; those are split on single spaces.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from balancediff.core.schema import EMPTY_SCHEMA, PropertySchema, ValueShape
from balancediff.core.values import ObjectValue, Primitive, PrimitiveArray, Value, ieee_divide, is_number
from balancediff.parsing.errors import MalformedSourceError
from balancediff.parsing.lexer import wrap_int64
from balancediff.parsing.nodes import (
    BinaryExpression,
    BooleanLiteral,
    Chunk,
    Expression,
    Identifier,
    KeyedField,
    LocalStatement,
    NamedField,
    NilLiteral,
    NumericLiteral,
    ParenthesizedExpression,
    ReturnStatement,
    StringLiteral,
    TableConstructor,
    UnaryExpression,
)
from balancediff.parsing.parser import parse_source

logger = logging.getLogger(__name__)

Constant = Union[int, float, str]

SPLIT_SEPARATOR = " "

MAX_SAFE_INTEGER = 2**53 - 1
JS_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
JS_RADIX_PREFIXES = {
    "0x": (16, "0123456789abcdef"),
    "0o": (8, "01234567"),
    "0b": (2, "01"),
}


class DecodeDiagnostic(BaseModel):
    """A construct the decoder accepted but could not represent faithfully."""

    message: str
    line: int = 0
    column: int = 0

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}: {self.message}"


class DecodeResult(BaseModel):
    value: ObjectValue
    bound_name: Optional[str] = None
    diagnostics: List[DecodeDiagnostic] = Field(default_factory=list)


@dataclass
class _Scope:
    """Per-decode state: constants bound by ``local`` and collected diagnostics."""

    bindings: Dict[str, Constant] = field(default_factory=dict)
    diagnostics: List[DecodeDiagnostic] = field(default_factory=list)

    def report(self, message: str, node: Expression) -> None:
        self.diagnostics.append(DecodeDiagnostic(message=message, line=node.line, column=node.column))


def _js_integer(value: int) -> Union[int, float]:
    if abs(value) <= MAX_SAFE_INTEGER:
        return value
    try:
        return float(value)
    except OverflowError:
        return math.inf


def js_number(token: str) -> Union[int, float]:
    """Convert a split token the way JavaScript's ``Number()`` does.

    Surrounding whitespace is ignored and an empty token is 0. Accepted are
    ASCII decimal numerals with an optional sign and exponent, unsigned
    ``0x``/``0o``/``0b`` integers and ``Infinity``; anything else is NaN.
    Integers beyond 2**53 become floats.
    """
    text = token.strip()
    if not text:
        return 0
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf

    radix = JS_RADIX_PREFIXES.get(text[:2].lower())
    if radix is not None:
        base, digits = radix
        body = text[2:].lower()
        if not body or any(ch not in digits for ch in body):
            return math.nan
        return _js_integer(int(body, base))

    if JS_DECIMAL.fullmatch(text) is None:
        return math.nan
    value = float(text)
    if any(ch in text for ch in ".eE") or not abs(value) <= MAX_SAFE_INTEGER:
        return value
    return int(text)


def _fold_arithmetic(operator: str, left: Union[int, float], right: Union[int, float]) -> Optional[Union[int, float]]:
    """Fold a binary operator over two numeric constants.

    Integer ``+ - *`` wrap around to 64 bits like Lua; everything else
    follows IEEE float rules and never raises.
    """
    if operator in ("+", "-", "*"):
        if operator == "+":
            result = left + right
        elif operator == "-":
            result = left - right
        else:
            result = left * right
        return wrap_int64(result) if isinstance(result, int) else result
    if operator == "/":
        return ieee_divide(left, right)
    if operator == "//":
        if isinstance(left, int) and isinstance(right, int) and right != 0:
            return wrap_int64(left // right)
        quotient = ieee_divide(left, right)
        return float(math.floor(quotient)) if math.isfinite(quotient) else quotient
    if operator == "%":
        if right == 0:
            return math.nan
        return left % right
    if operator == "^":
        try:
            result = float(left) ** right
        except OverflowError:
            return math.inf
        except ZeroDivisionError:
            return math.inf
        return math.nan if isinstance(result, complex) else result
    return None


class TableLiteralDecoder:
    """
    Decoder from table-literal source to a value tree.

    Usage:
        decoder = TableLiteralDecoder(schema)
        tree, bound_name = decoder.decode(source)
    """

    def __init__(self, schema: Optional[PropertySchema] = None):
        self.schema = EMPTY_SCHEMA if schema is None else schema

    def decode(self, source: Union[str, bytes], path: Optional[str] = None) -> Tuple[ObjectValue, Optional[str]]:
        """Decode source text, returning the root object and the bound unit name.

        Diagnostics are logged at WARNING level.

        Raises:
            MalformedSourceError: If the source is not a valid table literal
        """
        result = self.decode_with_diagnostics(source, path=path)
        for diagnostic in result.diagnostics:
            logger.warning("%s: %s", path or "<source>", diagnostic)
        return result.value, result.bound_name

    def decode_with_diagnostics(self, source: Union[str, bytes], path: Optional[str] = None) -> DecodeResult:
        try:
            chunk = parse_source(source, filename=path or "<unknown>")
        except MalformedSourceError as exc:
            if path and exc.path is None:
                raise exc.with_path(path) from exc
            raise
        try:
            return self._decode_chunk(chunk, path)
        except RecursionError:
            raise MalformedSourceError("table nesting too deep", path=path) from None

    def _decode_chunk(self, chunk: Chunk, path: Optional[str]) -> DecodeResult:
        scope = _Scope()
        bound_name: Optional[str] = None
        returned: Optional[ReturnStatement] = None

        for statement in chunk.body:
            if isinstance(statement, ReturnStatement):
                returned = statement
                break
            if isinstance(statement, LocalStatement):
                bound_name = self._bind_locals(statement, scope, bound_name)

        if returned is None:
            raise MalformedSourceError("source has no return statement", path=path)
        if not returned.arguments or not isinstance(returned.arguments[0], TableConstructor):
            raise MalformedSourceError(
                "return value is not a table constructor", returned.line, returned.column, path=path
            )

        value = self._decode_table(returned.arguments[0], scope)
        if not isinstance(value, ObjectValue):
            raise MalformedSourceError(
                "returned table has no named fields", returned.line, returned.column, path=path
            )
        return DecodeResult(value=value, bound_name=bound_name, diagnostics=scope.diagnostics)

    def _bind_locals(self, statement: LocalStatement, scope: _Scope, bound_name: Optional[str]) -> Optional[str]:
        for index, name in enumerate(statement.names):
            expression = statement.init[index] if index < len(statement.init) else None
            constant = self._constant(expression, scope) if expression is not None else None
            if constant is None:
                scope.bindings.pop(name, None)
            else:
                scope.bindings[name] = constant
            if isinstance(expression, StringLiteral):
                bound_name = expression.value
        return bound_name

    # Expressions

    def _constant(self, expression: Expression, scope: _Scope) -> Optional[Constant]:
        """Evaluate an expression to a string or number when it is a constant."""
        if isinstance(expression, (NumericLiteral, StringLiteral)):
            return expression.value
        if isinstance(expression, Identifier):
            return scope.bindings.get(expression.name)
        if isinstance(expression, ParenthesizedExpression):
            return self._constant(expression.expression, scope)
        if isinstance(expression, UnaryExpression) and expression.operator == "-":
            operand = self._constant(expression.argument, scope)
            if isinstance(operand, int):
                return wrap_int64(-operand)
            return -operand if is_number(operand) else None
        if isinstance(expression, BinaryExpression):
            left = self._constant(expression.left, scope)
            right = self._constant(expression.right, scope)
            if left is None or right is None:
                return None
            if expression.operator == "..":
                return f"{_concat_text(left)}{_concat_text(right)}"
            if is_number(left) and is_number(right):
                return _fold_arithmetic(expression.operator, left, right)
        return None

    def _decode_expression(self, expression: Expression, key: Optional[str], scope: _Scope) -> Optional[Value]:
        """Decode one field value. ``None`` means the field is dropped (``nil``)."""
        if isinstance(expression, TableConstructor):
            return self._decode_table(expression, scope)
        if isinstance(expression, BooleanLiteral):
            return Primitive(value=expression.value)
        if isinstance(expression, NilLiteral):
            return None
        if isinstance(expression, ParenthesizedExpression):
            return self._decode_expression(expression.expression, key, scope)

        constant = self._constant(expression, scope)
        if isinstance(constant, str):
            return self._decode_string(constant, key)
        if constant is not None:
            return Primitive(value=constant)

        scope.report(f"unsupported expression {type(expression).__name__}; decoded as an empty table", expression)
        return ObjectValue()

    def _decode_string(self, text: str, key: Optional[str]) -> Value:
        shape = self.schema.shape_of(key) if key else None
        if shape is ValueShape.STRING_ARRAY:
            return PrimitiveArray(items=tuple(Primitive(value=token) for token in text.split(SPLIT_SEPARATOR)))
        if shape is ValueShape.NUMBER_ARRAY:
            return PrimitiveArray(
                items=tuple(Primitive(value=js_number(token)) for token in text.split(SPLIT_SEPARATOR))
            )
        return Primitive(value=text)

    def _decode_table(self, table: TableConstructor, scope: _Scope) -> Value:
        entries: Dict[str, Value] = {}
        positional: List[Value] = []

        for table_field in table.fields:
            if isinstance(table_field, NamedField):
                key = table_field.key
            elif isinstance(table_field, KeyedField):
                key_value = self._constant(table_field.key, scope)
                if is_number(key_value):
                    key = None
                elif isinstance(key_value, str):
                    key = key_value
                else:
                    scope.report("unsupported table key; field dropped", table_field)
                    continue
            else:
                key = None

            value = self._decode_expression(table_field.value, key, scope)
            if key is None:
                if value is not None:
                    positional.append(value)
            elif value is None:
                entries.pop(key, None)
            else:
                entries[key] = value

        if entries:
            dropped = len(positional)
            if dropped:
                scope.report(f"{dropped} positional value(s) dropped from a table with named fields", table)
            return ObjectValue(entries=entries)
        if positional:
            return PrimitiveArray(items=tuple(positional))
        return ObjectValue()


def _concat_text(value: Constant) -> str:
    if isinstance(value, float) and value.is_integer():
        return f"{value:.1f}"
    if isinstance(value, float):
        return f"{value:.14g}"
    return str(value)


def decode(source: Union[str, bytes], schema: Optional[PropertySchema] = None) -> Tuple[ObjectValue, Optional[str]]:
    """Decode with a throwaway decoder (see ``TableLiteralDecoder.decode``)."""
    return TableLiteralDecoder(schema).decode(source)


__all__ = [
    "DecodeDiagnostic",
    "DecodeResult",
    "TableLiteralDecoder",
    "decode",
    "js_number",
]
