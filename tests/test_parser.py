"""
Unit tests for the table-literal parser.

Tests cover:
- statements (local, assignment, call, return)
- operator precedence and associativity
- table constructor fields
- rejection of unsupported constructs
"""

import pytest

from balancediff.parsing import MalformedSourceError, parse_source
from balancediff.parsing.parser import MAX_NESTING
from balancediff.parsing.nodes import (
    AssignmentStatement,
    BinaryExpression,
    CallExpression,
    CallStatement,
    Identifier,
    KeyedField,
    LocalStatement,
    MemberExpression,
    NamedField,
    NumericLiteral,
    PositionalField,
    ReturnStatement,
    StringLiteral,
    TableConstructor,
    UnaryExpression,
)


def _returned(source):
    chunk = parse_source(source)
    statement = chunk.return_statement()
    assert statement is not None
    return statement.arguments[0]


class TestStatements:
    """Tests for statement parsing."""

    def test_local_then_return(self):
        chunk = parse_source('local unitName = "armcom"\nreturn { [unitName] = {} }')

        assert isinstance(chunk.body[0], LocalStatement)
        assert chunk.body[0].names == ["unitName"]
        assert isinstance(chunk.body[0].init[0], StringLiteral)
        assert isinstance(chunk.body[1], ReturnStatement)

    def test_local_attribute(self):
        chunk = parse_source("local x <const> = 5")
        assert chunk.body[0].names == ["x"]

    def test_assignment_and_call(self):
        chunk = parse_source('x, y = 1, 2\nprint("hi")\nunit.name = "a"')

        assert isinstance(chunk.body[0], AssignmentStatement)
        assert len(chunk.body[0].targets) == 2
        assert isinstance(chunk.body[1], CallStatement)
        assert isinstance(chunk.body[2].targets[0], MemberExpression)

    def test_return_must_be_last(self):
        with pytest.raises(MalformedSourceError, match="'<eof>' expected"):
            parse_source("return {}\nx = 1")

    def test_semicolons(self):
        chunk = parse_source("local a = 1; ; return {};")
        assert len(chunk.body) == 2

    @pytest.mark.parametrize(
        "source, construct",
        [
            ("if x then end", "if"),
            ("for i = 1, 2 do end", "for"),
            ("while true do end", "while"),
            ("function f() end", "function"),
            ("local function f() end", "local function"),
        ],
    )
    def test_unsupported_statements(self, source, construct):
        with pytest.raises(MalformedSourceError) as exc_info:
            parse_source(source)
        assert f"unsupported statement '{construct}'" in str(exc_info.value)
        assert exc_info.value.line == 1

    def test_function_expression_rejected(self):
        with pytest.raises(MalformedSourceError, match="unsupported expression"):
            parse_source("return { f = function() end }")

    def test_error_position(self):
        with pytest.raises(MalformedSourceError) as exc_info:
            parse_source("return {\n  a = 1\n  b = 2\n}")
        assert exc_info.value.line == 3


class TestExpressions:
    """Tests for operator precedence."""

    def test_multiplication_binds_tighter(self):
        expression = _returned("return 1 + 2 * 3")

        assert isinstance(expression, BinaryExpression)
        assert expression.operator == "+"
        assert isinstance(expression.right, BinaryExpression)
        assert expression.right.operator == "*"

    def test_power_is_right_associative(self):
        expression = _returned("return 2 ^ 3 ^ 2")

        assert expression.operator == "^"
        assert isinstance(expression.left, NumericLiteral)
        assert expression.right.operator == "^"

    def test_concat_is_right_associative(self):
        expression = _returned('return "a" .. "b" .. "c"')
        assert isinstance(expression.left, StringLiteral)
        assert expression.right.operator == ".."

    def test_unary_minus_below_power(self):
        expression = _returned("return -2 ^ 2")

        assert isinstance(expression, UnaryExpression)
        assert expression.argument.operator == "^"

    def test_subtraction_is_left_associative(self):
        expression = _returned("return 10 - 4 - 3")
        assert isinstance(expression.left, BinaryExpression)
        assert isinstance(expression.right, NumericLiteral)

    def test_calls_and_members(self):
        expression = _returned('return Spring.GetModOptions().name:lower "x"')
        assert isinstance(expression, CallExpression)
        assert expression.callee.indexer == ":"


class TestTableConstructor:
    """Tests for table fields."""

    def test_field_kinds(self):
        table = _returned('return { a = 1, ["b"] = 2, 3; 4, }')

        assert isinstance(table, TableConstructor)
        kinds = [type(field) for field in table.fields]
        assert kinds == [NamedField, KeyedField, PositionalField, PositionalField]
        assert table.fields[0].key == "a"

    def test_name_without_equals_is_positional(self):
        table = _returned("return { x, y }")
        assert all(isinstance(field, PositionalField) for field in table.fields)
        assert isinstance(table.fields[0].value, Identifier)

    def test_nested_tables(self):
        table = _returned("return { armcom = { weapondefs = { laser = {} } } }")
        inner = table.fields[0].value.fields[0].value
        assert isinstance(inner.fields[0].value, TableConstructor)

    def test_unclosed_table(self):
        with pytest.raises(MalformedSourceError):
            parse_source("return { a = 1")

    def test_nesting_limit(self):
        depth = MAX_NESTING - 2
        parse_source("return { a = " + "{ " * depth + " }" * depth + " }")

        source = "return { a = " + "{ a = " * 400 + "1" + " }" * 400 + " }"
        with pytest.raises(MalformedSourceError, match="nesting too deep"):
            parse_source(source)

    def test_deep_parentheses(self):
        with pytest.raises(MalformedSourceError, match="nesting too deep"):
            parse_source("return { a = " + "(" * 500 + "1" + ")" * 500 + " }")
