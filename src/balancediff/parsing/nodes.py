"""
Syntax tree for table-literal sources.

Only the subset of Lua that unit-definition files use is modelled:
local bindings, assignments, call statements and a return statement,
over the full expression grammar minus function literals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class Node:
    line: int = 0
    column: int = 0


# Expressions


@dataclass
class NilLiteral(Node):
    pass


@dataclass
class BooleanLiteral(Node):
    value: bool = False


@dataclass
class NumericLiteral(Node):
    value: Union[int, float] = 0
    raw: str = ""


@dataclass
class StringLiteral(Node):
    value: str = ""


@dataclass
class VarargLiteral(Node):
    pass


@dataclass
class Identifier(Node):
    name: str = ""


@dataclass
class MemberExpression(Node):
    """``base.name`` or ``base:name`` (method form)."""

    base: Optional["Expression"] = None
    name: str = ""
    indexer: str = "."


@dataclass
class IndexExpression(Node):
    base: Optional["Expression"] = None
    index: Optional["Expression"] = None


@dataclass
class CallExpression(Node):
    callee: Optional["Expression"] = None
    arguments: List["Expression"] = field(default_factory=list)


@dataclass
class UnaryExpression(Node):
    operator: str = ""
    argument: Optional["Expression"] = None


@dataclass
class BinaryExpression(Node):
    operator: str = ""
    left: Optional["Expression"] = None
    right: Optional["Expression"] = None


@dataclass
class ParenthesizedExpression(Node):
    expression: Optional["Expression"] = None


# Table constructor fields


@dataclass
class NamedField(Node):
    """``name = value``"""

    key: str = ""
    value: Optional["Expression"] = None


@dataclass
class KeyedField(Node):
    """``[key] = value``"""

    key: Optional["Expression"] = None
    value: Optional["Expression"] = None


@dataclass
class PositionalField(Node):
    """A bare ``value`` with an implicit sequential index."""

    value: Optional["Expression"] = None


TableField = Union[NamedField, KeyedField, PositionalField]


@dataclass
class TableConstructor(Node):
    fields: List[TableField] = field(default_factory=list)


Expression = Union[
    NilLiteral,
    BooleanLiteral,
    NumericLiteral,
    StringLiteral,
    VarargLiteral,
    Identifier,
    MemberExpression,
    IndexExpression,
    CallExpression,
    UnaryExpression,
    BinaryExpression,
    ParenthesizedExpression,
    TableConstructor,
]


# Statements


@dataclass
class LocalStatement(Node):
    names: List[str] = field(default_factory=list)
    init: List[Expression] = field(default_factory=list)


@dataclass
class AssignmentStatement(Node):
    targets: List[Expression] = field(default_factory=list)
    init: List[Expression] = field(default_factory=list)


@dataclass
class CallStatement(Node):
    expression: Optional[CallExpression] = None


@dataclass
class ReturnStatement(Node):
    arguments: List[Expression] = field(default_factory=list)


Statement = Union[LocalStatement, AssignmentStatement, CallStatement, ReturnStatement]


@dataclass
class Chunk(Node):
    body: List[Statement] = field(default_factory=list)

    def return_statement(self) -> Optional[ReturnStatement]:
        for statement in self.body:
            if isinstance(statement, ReturnStatement):
                return statement
        return None


__all__ = [
    "Node",
    "NilLiteral",
    "BooleanLiteral",
    "NumericLiteral",
    "StringLiteral",
    "VarargLiteral",
    "Identifier",
    "MemberExpression",
    "IndexExpression",
    "CallExpression",
    "UnaryExpression",
    "BinaryExpression",
    "ParenthesizedExpression",
    "NamedField",
    "KeyedField",
    "PositionalField",
    "TableField",
    "TableConstructor",
    "Expression",
    "LocalStatement",
    "AssignmentStatement",
    "CallStatement",
    "ReturnStatement",
    "Statement",
    "Chunk",
]
