"""
Typed value tree produced by the table-literal decoder.

A decoded table literal is one of three node kinds, decided once at decode time:
- Primitive: a string, number or boolean leaf
- PrimitiveArray: an ordered sequence of nodes (usually primitives)
- ObjectValue: a mapping from property identifier to node, in source order

Nodes are frozen; later stages build new nodes instead of mutating.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

Scalar = Union[bool, int, float, str]


class Primitive(BaseModel):
    """A string, number or boolean leaf."""

    value: Scalar

    model_config = {"frozen": True}

    @property
    def is_number(self) -> bool:
        return is_number(self.value)

    @property
    def is_boolean(self) -> bool:
        return isinstance(self.value, bool)

    @property
    def is_string(self) -> bool:
        return isinstance(self.value, str)


class PrimitiveArray(BaseModel):
    """Positional values of a table constructor, or a split string property."""

    items: Tuple["Value", ...] = ()

    model_config = {"frozen": True}

    @property
    def size(self) -> int:
        return len(self.items)


class ObjectValue(BaseModel):
    """String-keyed table. Key order follows the source text."""

    entries: Dict[str, "Value"] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def get(self, key: str) -> Optional["Value"]:
        return self.entries.get(key)

    def keys(self) -> List[str]:
        return list(self.entries.keys())

    def first_value(self) -> Optional["Value"]:
        for value in self.entries.values():
            return value
        return None

    def replace(self, key: str, value: "Value") -> "ObjectValue":
        """Return a copy with ``key`` bound to ``value``, keeping key order."""
        entries = dict(self.entries)
        entries[key] = value
        return ObjectValue(entries=entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries


Value = Union[Primitive, PrimitiveArray, ObjectValue]

PrimitiveArray.model_rebuild()
ObjectValue.model_rebuild()


def is_number(value: Any) -> bool:
    """True for int/float values; booleans are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _sign(value: Union[int, float]) -> float:
    if isinstance(value, int):
        return -1.0 if value < 0 else 1.0
    return math.copysign(1.0, value)


def ieee_divide(numerator: Union[int, float], denominator: Union[int, float]) -> float:
    """Float division that yields +/-inf or NaN instead of raising.

    Covers a zero denominator and quotients of integers too large for a float.
    """
    if denominator == 0:
        if numerator == 0 or numerator != numerator:
            return math.nan
        return math.copysign(math.inf, _sign(numerator) * _sign(denominator))
    try:
        return numerator / denominator
    except OverflowError:
        return math.copysign(math.inf, _sign(numerator) * _sign(denominator))


def same_value(a: Any, b: Any) -> bool:
    """Same-value-zero equality on plain Python values.

    Booleans never equal numbers, NaN equals NaN, and containers compare
    element-wise (mappings ignore key order).
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        return a == b or (a != a and b != b)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(same_value(a[k], b[k]) for k in a)
    return a == b


def values_equal(a: Optional[Value], b: Optional[Value]) -> bool:
    """Deep equality of two value nodes (``None`` stands for an absent side)."""
    if a is None or b is None:
        return a is b
    if type(a) is not type(b):
        return False
    if isinstance(a, Primitive):
        return same_value(a.value, b.value)
    if isinstance(a, PrimitiveArray):
        return a.size == b.size and all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if a.entries.keys() != b.entries.keys():
        return False
    return all(values_equal(a.entries[k], b.entries[k]) for k in a.entries)


def to_python(value: Optional[Value]) -> Any:
    """Convert a value node into plain dict/list/scalar data."""
    if value is None:
        return None
    if isinstance(value, Primitive):
        return value.value
    if isinstance(value, PrimitiveArray):
        return [to_python(item) for item in value.items]
    return {key: to_python(item) for key, item in value.entries.items()}


def from_python(data: Any) -> Value:
    """Build a value node from plain data (dict -> object, list/tuple -> array)."""
    if isinstance(data, (Primitive, PrimitiveArray, ObjectValue)):
        return data
    if isinstance(data, dict):
        return ObjectValue(entries={str(k): from_python(v) for k, v in data.items()})
    if isinstance(data, (list, tuple)):
        return PrimitiveArray(items=tuple(from_python(item) for item in data))
    if isinstance(data, (bool, int, float, str)):
        return Primitive(value=data)
    raise TypeError(f"Cannot convert {type(data).__name__} to a value node")


__all__ = [
    "Scalar",
    "Primitive",
    "PrimitiveArray",
    "ObjectValue",
    "Value",
    "is_number",
    "ieee_divide",
    "same_value",
    "values_equal",
    "to_python",
    "from_python",
]
