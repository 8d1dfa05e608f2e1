from .changes import (
    ArrayChange,
    ChangeRecord,
    ObjectChange,
    ObjectChangeKind,
    ValueChange,
    ValueChangeKind,
)
from .schema import EMPTY_SCHEMA, PropertySchema, PropertySpec, ValueShape
from .settings import DiffSettings
from .values import ObjectValue, Primitive, PrimitiveArray, Value

__all__ = [
    "ArrayChange",
    "ChangeRecord",
    "ObjectChange",
    "ObjectChangeKind",
    "ValueChange",
    "ValueChangeKind",
    "EMPTY_SCHEMA",
    "PropertySchema",
    "PropertySpec",
    "ValueShape",
    "DiffSettings",
    "ObjectValue",
    "Primitive",
    "PrimitiveArray",
    "Value",
]
