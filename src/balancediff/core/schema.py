"""Property schema: display names, value shapes and comparison rules per property."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from balancediff.core.comparators import BuffComparator


class ValueShape(str, Enum):
    """Declared shape of a property's value."""

    STRING = "string"
    STRING_ARRAY = "string_array"
    NUMBER = "number"
    NUMBER_ARRAY = "number_array"
    BOOLEAN = "boolean"
    NUMBER_MAP = "number_map"
    ANY_MAP = "any_map"
    OBJECT = "object"


class PropertySpec(BaseModel):
    """One schema entry. Every field is optional; absent fields mean "no opinion"."""

    property_id: str
    friendly_name: Optional[str] = None
    shape: Optional[ValueShape] = None
    comparator_name: Optional[str] = None
    comparator: Optional[BuffComparator] = None
    is_balance_change: Optional[bool] = None
    is_lua_table: bool = False

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def excluded(self) -> bool:
        """Only an explicit ``False`` marks a property as not balance-relevant."""
        return self.is_balance_change is False

    @property
    def splits_string(self) -> bool:
        return self.shape in (ValueShape.STRING_ARRAY, ValueShape.NUMBER_ARRAY)


class PropertySchema(BaseModel):
    """Read-only lookup of property specs by identifier.

    Lookups try the identifier as written first, then its lower-cased form.
    """

    specs: Dict[str, PropertySpec] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @classmethod
    def from_specs(cls, specs: Iterable[PropertySpec]) -> "PropertySchema":
        return cls(specs={spec.property_id: spec for spec in specs})

    def lookup(self, property_id: str) -> Optional[PropertySpec]:
        spec = self.specs.get(property_id)
        if spec is None:
            spec = self.specs.get(property_id.lower())
        return spec

    def shape_of(self, property_id: str) -> Optional[ValueShape]:
        spec = self.lookup(property_id)
        return spec.shape if spec else None

    def items(self) -> Iterable[Tuple[str, PropertySpec]]:
        return sorted(self.specs.items())

    def __len__(self) -> int:
        return len(self.specs)

    def __contains__(self, property_id: object) -> bool:
        return isinstance(property_id, str) and self.lookup(property_id) is not None


EMPTY_SCHEMA = PropertySchema()

UnitNames = Mapping[str, str]


__all__ = [
    "ValueShape",
    "PropertySpec",
    "PropertySchema",
    "EMPTY_SCHEMA",
    "UnitNames",
]
