"""
Change records produced by the classifier.

Two record kinds form an ordered tree:
- ObjectChange: a nested property whose sub-properties changed
- ValueChange: a leaf property whose value changed
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, List, Optional, Union

from pydantic import BaseModel, Field


class ObjectChangeKind(str, Enum):
    ADDED = "Added"
    REMOVED = "Removed"
    MODIFIED = "Modified"


class ValueChangeKind(str, Enum):
    ADDED = "Added"
    REMOVED = "Removed"
    BUFF = "Buff"
    NERF = "Nerf"
    UNKNOWN = "Unknown"


class ArrayChange(BaseModel):
    """Set difference between two arrays (membership, not position)."""

    added: List[Any] = Field(default_factory=list)
    removed: List[Any] = Field(default_factory=list)


class ValueChange(BaseModel):
    property_id: str
    property_name: str
    prev_value: Any = None
    new_value: Any = None
    change_type: ValueChangeKind
    percent_change: Optional[float] = None
    array_change: Optional[ArrayChange] = None


class ObjectChange(BaseModel):
    property_id: str
    property_name: str
    change_type: ObjectChangeKind
    changes: List[Union[ValueChange, "ObjectChange"]] = Field(default_factory=list)
    variant: bool = False

    def iter_value_changes(self) -> Iterator[ValueChange]:
        """Yield every leaf change in the subtree, depth first."""
        for change in self.changes:
            if isinstance(change, ObjectChange):
                yield from change.iter_value_changes()
            else:
                yield change

    def find(self, property_id: str) -> Optional["ChangeRecord"]:
        """Return the direct child record for ``property_id``, if any."""
        for change in self.changes:
            if change.property_id == property_id:
                return change
        return None


ChangeRecord = Union[ValueChange, ObjectChange]

ObjectChange.model_rebuild()


__all__ = [
    "ObjectChangeKind",
    "ValueChangeKind",
    "ArrayChange",
    "ValueChange",
    "ObjectChange",
    "ChangeRecord",
]
