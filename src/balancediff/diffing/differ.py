"""
Structural differ.

``diff(previous, current)`` returns a nested mapping covering every key whose
value differs between the two objects. Object-valued keys map to their own
nested difference; every other differing key maps to ``LEAF_CHANGED``. The
values themselves are not carried: the classifier re-reads them from the
two trees.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Optional, Union

from balancediff.core.values import ObjectValue, Value, values_equal
from balancediff.decoding.decoder import js_number


class DiffMarker(Enum):
    CHANGED = "changed"

    def __repr__(self) -> str:
        return "LEAF_CHANGED"


LEAF_CHANGED = DiffMarker.CHANGED

StructuralDifference = Dict[str, Union["StructuralDifference", DiffMarker]]


def _entries(value: Optional[ObjectValue]) -> Dict[str, Value]:
    return value.entries if value is not None else {}


def _difference(before: Optional[Value], after: Optional[Value]) -> Union[StructuralDifference, DiffMarker]:
    # Recurse when one side is an object and the other is an object or absent.
    # An object replaced by a primitive (or the reverse) is a leaf change.
    sides = [side for side in (before, after) if side is not None]
    if sides and all(isinstance(side, ObjectValue) for side in sides):
        return diff(before, after)
    return LEAF_CHANGED


def diff(previous: Optional[ObjectValue], current: Optional[ObjectValue]) -> StructuralDifference:
    """Return the structural difference between two objects.

    Either side may be ``None`` (file added or removed). Keys only in
    ``previous`` come first in their original order, followed by the
    differing keys of ``current`` in its order.
    """
    before = _entries(previous)
    after = _entries(current)
    difference: StructuralDifference = {}

    for key, value in before.items():
        if key not in after:
            difference[key] = _difference(value, None)

    for key, value in after.items():
        previous_value = before.get(key)
        if values_equal(previous_value, value):
            continue
        difference[key] = _difference(previous_value, value)

    return difference


def is_array_shaped(difference: Union[StructuralDifference, DiffMarker]) -> bool:
    """True when a nested difference is keyed by positions rather than names.

    Such a mapping is reported as a single leaf change by the classifier.
    Only the first key is inspected.
    """
    if not isinstance(difference, dict) or not difference:
        return False
    first_key = next(iter(difference))
    return not math.isnan(js_number(first_key))


__all__ = ["DiffMarker", "LEAF_CHANGED", "StructuralDifference", "diff", "is_array_shaped"]
