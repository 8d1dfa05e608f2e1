"""
Change classifier.

Turns a structural difference into an ordered tree of change records, using
the property schema for display names, relevance filtering and buff/nerf
comparators.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional

from balancediff.core.changes import (
    ArrayChange,
    ChangeRecord,
    ObjectChange,
    ObjectChangeKind,
    ValueChange,
    ValueChangeKind,
)
from balancediff.core.comparators import BuffComparator, higher_is_better
from balancediff.core.schema import EMPTY_SCHEMA, PropertySchema, PropertySpec, UnitNames
from balancediff.core.settings import DiffSettings
from balancediff.core.values import (
    ObjectValue,
    Primitive,
    PrimitiveArray,
    Value,
    ieee_divide,
    is_number,
    same_value,
    to_python,
)
from balancediff.diffing.differ import StructuralDifference, is_array_shaped

logger = logging.getLogger(__name__)

CUSTOM_PARAMS_KEY = "customparams"
DAMAGE_KEY = "damage"
NAME_FIELD = "name"


class ClassifyContext(str, Enum):
    """Where the keys being classified live."""

    OBJECT = "object"
    CUSTOM_PARAMS = "custom_params"


def capitalise(text: str) -> str:
    return text[:1].upper() + text[1:]


def value_change_kind(prev: Any, new: Any, comparator: Optional[BuffComparator]) -> ValueChangeKind:
    """Classify one leaf change from plain values (``None`` = absent side)."""
    if prev is None:
        return ValueChangeKind.ADDED
    if new is None:
        return ValueChangeKind.REMOVED
    both_numbers = is_number(prev) and is_number(new)
    both_booleans = isinstance(prev, bool) and isinstance(new, bool)
    if comparator is not None and (both_numbers or both_booleans):
        return ValueChangeKind.BUFF if comparator(prev, new) else ValueChangeKind.NERF
    return ValueChangeKind.UNKNOWN


def array_change(prev: List[Any], new: List[Any]) -> ArrayChange:
    """Membership difference between two arrays; positions are ignored."""
    added = [item for item in new if not any(same_value(item, other) for other in prev)]
    removed = [item for item in prev if not any(same_value(item, other) for other in new)]
    return ArrayChange(added=added, removed=removed)


class ChangeClassifier:
    """
    Classifier from (previous, current, difference) to change records.

    The schema, unit-name table and settings are read-only and shared by
    every call; a single instance can classify any number of file pairs.

    Usage:
        classifier = ChangeClassifier(schema, unit_names)
        records = classifier.classify(previous, current, diff(previous, current))
    """

    def __init__(
        self,
        schema: Optional[PropertySchema] = None,
        unit_names: Optional[UnitNames] = None,
        settings: Optional[DiffSettings] = None,
    ):
        self.schema = EMPTY_SCHEMA if schema is None else schema
        self.unit_names = dict(unit_names or {})
        self.settings = settings or DiffSettings()
        self._custom_keys = {key.lower() for key in self.settings.custom_param_keys}

    def classify(
        self,
        previous: Optional[ObjectValue],
        current: Optional[ObjectValue],
        difference: StructuralDifference,
        *,
        context: ClassifyContext = ClassifyContext.OBJECT,
        fallback_name: Optional[str] = None,
    ) -> List[ChangeRecord]:
        """Return one change record per surviving key, in difference order.

        ``fallback_name`` (the bound name of the source file) names the keys of
        this level that have no schema name, unit name or own ``name`` field.
        """
        records: List[ChangeRecord] = []
        for key, entry in difference.items():
            spec = self.schema.lookup(key)
            if spec is not None and spec.excluded:
                logger.debug("Skipping %s: not balance-relevant", key)
                continue
            if context is ClassifyContext.CUSTOM_PARAMS and key.lower() not in self._custom_keys:
                continue

            before = previous.get(key) if previous is not None else None
            after = current.get(key) if current is not None else None
            name = self._display_name(key, spec, before, after, fallback_name)

            if isinstance(entry, dict) and not is_array_shaped(entry):
                record = self._object_change(key, name, before, after, entry)
                if record is not None:
                    records.append(record)
            else:
                records.append(self._value_change(key, name, spec, before, after))
        return records

    def _display_name(
        self,
        key: str,
        spec: Optional[PropertySpec],
        before: Optional[Value],
        after: Optional[Value],
        fallback_name: Optional[str] = None,
    ) -> str:
        if spec is not None and spec.friendly_name:
            return spec.friendly_name
        if key in self.unit_names:
            return self.unit_names[key]
        for side in (after, before):
            if isinstance(side, ObjectValue):
                own_name = side.get(NAME_FIELD)
                if isinstance(own_name, Primitive) and own_name.is_string:
                    return own_name.value
                break
        if fallback_name:
            return fallback_name
        return capitalise(key)

    def _object_change(
        self,
        key: str,
        name: str,
        before: Optional[Value],
        after: Optional[Value],
        entry: StructuralDifference,
    ) -> Optional[ObjectChange]:
        context = ClassifyContext.CUSTOM_PARAMS if key == CUSTOM_PARAMS_KEY else ClassifyContext.OBJECT
        children = self.classify(
            before if isinstance(before, ObjectValue) else None,
            after if isinstance(after, ObjectValue) else None,
            entry,
            context=context,
        )
        if not children:
            return None

        if key == DAMAGE_KEY:
            children = [self._as_damage_change(child) for child in children]

        if before is None:
            kind = ObjectChangeKind.ADDED
        elif after is None:
            kind = ObjectChangeKind.REMOVED
        else:
            kind = ObjectChangeKind.MODIFIED
        return ObjectChange(property_id=key, property_name=name, change_type=kind, changes=children)

    def _as_damage_change(self, change: ChangeRecord) -> ChangeRecord:
        # Damage sub-fields are per-target multipliers: always higher is better.
        if not isinstance(change, ValueChange):
            return change
        return change.model_copy(
            update={
                "property_name": capitalise(change.property_name),
                "change_type": value_change_kind(change.prev_value, change.new_value, higher_is_better),
            }
        )

    def _value_change(
        self,
        key: str,
        name: str,
        spec: Optional[PropertySpec],
        before: Optional[Value],
        after: Optional[Value],
    ) -> ValueChange:
        prev_value = to_python(before)
        new_value = to_python(after)
        comparator = spec.comparator if spec is not None else None

        change = ValueChange(
            property_id=key,
            property_name=name,
            prev_value=prev_value,
            new_value=new_value,
            change_type=value_change_kind(prev_value, new_value, comparator),
        )
        if is_number(prev_value) and is_number(new_value):
            change.percent_change = ieee_divide(new_value - prev_value, prev_value)
        elif isinstance(before, PrimitiveArray) and isinstance(after, PrimitiveArray):
            change.array_change = array_change(prev_value, new_value)
        return change


__all__ = [
    "ChangeClassifier",
    "ClassifyContext",
    "array_change",
    "capitalise",
    "value_change_kind",
]
