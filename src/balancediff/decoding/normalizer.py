"""
Domain corrections applied to a decoded unit definition before diffing.

Unit files list their weapons positionally (``weapons = { {def = "LASER"}, ... }``)
while the weapon definitions live under ``weapondefs`` keyed by name. Diffing
positional weapons produces meaningless index changes, so ``weapons`` is
re-keyed by the ``weapondefs`` keys in order.
"""

from __future__ import annotations

import logging
from typing import Dict

from balancediff.core.values import ObjectValue, PrimitiveArray, Value

logger = logging.getLogger(__name__)

WEAPONS_KEY = "weapons"
WEAPON_DEFS_KEY = "weapondefs"


def _remap_weapons(definition: ObjectValue, owner: str = "") -> ObjectValue:
    weapons = definition.get(WEAPONS_KEY)
    weapon_defs = definition.get(WEAPON_DEFS_KEY)
    if not isinstance(weapons, PrimitiveArray) or not isinstance(weapon_defs, ObjectValue):
        return definition

    names = weapon_defs.keys()
    if len(names) < weapons.size:
        logger.warning(
            "%s: %d weapon(s) but only %d weapondefs; dropping %d unmatched weapon(s)",
            owner or "<root>",
            weapons.size,
            len(names),
            weapons.size - len(names),
        )
    remapped: Dict[str, Value] = {name: weapon for name, weapon in zip(names, weapons.items)}
    return definition.replace(WEAPONS_KEY, ObjectValue(entries=remapped))


def normalize_unit_def(definition: ObjectValue, owner: str = "") -> ObjectValue:
    """Re-key positional ``weapons`` by the ordered keys of ``weapondefs``."""
    return _remap_weapons(definition, owner)


def normalize(tree: ObjectValue) -> ObjectValue:
    """Normalize a decoded file.

    The rule applies to the root object and to each unit definition held
    directly under it (``return { armcom = { ... } }``). The input is not
    modified.
    """
    tree = normalize_unit_def(tree)
    entries: Dict[str, Value] = {}
    for key, value in tree.entries.items():
        entries[key] = normalize_unit_def(value, key) if isinstance(value, ObjectValue) else value
    return ObjectValue(entries=entries)


__all__ = ["normalize", "normalize_unit_def", "WEAPONS_KEY", "WEAPON_DEFS_KEY"]
