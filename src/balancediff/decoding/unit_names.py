"""Extraction of the unit display-name table from a language file.

Language files have the shape::

    return {
        en = {
            units = {
                names = { armcom = "Armada Commander", ... },
                descriptions = { ... },
            },
        },
    }
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from balancediff.core.values import ObjectValue, Primitive
from balancediff.decoding.decoder import TableLiteralDecoder
from balancediff.parsing.errors import MalformedSourceError

logger = logging.getLogger(__name__)


def parse_unit_names(
    source: Union[str, bytes],
    decoder: Optional[TableLiteralDecoder] = None,
    path: Optional[str] = None,
) -> Dict[str, str]:
    """Return the unit id -> display name mapping of a language file.

    The first language block is used. Non-string names are ignored.

    Raises:
        MalformedSourceError: If the file is not a table literal or has no
            ``units.names`` block
    """
    decoder = decoder or TableLiteralDecoder()
    tree, _ = decoder.decode(source, path=path)

    language = tree.first_value()
    units = language.get("units") if isinstance(language, ObjectValue) else None
    names = units.get("names") if isinstance(units, ObjectValue) else None
    if not isinstance(names, ObjectValue):
        raise MalformedSourceError("language file has no units.names block", path=path)

    unit_names: Dict[str, str] = {}
    for unit_id, value in names.entries.items():
        if isinstance(value, Primitive) and value.is_string:
            unit_names[unit_id] = value.value
        else:
            logger.debug("Ignoring non-string name for %s", unit_id)
    return unit_names


__all__ = ["parse_unit_names"]
