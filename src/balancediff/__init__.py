"""Decode unit-definition table literals, diff two revisions and classify balance changes.

The four core operations:

    tree, bound_name = balancediff.decode(text)
    tree = balancediff.normalize(tree)
    difference = balancediff.diff(previous_tree, current_tree)
    records = balancediff.classify(previous_tree, current_tree, difference)

``decode`` and ``classify`` use the packaged property schema unless one is
passed explicitly.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Mapping, Optional, Tuple, Union

from balancediff.core.changes import ChangeRecord
from balancediff.core.schema import PropertySchema
from balancediff.core.settings import DiffSettings
from balancediff.core.values import ObjectValue
from balancediff.decoding.decoder import TableLiteralDecoder
from balancediff.decoding.normalizer import normalize
from balancediff.diffing.classifier import ChangeClassifier
from balancediff.diffing.differ import StructuralDifference, diff

__version__ = "0.1.0"


@lru_cache(maxsize=1)
def default_schema() -> PropertySchema:
    """The packaged property schema, loaded once."""
    from balancediff.io.loaders.schema_loader import load_property_schema

    return load_property_schema()


def decode(
    source: Union[str, bytes], schema: Optional[PropertySchema] = None
) -> Tuple[ObjectValue, Optional[str]]:
    return TableLiteralDecoder(default_schema() if schema is None else schema).decode(source)


def classify(
    previous: Optional[ObjectValue],
    current: Optional[ObjectValue],
    difference: StructuralDifference,
    schema: Optional[PropertySchema] = None,
    unit_names: Optional[Mapping[str, str]] = None,
    settings: Optional[DiffSettings] = None,
) -> List[ChangeRecord]:
    classifier = ChangeClassifier(default_schema() if schema is None else schema, unit_names, settings)
    return classifier.classify(previous, current, difference)


__all__ = ["decode", "normalize", "diff", "classify", "default_schema", "__version__"]
