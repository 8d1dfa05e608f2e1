from __future__ import annotations

"""Loading of the property schema from YAML."""

import logging
import os
from typing import Optional

from pydantic import ValidationError

from balancediff.core.comparators import ComparatorRegistry, default_comparators
from balancediff.core.file_specs import PropertySchemaFileSpec
from balancediff.core.schema import PropertySchema
from balancediff.io.loaders.errors import LoaderError
from balancediff.io.loaders.yaml_files import read_yaml

logger = logging.getLogger(__name__)

PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_SCHEMA_PATH = os.path.join(PACKAGE_ROOT, "data", "unitdef_props.yaml")


def load_property_schema(
    path: Optional[str] = None,
    comparators: Optional[ComparatorRegistry] = None,
) -> PropertySchema:
    """Load a property schema file; the packaged catalog when ``path`` is None.

    Expected format:
    properties:
      maxdamage:
        name: Base HP
        shape: number
        comparator: higher_is_better
        balance_change: true
    """
    fp = path or DEFAULT_SCHEMA_PATH
    comparators = comparators or default_comparators()
    data = read_yaml(fp)
    try:
        spec = PropertySchemaFileSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(fp, "Invalid property schema", cause=exc) from exc
    try:
        schema = spec.build(comparators)
    except KeyError as exc:
        raise LoaderError(fp, "Unknown comparator in property schema", cause=exc) from exc
    logger.debug("Loaded %d properties from %s", len(schema), fp)
    return schema


__all__ = ["load_property_schema", "DEFAULT_SCHEMA_PATH"]
