from __future__ import annotations

"""Loading of the unit display-name table.

Either a language file (``units_en.lua``) or a YAML file:
names:
  armcom: Armada Commander
"""

from typing import Dict, Optional

from pydantic import ValidationError

from balancediff.core.file_specs import UnitNamesFileSpec
from balancediff.decoding.unit_names import parse_unit_names
from balancediff.io.loaders.errors import LoaderError
from balancediff.io.loaders.yaml_files import read_yaml
from balancediff.parsing.errors import DecodeError

LUA_SUFFIX = ".lua"


def load_unit_names(path: Optional[str]) -> Dict[str, str]:
    if not path:
        return {}
    if path.endswith(LUA_SUFFIX):
        try:
            with open(path, "rb") as f:
                source = f.read()
        except OSError as exc:
            raise LoaderError(path, "Cannot read file", cause=exc) from exc
        try:
            return parse_unit_names(source, path=path)
        except DecodeError as exc:
            raise LoaderError(path, "Invalid language file", cause=exc) from exc

    data = read_yaml(path)
    try:
        spec = UnitNamesFileSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid unit names file", cause=exc) from exc
    return dict(spec.names)


__all__ = ["load_unit_names"]
