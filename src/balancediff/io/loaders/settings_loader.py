from __future__ import annotations

"""Loading of diff settings from YAML."""

import os
from typing import Optional

from pydantic import ValidationError

from balancediff.core.settings import DiffSettings
from balancediff.io.loaders.errors import LoaderError
from balancediff.io.loaders.yaml_files import read_yaml


def load_settings(path: Optional[str] = None) -> DiffSettings:
    """Load settings from a YAML file. A missing or absent path yields defaults.

    Expected format (every key optional):
    custom_param_keys: [paralyzemultiplier]
    unit_path_pattern: '^units/.*?\\.lua$'
    excluded_path_fragments: [other]
    variant_path_fragments: [Scavengers]
    include_variants: false
    """
    if not path or not os.path.exists(path):
        return DiffSettings()
    data = read_yaml(path)
    try:
        return DiffSettings.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid settings", cause=exc) from exc


__all__ = ["load_settings"]
