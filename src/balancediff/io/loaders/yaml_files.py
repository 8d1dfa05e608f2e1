from __future__ import annotations

from typing import Any, Dict

import yaml

from balancediff.io.loaders.errors import LoaderError


def read_yaml(path: str) -> Dict[str, Any]:
    """Read a YAML mapping; an empty file is an empty mapping."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise LoaderError(path, "Cannot read file", cause=exc) from exc
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Invalid YAML", cause=exc) from exc
    if not isinstance(data, dict):
        raise LoaderError(path, f"Expected a mapping at the top level, got {type(data).__name__}")
    return data
