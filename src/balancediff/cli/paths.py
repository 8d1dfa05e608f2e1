from __future__ import annotations

"""Utilities for resolving reference-data paths, with working-directory defaults."""

from pathlib import Path

from balancediff.io.loaders.schema_loader import DEFAULT_SCHEMA_PATH

SETTINGS_FILENAME = "balancediff.yaml"


def schema_path(path: str | None) -> str:
    return path or DEFAULT_SCHEMA_PATH


def names_path(path: str | None) -> str | None:
    """Explicit path, else ``language/units_en.lua`` under the working directory if present."""
    if path:
        return path
    default = Path.cwd() / "language" / "units_en.lua"
    return str(default) if default.exists() else None


def settings_path(path: str | None) -> str | None:
    """Explicit path, else ``balancediff.yaml`` under the working directory if present."""
    if path:
        return path
    default = Path.cwd() / SETTINGS_FILENAME
    return str(default) if default.exists() else None


__all__ = ["schema_path", "names_path", "settings_path", "SETTINGS_FILENAME"]
