"""Errors raised while loading reference data, settings and manifests."""

from __future__ import annotations

import os
from typing import List, Optional

import yaml
from pydantic import ValidationError

MAX_VALIDATION_SNIPPETS = 3


def _display_path(path: str) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:  # pragma: no cover - different drive on Windows
        return path


def _yaml_line(cause: Optional[Exception]) -> Optional[int]:
    if isinstance(cause, yaml.MarkedYAMLError) and cause.problem_mark is not None:
        return cause.problem_mark.line + 1
    return None


def validation_snippets(error: ValidationError, limit: int = MAX_VALIDATION_SNIPPETS) -> List[str]:
    """``loc: msg`` lines for the first ``limit`` errors, then a count of the rest."""
    details = error.errors()
    snippets = []
    for detail in details[:limit]:
        loc = ".".join(str(part) for part in detail.get("loc", ())) or "<root>"
        snippets.append(f"{loc}: {detail.get('msg') or 'validation error'}")
    if len(details) > limit:
        snippets.append(f"... ({len(details) - limit} more)")
    return snippets


class LoaderError(RuntimeError):
    """A schema, names, settings or manifest file could not be loaded.

    ``line`` is the 1-based line of a YAML syntax error, else None.
    """

    def __init__(self, file_path: str, message: str, *, cause: Optional[Exception] = None):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        self.line = _yaml_line(cause)
        super().__init__(str(self))

    def __str__(self) -> str:
        where = _display_path(self.file_path)
        if self.line is not None:
            where = f"{where}:{self.line}"
        text = f"{self.message} ({where})"
        if isinstance(self.cause, ValidationError):
            return f"{text}: " + "; ".join(validation_snippets(self.cause))
        if isinstance(self.cause, yaml.MarkedYAMLError) and self.cause.problem:
            return f"{text}: {self.cause.problem}"
        if self.cause is not None:
            return f"{text}: {self.cause}"
        return text


__all__ = ["LoaderError", "validation_snippets"]
