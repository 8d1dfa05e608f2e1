"""Errors raised while turning table-literal source into a value tree."""

from __future__ import annotations

from typing import Optional


class DecodeError(Exception):
    """Base class for decode failures. Fatal for one source, never for a batch."""


class MalformedSourceError(DecodeError):
    """The source text is not a syntactically valid table literal."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        *,
        path: Optional[str] = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.path = path
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        where = ""
        if self.line is not None:
            where = f" at line {self.line}, column {self.column}"
        origin = f" ({self.path})" if self.path else ""
        return f"{self.message}{where}{origin}"

    def with_path(self, path: str) -> "MalformedSourceError":
        """Copy of this error annotated with the source path."""
        return MalformedSourceError(self.message, self.line, self.column, path=path)

    def __str__(self) -> str:
        return self._build_message()


__all__ = ["DecodeError", "MalformedSourceError"]
