"""Tunable settings for file selection and change classification."""

from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel, Field, field_validator


class DiffSettings(BaseModel):
    """Settings shared by the classifier and the batch service."""

    custom_param_keys: List[str] = Field(default_factory=lambda: ["paralyzemultiplier"])
    unit_path_pattern: str = r"^units/.*?\.lua$"
    excluded_path_fragments: List[str] = Field(default_factory=lambda: ["other"])
    variant_path_fragments: List[str] = Field(default_factory=lambda: ["Scavengers"])
    include_variants: bool = False

    model_config = {"frozen": True}

    @field_validator("unit_path_pattern")
    @classmethod
    def _valid_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid regular expression: {exc}") from exc
        return v

    def is_unit_file(self, path: str) -> bool:
        if not re.match(self.unit_path_pattern, path):
            return False
        return not any(fragment in path for fragment in self.excluded_path_fragments)

    def is_variant_file(self, path: str) -> bool:
        return any(fragment in path for fragment in self.variant_path_fragments)


__all__ = ["DiffSettings"]
