from __future__ import annotations

"""Schema definitions for the YAML reference-data and manifest files."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from balancediff.core.comparators import ComparatorRegistry
from balancediff.core.patch import CommitInfo, FileStatus
from balancediff.core.schema import PropertySchema, PropertySpec, ValueShape


class PropertyEntrySpec(BaseModel):
    name: Optional[str] = None
    shape: Optional[ValueShape] = None
    comparator: Optional[str] = None
    balance_change: Optional[bool] = None
    lua_table: bool = False

    model_config = {"extra": "forbid"}

    def build(self, property_id: str, comparators: ComparatorRegistry) -> PropertySpec:
        return PropertySpec(
            property_id=property_id,
            friendly_name=self.name,
            shape=self.shape,
            comparator_name=self.comparator,
            comparator=comparators.get(self.comparator) if self.comparator else None,
            is_balance_change=self.balance_change,
            is_lua_table=self.lua_table,
        )


class PropertySchemaFileSpec(BaseModel):
    properties: Dict[str, Optional[PropertyEntrySpec]] = Field(default_factory=dict)

    def build(self, comparators: ComparatorRegistry) -> PropertySchema:
        specs = []
        for property_id, entry in self.properties.items():
            specs.append((entry or PropertyEntrySpec()).build(property_id, comparators))
        return PropertySchema.from_specs(specs)


class UnitNamesFileSpec(BaseModel):
    names: Dict[str, str] = Field(default_factory=dict)


class ManifestFileEntrySpec(BaseModel):
    """One changed file; ``before``/``after`` are paths relative to the manifest."""

    path: str
    status: Optional[FileStatus] = None
    before: Optional[str] = None
    after: Optional[str] = None

    def resolved_status(self) -> FileStatus:
        if self.status is not None:
            return self.status
        if self.before is None:
            return FileStatus.ADDED
        if self.after is None:
            return FileStatus.REMOVED
        return FileStatus.MODIFIED


class ManifestFileSpec(BaseModel):
    commit: CommitInfo
    files: List[ManifestFileEntrySpec] = Field(default_factory=list)


__all__ = [
    "PropertyEntrySpec",
    "PropertySchemaFileSpec",
    "UnitNamesFileSpec",
    "ManifestFileEntrySpec",
    "ManifestFileSpec",
]
