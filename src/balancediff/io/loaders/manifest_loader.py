from __future__ import annotations

"""Loading of batch manifests: one commit and the revisions of its changed files.

Expected format:
commit:
  sha: 3f2a9c1
  author: {name: someone}
  date: 2023-05-01T12:00:00Z
  message: Buff Pawn HP
files:
  - path: units/ArmBots/armpw.lua
    before: before/armpw.lua
    after: after/armpw.lua
"""

import os
from typing import List, Optional, Tuple

from pydantic import ValidationError

from balancediff.core.file_specs import ManifestFileSpec
from balancediff.core.patch import CommitInfo, FileRevision
from balancediff.io.loaders.errors import LoaderError
from balancediff.io.loaders.yaml_files import read_yaml


def _read_revision(manifest_path: str, relative: Optional[str]) -> Optional[bytes]:
    if relative is None:
        return None
    fp = os.path.join(os.path.dirname(os.path.abspath(manifest_path)), relative)
    try:
        with open(fp, "rb") as f:
            return f.read()
    except OSError as exc:
        raise LoaderError(manifest_path, f"Cannot read revision '{relative}'", cause=exc) from exc


def load_manifest(path: str) -> Tuple[CommitInfo, List[FileRevision]]:
    """Load a manifest; revision files are read as raw bytes."""
    data = read_yaml(path)
    try:
        spec = ManifestFileSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid manifest", cause=exc) from exc

    files: List[FileRevision] = []
    for entry in spec.files:
        files.append(
            FileRevision(
                path=entry.path,
                status=entry.resolved_status(),
                previous=_read_revision(path, entry.before),
                current=_read_revision(path, entry.after),
            )
        )
    return spec.commit, files


__all__ = ["load_manifest"]
