"""Balance Change Service: per-file pipeline, batch isolation and patch assembly."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from balancediff.core.changes import ObjectChange
from balancediff.core.patch import BalancePatch, CommitInfo, FileRevision, FileStatus
from balancediff.core.schema import PropertySchema, UnitNames
from balancediff.core.settings import DiffSettings
from balancediff.core.values import ObjectValue
from balancediff.decoding.decoder import TableLiteralDecoder
from balancediff.decoding.normalizer import normalize
from balancediff.diffing.classifier import ChangeClassifier
from balancediff.diffing.differ import diff
from balancediff.parsing.errors import DecodeError, MalformedSourceError
from balancediff.utils.logging import log_calls

logger = logging.getLogger(__name__)

Source = Union[str, bytes]


class FileFailure(BaseModel):
    """A file that could not be decoded; the rest of the batch is unaffected."""

    path: str
    error: str
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def from_error(cls, path: str, error: DecodeError) -> "FileFailure":
        if isinstance(error, MalformedSourceError):
            return cls(path=path, error=error.message, line=error.line, column=error.column)
        return cls(path=path, error=str(error))


class BatchResult(BaseModel):
    changes: List[ObjectChange] = Field(default_factory=list)
    failures: List[FileFailure] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)


def patch_for(commit: CommitInfo, changes: List[ObjectChange]) -> BalancePatch:
    return BalancePatch(
        sha=commit.sha,
        url=commit.url,
        branch=commit.branch,
        author=commit.author,
        date=commit.date,
        message=commit.message,
        changes=changes,
    )


class BalanceChangeService:
    """
    High-level service turning unit-definition revisions into change records.

    Holds the read-only reference data (schema, unit names, settings) and the
    decoder/classifier built from it. No state is kept between calls.
    """

    def __init__(
        self,
        schema: PropertySchema,
        unit_names: Optional[UnitNames] = None,
        settings: Optional[DiffSettings] = None,
    ):
        self.schema = schema
        self.settings = settings or DiffSettings()
        self.decoder = TableLiteralDecoder(schema)
        self.classifier = ChangeClassifier(schema, unit_names, self.settings)

    def load_unit_def(self, source: Source, path: Optional[str] = None) -> ObjectValue:
        """Decode and normalize one revision of a unit file.

        Raises:
            MalformedSourceError: If the source is not a valid table literal
        """
        return self._load_with_name(source, path)[0]

    def _load_with_name(self, source: Source, path: Optional[str]) -> Tuple[ObjectValue, Optional[str]]:
        tree, bound_name = self.decoder.decode(source, path=path)
        logger.debug("Decoded %s (bound name: %s)", path or "<source>", bound_name)
        return normalize(tree), bound_name

    def compare(
        self,
        previous: Optional[Source],
        current: Optional[Source],
        *,
        path: Optional[str] = None,
        variant: bool = False,
    ) -> Optional[ObjectChange]:
        """
        Compare two revisions of one unit file.

        Args:
            previous: Text before the change (None for an added file)
            current: Text after the change (None for a removed file)
            path: Source path, used in diagnostics
            variant: Mark the resulting change as belonging to a variant unit

        Returns:
            The unit's Object Change, or None when nothing balance-relevant changed

        Raises:
            MalformedSourceError: If either revision is not a valid table literal
        """
        previous_def, previous_name = self._load_with_name(previous, path) if previous is not None else (None, None)
        current_def, current_name = self._load_with_name(current, path) if current is not None else (None, None)

        records = self.classifier.classify(
            previous_def,
            current_def,
            diff(previous_def, current_def),
            fallback_name=current_name or previous_name,
        )
        unit_change = records[0] if records else None
        if not isinstance(unit_change, ObjectChange) or not unit_change.changes:
            return None
        if variant:
            unit_change = unit_change.model_copy(update={"variant": True})
        return unit_change

    def compare_revision(self, revision: FileRevision, *, variant: bool = False) -> Optional[ObjectChange]:
        previous = revision.previous if revision.status is not FileStatus.ADDED else None
        current = revision.current if revision.status is not FileStatus.REMOVED else None
        return self.compare(previous, current, path=revision.path, variant=variant)

    @log_calls()
    def process_files(self, files: Iterable[FileRevision]) -> BatchResult:
        """Process the changed files of one commit.

        Non-unit files and (unless enabled) variant files are skipped. A file
        that fails to decode is recorded as a failure and processing continues.
        """
        result = BatchResult()
        for revision in files:
            if not self.settings.is_unit_file(revision.path):
                result.skipped.append(revision.path)
                continue
            variant = self.settings.is_variant_file(revision.path)
            if variant and not self.settings.include_variants:
                result.skipped.append(revision.path)
                continue

            try:
                change = self.compare_revision(revision, variant=variant)
            except DecodeError as exc:
                logger.error("Error parsing unit definition %s: %s", revision.path, exc)
                result.failures.append(FileFailure.from_error(revision.path, exc))
                continue

            if change is not None:
                result.changes.append(change)

        logger.info(
            "Processed files: %d change(s), %d failure(s), %d skipped",
            len(result.changes),
            len(result.failures),
            len(result.skipped),
        )
        return result

    @log_calls()
    def build_patch(self, commit: CommitInfo, files: Iterable[FileRevision]) -> BalancePatch:
        """Assemble the balance patch of one commit from its changed files."""
        return patch_for(commit, self.process_files(files).changes)


__all__ = ["BalanceChangeService", "BatchResult", "FileFailure", "patch_for"]
