"""Service Layer: per-file pipeline, batch processing and commit selection."""

from __future__ import annotations

from .balance_service import BalanceChangeService, BatchResult, FileFailure, patch_for
from .commit_selection import select_commits

__all__ = [
    "BalanceChangeService",
    "BatchResult",
    "FileFailure",
    "patch_for",
    "select_commits",
]
