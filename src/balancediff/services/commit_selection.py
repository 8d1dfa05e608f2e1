"""Selection of commits to process from a newest-first commit list."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from balancediff.core.patch import CommitInfo, FetchOptions


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _in_window(commit: CommitInfo, options: FetchOptions) -> bool:
    if commit.date is None:
        return True
    date = _as_utc(commit.date)
    if options.since is not None and date < _as_utc(options.since):
        return False
    if options.until is not None and date > _as_utc(options.until):
        return False
    return True


def select_commits(commits: Iterable[CommitInfo], options: Optional[FetchOptions] = None) -> List[CommitInfo]:
    """
    Apply fetch options to commits ordered newest first.

    - ``sha``: only that commit, when it is in the list
    - ``since``/``until``: inclusive date window (naive dates are UTC)
    - ``exclude_shas``: skipped without counting towards ``limit``
    - ``up_to_sha``: stop before reaching that commit
    - ``limit``: maximum number of commits returned
    """
    candidates = list(commits)
    if options is None:
        return candidates

    if options.sha:
        matching = [commit for commit in candidates if commit.sha == options.sha]
        if matching:
            candidates = matching

    excluded = set(options.exclude_shas)
    selected: List[CommitInfo] = []
    for commit in candidates:
        if options.limit is not None and len(selected) >= options.limit:
            break
        if commit.sha in excluded:
            continue
        if options.up_to_sha is not None and commit.sha == options.up_to_sha:
            break
        if not _in_window(commit, options):
            continue
        selected.append(commit)
    return selected


__all__ = ["select_commits"]
