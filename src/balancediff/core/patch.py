"""Commit-level records: who changed what, and when."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from balancediff.core.changes import ObjectChange


class Author(BaseModel):
    name: str
    avatar_url: Optional[str] = None
    profile_link: Optional[str] = None


class CommitInfo(BaseModel):
    """Metadata of one commit, as supplied by the fetch layer."""

    sha: str
    url: Optional[str] = None
    branch: Optional[str] = None
    author: Optional[Author] = None
    date: Optional[datetime] = None
    message: str = ""


class FileStatus(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class FileRevision(BaseModel):
    """One changed file of a commit with the text of both revisions.

    ``previous`` is absent for added files and ``current`` for removed ones.
    """

    path: str
    status: FileStatus = FileStatus.MODIFIED
    previous: Optional[Union[str, bytes]] = None
    current: Optional[Union[str, bytes]] = None


class BalancePatch(BaseModel):
    """All unit balance changes introduced by one commit."""

    sha: str
    url: Optional[str] = None
    branch: Optional[str] = None
    author: Optional[Author] = None
    date: Optional[datetime] = None
    message: str = ""
    changes: List[ObjectChange] = Field(default_factory=list)


class FetchOptions(BaseModel):
    """Filters applied to a newest-first commit list."""

    since: Optional[datetime] = None
    until: Optional[datetime] = None
    exclude_shas: List[str] = Field(default_factory=list)
    up_to_sha: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=0)
    sha: Optional[str] = None


__all__ = ["Author", "CommitInfo", "FileStatus", "FileRevision", "BalancePatch", "FetchOptions"]
