"""
Tests for select_commits.
"""

from datetime import datetime, timezone

import pytest

from balancediff.core.patch import CommitInfo, FetchOptions
from balancediff.services.commit_selection import select_commits


@pytest.fixture
def commits():
    """Five commits, newest first, one day apart."""
    return [
        CommitInfo(sha=f"c{n}", date=datetime(2023, 5, 10 - n, 12, tzinfo=timezone.utc))
        for n in range(5)
    ]


def _shas(selected):
    return [commit.sha for commit in selected]


class TestSelectCommits:
    def test_no_options(self, commits):
        assert _shas(select_commits(commits)) == ["c0", "c1", "c2", "c3", "c4"]

    def test_limit(self, commits):
        assert _shas(select_commits(commits, FetchOptions(limit=2))) == ["c0", "c1"]

    def test_limit_zero(self, commits):
        assert select_commits(commits, FetchOptions(limit=0)) == []

    def test_excluded_do_not_count_towards_limit(self, commits):
        options = FetchOptions(limit=2, exclude_shas=["c0"])
        assert _shas(select_commits(commits, options)) == ["c1", "c2"]

    def test_up_to_sha_stops_before(self, commits):
        assert _shas(select_commits(commits, FetchOptions(up_to_sha="c2"))) == ["c0", "c1"]

    def test_excluded_up_to_sha_does_not_stop(self, commits):
        options = FetchOptions(up_to_sha="c2", exclude_shas=["c2"])
        assert _shas(select_commits(commits, options)) == ["c0", "c1", "c3", "c4"]

    def test_single_sha(self, commits):
        assert _shas(select_commits(commits, FetchOptions(sha="c3"))) == ["c3"]

    def test_unknown_sha_keeps_list(self, commits):
        assert len(select_commits(commits, FetchOptions(sha="zzz"))) == 5

    def test_date_window_is_inclusive(self, commits):
        options = FetchOptions(
            since=datetime(2023, 5, 7, 12, tzinfo=timezone.utc),
            until=datetime(2023, 5, 9, 12, tzinfo=timezone.utc),
        )
        assert _shas(select_commits(commits, options)) == ["c1", "c2", "c3"]

    def test_naive_dates_are_utc(self, commits):
        options = FetchOptions(since=datetime(2023, 5, 9, 12))
        assert _shas(select_commits(commits, options)) == ["c0", "c1"]

    def test_undated_commits_pass_the_window(self):
        options = FetchOptions(since=datetime(2030, 1, 1))
        assert _shas(select_commits([CommitInfo(sha="x")], options)) == ["x"]

    def test_negative_limit_is_rejected(self):
        with pytest.raises(ValueError):
            FetchOptions(limit=-1)
