"""Tests for versioning/commits.py."""

from __future__ import annotations

import pytest

from relver.output.console import MockConsole
from relver.versioning.commits import (
    bump_kind_for,
    categorize,
    classify_commit,
    collect_commits,
    parse_commit_line,
)
from relver.versioning.model import Commit


def commits(*messages: str) -> list[Commit]:
    return [Commit(sha=f"{i:07x}", message=m) for i, m in enumerate(messages)]


class TestParse:
    def test_parse_line(self) -> None:
        assert parse_commit_line("abc1234 feat: add x") == Commit("abc1234", "feat: add x")

    def test_parse_line_without_message(self) -> None:
        assert parse_commit_line("abc1234") == Commit("abc1234", "")


class TestClassify:
    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("feat: add picker", "feature"),
            ("feat(ui): add picker", "feature"),
            ("FEAT: shouting", "feature"),
            ("fix: null check", "fix"),
            ("fix(core): null check", "fix"),
            ("feat!: drop old api", "breaking"),
            ("refactor!: rename", "breaking"),
            ("chore: deps\n\nBREAKING CHANGE: node 18", "breaking"),
            ("docs: readme", "other"),
            ("perf: faster", "other"),
            ("prefix fix: not at start", "other"),
            ("feature: not a conventional type", "other"),
        ],
    )
    def test_categories(self, message: str, expected: str) -> None:
        assert classify_commit(message) == expected

    def test_breaking_beats_feature(self) -> None:
        assert classify_commit("feat: add x (breaking change for callers)") == "breaking"

    def test_hash_is_not_classified(self) -> None:
        line = parse_commit_line("fixabcd docs: readme")
        assert classify_commit(line.message) == "other"


class TestBumpKind:
    def test_feature_is_minor(self) -> None:
        assert bump_kind_for(commits("fix: a", "feat: b")) == "minor"

    def test_breaking_is_minor_not_major(self) -> None:
        assert bump_kind_for(commits("feat!: rewrite", "BREAKING CHANGE: everything")) == "minor"

    def test_fix_is_patch(self) -> None:
        assert bump_kind_for(commits("fix: a", "docs: b")) == "patch"

    def test_other_only_is_patch(self) -> None:
        assert bump_kind_for(commits("chore: a")) == "patch"
        assert bump_kind_for([]) == "patch"


class TestCategorize:
    def test_buckets_preserve_order(self) -> None:
        buckets = categorize(
            commits("feat: a", "fix: b", "feat!: c", "docs: d", "feat(x): e", "fix: f")
        )
        assert [c.message for c in buckets.breaking] == ["feat!: c"]
        assert [c.message for c in buckets.features] == ["feat: a", "feat(x): e"]
        assert [c.message for c in buckets.fixes] == ["fix: b", "fix: f"]
        assert [c.message for c in buckets.other] == ["docs: d"]


class TestCollect:
    def test_since_last_tag(self, repo) -> None:
        repo.tags = ["main-v15.2.5"]
        repo.log = ["abc1234 feat: add x", "def5678 fix: y"]

        result = collect_commits(repo=repo, fallback_limit=10)

        assert result.last_tag == "main-v15.2.5"
        assert result.commits == (Commit("abc1234", "feat: add x"), Commit("def5678", "fix: y"))
        assert repo.calls == [("log", "main-v15.2.5", "None", "True")]

    def test_without_tag_uses_fallback_limit(self, repo) -> None:
        repo.log = [f"{i:07x} chore: {i}" for i in range(15)]
        console = MockConsole()

        result = collect_commits(repo=repo, fallback_limit=10, console=console)

        assert result.last_tag is None
        assert result.since_label == "beginning"
        assert len(result.commits) == 10
        assert repo.calls == [("log", "None", "10", "True")]
        assert console.find("no previous tag")

    def test_git_failure_is_empty(self, repo) -> None:
        repo.tags = ["main-v15.2.5"]
        repo.log_fails = True
        console = MockConsole()

        result = collect_commits(repo=repo, fallback_limit=10, console=console)

        assert result.is_empty
        assert console.has_warning()
