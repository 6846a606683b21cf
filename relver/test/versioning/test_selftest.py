"""Tests for versioning/selftest.py."""

from __future__ import annotations

from datetime import date

from relver.versioning.selftest import PIPELINE_STEPS, check_bump_rules, run_selftest

TODAY = date(2026, 10, 16)


def test_bump_rules_match_expectations() -> None:
    rules = check_bump_rules()
    assert [r.commit_type for r in rules] == ["feat", "fix", "perf", "feat!", "docs", "chore"]
    assert all(r.matches for r in rules)
    assert all(r.actual in ("minor", "patch") for r in rules)


def test_runs_every_step_without_publishing(ctx, repo, console) -> None:
    repo.tags = ["main-v15.2.5"]
    repo.log = ["aaa1111 feat: a"]
    before = ctx.project.root_manifest_path.read_text()

    report = run_selftest(ctx, today=TODAY)

    assert [s.title for s in report.steps] == [
        "Update package version for branch",
        "Validate version for branch",
        "Safe version bump (simulation)",
        "Generate changelog (simulation)",
        "Final validation",
    ]
    assert report.failed == []
    assert ctx.project.root_manifest_path.read_text() == before
    assert not ctx.project.changelog_path.exists()
    assert not any(call[0] in {"add", "commit", "tag"} for call in repo.calls)
    assert console.find("New version: 15.3.0")
    assert console.find("would tag: main-v15.3.0")
    assert console.find("no commit type can cause a major version bump")
    for i, title in enumerate(PIPELINE_STEPS, start=1):
        assert console.find(f"{i}. {title}")


def test_update_step_still_normalizes(ctx, set_version, read_version) -> None:
    set_version("14.0.5")

    report = run_selftest(ctx, today=TODAY)

    assert report.failed == []
    assert read_version(ctx.project.root_manifest_path) == "15.2.5"


def test_failures_do_not_stop_later_steps(ctx, repo, console) -> None:
    repo.branch = None

    report = run_selftest(ctx, today=TODAY)

    assert len(report.steps) == 5
    assert len(report.failed) == 5
    assert console.has_error()
    assert console.find("integration status: 5 step(s) failed")
    assert console.find(f"8. {PIPELINE_STEPS[-1]}")


def test_unknown_branch_prerelease_passes(ctx, repo, set_version, read_version) -> None:
    repo.branch = "release-x"
    repo.log = ["aaa1111 feat: a"]
    set_version("16.0.0-next.1")

    report = run_selftest(ctx, today=TODAY)

    assert report.failed == []
    assert read_version(ctx.project.root_manifest_path) == "16.0.0-next.1"
