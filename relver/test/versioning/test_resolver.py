"""Tests for versioning/resolver.py."""

from __future__ import annotations

from relver.core.result import Err, Ok
from relver.versioning.resolver import (
    resolve_branch,
    update_version,
    validate_version,
    version_info,
)


class TestResolveBranch:
    def test_branch(self, ctx) -> None:
        assert resolve_branch(ctx) == Ok("main")

    def test_failure_is_error(self, ctx, repo) -> None:
        repo.branch = None
        result = resolve_branch(ctx)
        assert isinstance(result, Err)
        assert result.error.kind == "git_failed"


class TestUpdate:
    def test_snaps_major_and_resets_minor(self, ctx, set_version, read_version) -> None:
        set_version("14.0.5")

        result = update_version(ctx)

        assert isinstance(result, Ok)
        assert result.value.changed
        assert result.value.current == "15.2.5"
        assert read_version(ctx.project.root_manifest_path) == "15.2.5"
        assert read_version(ctx.project.library_manifest_path) == "15.2.5"

    def test_matching_major_untouched(self, ctx, set_version, read_version) -> None:
        set_version("15.7.3")
        before = ctx.project.root_manifest_path.read_text()

        result = update_version(ctx)

        assert isinstance(result, Ok)
        assert not result.value.changed
        assert ctx.project.root_manifest_path.read_text() == before
        assert read_version(ctx.project.library_manifest_path) == "15.7.3"

    def test_idempotent(self, ctx, set_version) -> None:
        set_version("16.4.1")

        update_version(ctx)
        first = ctx.project.root_manifest_path.read_text()
        second_result = update_version(ctx)

        assert isinstance(second_result, Ok) and not second_result.value.changed
        assert ctx.project.root_manifest_path.read_text() == first

    def test_unknown_branch_is_noop(self, ctx, repo, set_version, read_version, console) -> None:
        repo.branch = "release-x"
        set_version("3.1.4")

        result = update_version(ctx)

        assert isinstance(result, Ok)
        assert result.value.policy is None
        assert read_version(ctx.project.root_manifest_path) == "3.1.4"
        assert console.find("no version policy")

    def test_unknown_branch_skips_version_parsing(
        self, ctx, repo, set_version, read_version
    ) -> None:
        repo.branch = "release-x"
        set_version("16.0.0-next.1")

        result = update_version(ctx)

        assert isinstance(result, Ok)
        assert result.value.current == "16.0.0-next.1"
        assert not result.value.changed
        assert read_version(ctx.project.root_manifest_path) == "16.0.0-next.1"

    def test_invalid_version_on_policy_branch(self, ctx, set_version) -> None:
        set_version("16.0.0-next.1")
        result = update_version(ctx)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"

    def test_missing_manifest(self, ctx) -> None:
        ctx.project.root_manifest_path.unlink()
        result = update_version(ctx)
        assert isinstance(result, Err)
        assert result.error.kind == "manifest_missing"


class TestValidate:
    def test_valid(self, ctx) -> None:
        result = validate_version(ctx)
        assert isinstance(result, Ok)
        assert result.value.version == "15.2.5"

    def test_mismatch_fails(self, ctx, set_version) -> None:
        set_version("14.0.5")
        result = validate_version(ctx)
        assert isinstance(result, Err)
        assert result.error.kind == "policy_mismatch"

    def test_unknown_branch_always_passes(self, ctx, repo, set_version) -> None:
        repo.branch = "release-x"
        set_version("99.0.0")
        result = validate_version(ctx)
        assert isinstance(result, Ok)
        assert result.value.policy is None

    def test_unknown_branch_accepts_prerelease(self, ctx, repo, set_version) -> None:
        repo.branch = "release-x"
        set_version("16.0.0-next.1")
        result = validate_version(ctx)
        assert isinstance(result, Ok)
        assert result.value.version == "16.0.0-next.1"


class TestInfo:
    def test_info(self, ctx) -> None:
        result = version_info(ctx)
        assert isinstance(result, Ok)
        assert result.value.as_dict() == {
            "branch": "main",
            "version": "15.2.5",
            "package_name": "picker-workspace",
            "has_policy": True,
            "expected_major": 15,
        }

    def test_info_unknown_branch(self, ctx, repo) -> None:
        repo.branch = "release-x"
        result = version_info(ctx)
        assert isinstance(result, Ok)
        assert result.value.has_policy is False
        assert result.value.expected_major is None

    def test_info_reports_raw_version(self, ctx, repo, set_version) -> None:
        repo.branch = "release-x"
        set_version("16.0.0-next.1")
        result = version_info(ctx)
        assert isinstance(result, Ok)
        assert result.value.version == "16.0.0-next.1"
