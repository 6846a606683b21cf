"""Tests for versioning/policy.py."""

from __future__ import annotations

import pytest

from relver.core.config import Config, PolicyConfig
from relver.core.result import Err, Ok
from relver.versioning.policy import BranchPolicy, PolicyTable, compute_new_version
from relver.versioning.semver import Version

MAIN = BranchPolicy(branch="main", max_major=15, default_minor=2)


class TestComputeNewVersion:
    @pytest.mark.parametrize("kind", ["minor", "patch"])
    @pytest.mark.parametrize("current", [Version(0, 0, 0), Version(14, 0, 5), Version(14, 9, 9)])
    def test_below_ceiling_snaps_up(self, current: Version, kind: str) -> None:
        new = compute_new_version(current, kind, MAIN)  # type: ignore[arg-type]
        assert new == Version(15, 2, current.patch)

    @pytest.mark.parametrize("kind", ["minor", "patch"])
    @pytest.mark.parametrize("current", [Version(16, 0, 0), Version(17, 4, 3)])
    def test_above_ceiling_clamps(self, current: Version, kind: str) -> None:
        new = compute_new_version(current, kind, MAIN)  # type: ignore[arg-type]
        assert new == Version(15, 2, 0)

    def test_at_ceiling_minor(self) -> None:
        assert compute_new_version(Version(15, 2, 5), "minor", MAIN) == Version(15, 3, 0)

    def test_at_ceiling_patch(self) -> None:
        assert compute_new_version(Version(15, 2, 5), "patch", MAIN) == Version(15, 2, 6)

    def test_never_exceeds_ceiling(self) -> None:
        for major in range(0, 20):
            for kind in ("minor", "patch"):
                new = compute_new_version(Version(major, 7, 3), kind, MAIN)  # type: ignore[arg-type]
                assert new.major == MAIN.max_major


class TestNormalize:
    def test_mismatch_resets_minor_keeps_patch(self) -> None:
        assert MAIN.normalize(Version(14, 0, 5)) == Version(15, 2, 5)
        assert MAIN.normalize(Version(16, 8, 1)) == Version(15, 2, 1)

    def test_match_is_unchanged(self) -> None:
        assert MAIN.normalize(Version(15, 7, 3)) == Version(15, 7, 3)

    def test_idempotent(self) -> None:
        once = MAIN.normalize(Version(14, 0, 5))
        assert MAIN.normalize(once) == once


class TestChecks:
    def test_check(self) -> None:
        assert MAIN.check(Version(15, 0, 0)) == Ok(Version(15, 0, 0))
        result = MAIN.check(Version(14, 0, 0))
        assert isinstance(result, Err)
        assert result.error.kind == "policy_mismatch"
        assert "major version 15" in result.error.message

    def test_check_ceiling(self) -> None:
        assert isinstance(MAIN.check_ceiling(Version(14, 0, 0)), Ok)
        result = MAIN.check_ceiling(Version(16, 0, 0))
        assert isinstance(result, Err)
        assert result.error.kind == "constraint_violation"


class TestPolicyTable:
    def test_default_config_defines_main_only(self) -> None:
        table = PolicyTable.from_config(Config())
        assert table.lookup("main") == MAIN
        assert table.lookup("release-x") is None
        assert table.lookup("lts") is None

    def test_second_policy(self) -> None:
        config = Config(
            policies=(
                PolicyConfig(branch="main", max_major=16, default_minor=0),
                PolicyConfig(branch="lts", max_major=15, default_minor=2),
            )
        )
        table = PolicyTable.from_config(config)
        assert table.lookup("lts") == BranchPolicy(branch="lts", max_major=15, default_minor=2)
        assert table.lookup("main") == BranchPolicy(branch="main", max_major=16, default_minor=0)
