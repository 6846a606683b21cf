"""Branch version policies.

A policy pins a branch to one major version, the release line of the
upstream framework the package supports. Two rules follow from that and
live here rather than in the individual utilities:

- a version below the pinned major snaps up to it, a version above it is
  clamped down;
- commit history can only ever request a minor or patch bump.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from relver.core.config import Config
from relver.core.result import Err, Ok, Result
from relver.versioning.errors import VersioningError
from relver.versioning.model import BumpKind
from relver.versioning.semver import Version


@dataclass(frozen=True, slots=True)
class BranchPolicy:
    branch: str
    max_major: int
    default_minor: int

    def normalize(self, current: Version) -> Version:
        """Version the manifest should carry on this branch.

        A mismatched major is replaced and the minor reset to the policy
        default; the patch number is preserved. A matching version is
        returned unchanged.
        """
        if current.major == self.max_major:
            return current
        return Version(self.max_major, self.default_minor, current.patch)

    def next_version(self, current: Version, kind: BumpKind) -> Version:
        """Compute the bumped version without ever leaving ``max_major``."""
        if current.major > self.max_major:
            return Version(self.max_major, self.default_minor, 0)
        if current.major < self.max_major:
            # Reaching the pinned major wins over the commit-driven bump.
            return Version(self.max_major, self.default_minor, current.patch)
        return current.bump(kind)

    def check(self, version: Version) -> Result[Version, VersioningError]:
        """Require ``version.major == max_major``."""
        if version.major != self.max_major:
            return Err(
                VersioningError(
                    kind="policy_mismatch",
                    message=(
                        f"{self.branch} branch should have major version {self.max_major}, "
                        f"but found {version.major}"
                    ),
                    hint="run `relver-version update` to normalize the manifests",
                )
            )
        return Ok(version)

    def check_ceiling(self, version: Version) -> Result[Version, VersioningError]:
        """Require ``version.major <= max_major``."""
        if version.major > self.max_major:
            return Err(
                VersioningError(
                    kind="constraint_violation",
                    message=(
                        f"new version {version} would violate major version "
                        f"constraint {self.max_major}"
                    ),
                )
            )
        return Ok(version)


class PolicyTable:
    """Branch name to policy mapping; unknown branches have no policy."""

    def __init__(self, policies: Iterable[BranchPolicy]) -> None:
        self._by_branch: Mapping[str, BranchPolicy] = {p.branch: p for p in policies}

    @classmethod
    def from_config(cls, config: Config) -> PolicyTable:
        return cls(
            BranchPolicy(branch=p.branch, max_major=p.max_major, default_minor=p.default_minor)
            for p in config.policies
        )

    def lookup(self, branch: str) -> BranchPolicy | None:
        return self._by_branch.get(branch)


def compute_new_version(current: Version, kind: BumpKind, policy: BranchPolicy) -> Version:
    return policy.next_version(current, kind)
