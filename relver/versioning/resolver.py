"""Branch/version resolver.

Determines the current branch, the policy bound to it, and keeps the
manifests on the policy's major version.
"""

from __future__ import annotations

from dataclasses import dataclass

from relver.core.result import Err, Ok, Result
from relver.versioning.context import ReleaseContext
from relver.versioning.errors import VersioningError
from relver.versioning.manifest import (
    ManifestUpdate,
    apply_version,
    read_manifest,
    read_raw_manifest,
)
from relver.versioning.policy import BranchPolicy


@dataclass(frozen=True, slots=True)
class UpdateOutcome:
    branch: str
    policy: BranchPolicy | None
    previous: str
    current: str
    updates: tuple[ManifestUpdate, ...] = ()

    @property
    def changed(self) -> bool:
        return self.previous != self.current


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    branch: str
    version: str
    policy: BranchPolicy | None


@dataclass(frozen=True, slots=True)
class VersionInfo:
    branch: str
    version: str
    package_name: str
    has_policy: bool
    expected_major: int | None

    def as_dict(self) -> dict[str, object]:
        return {
            "branch": self.branch,
            "version": self.version,
            "package_name": self.package_name,
            "has_policy": self.has_policy,
            "expected_major": self.expected_major,
        }


def resolve_branch(ctx: ReleaseContext) -> Result[str, VersioningError]:
    result = ctx.repo.current_branch()
    if isinstance(result, Err):
        return Err(
            VersioningError(
                kind="git_failed",
                message=f"failed to get current branch: {result.error.message}",
                hint="run inside a git checkout with a branch checked out",
            )
        )
    return Ok(result.value)


def update_version(ctx: ReleaseContext) -> Result[UpdateOutcome, VersioningError]:
    """Move the manifests onto the branch policy's major version.

    Running it twice in a row leaves the manifests exactly as the first run
    did. On a branch without a policy the version string is never parsed.
    """
    branch = resolve_branch(ctx)
    if isinstance(branch, Err):
        return branch
    console = ctx.console
    console.print(f"Current branch: {branch.value}")

    policy = ctx.policies.lookup(branch.value)
    if policy is None:
        raw = read_raw_manifest(ctx.project.root_manifest_path)
        if isinstance(raw, Err):
            return raw
        console.print(f"Current version: {raw.value.version}")
        console.info(f"no version policy for branch {branch.value}, keeping current version")
        return Ok(
            UpdateOutcome(
                branch=branch.value,
                policy=None,
                previous=raw.value.version,
                current=raw.value.version,
            )
        )

    manifest = read_manifest(ctx.project.root_manifest_path)
    if isinstance(manifest, Err):
        return manifest
    current = manifest.value.version
    console.print(f"Current version: {current}")

    target = policy.normalize(current)
    if target == current:
        console.success(f"version already correct for branch {branch.value}: {target}")
        return Ok(
            UpdateOutcome(
                branch=branch.value, policy=policy, previous=str(target), current=str(target)
            )
        )

    console.print(
        f"{branch.value} branch must stay on major {policy.max_major}, adjusting to {target}"
    )
    applied = apply_version(project=ctx.project, version=target)
    if isinstance(applied, Err):
        return applied
    for update in applied.value:
        if update.changed:
            console.success(f"updated {update.path.name}: {update.name}@{target}")

    return Ok(
        UpdateOutcome(
            branch=branch.value,
            policy=policy,
            previous=str(current),
            current=str(target),
            updates=tuple(applied.value),
        )
    )


def validate_version(ctx: ReleaseContext) -> Result[ValidationOutcome, VersioningError]:
    """Fail when the branch has a policy and the manifest major differs."""
    branch = resolve_branch(ctx)
    if isinstance(branch, Err):
        return branch

    policy = ctx.policies.lookup(branch.value)
    if policy is None:
        raw = read_raw_manifest(ctx.project.root_manifest_path)
        if isinstance(raw, Err):
            return raw
        ctx.console.print(f"Validating version {raw.value.version} for branch {branch.value}")
        ctx.console.info(f"no version policy for branch {branch.value}, nothing to enforce")
        return Ok(ValidationOutcome(branch=branch.value, version=raw.value.version, policy=None))

    manifest = read_manifest(ctx.project.root_manifest_path)
    if isinstance(manifest, Err):
        return manifest
    version = manifest.value.version
    ctx.console.print(f"Validating version {version} for branch {branch.value}")

    checked = policy.check(version)
    if isinstance(checked, Err):
        return checked

    ctx.console.success(f"version {version} is valid for branch {branch.value}")
    return Ok(ValidationOutcome(branch=branch.value, version=str(version), policy=policy))


def version_info(ctx: ReleaseContext) -> Result[VersionInfo, VersioningError]:
    branch = resolve_branch(ctx)
    if isinstance(branch, Err):
        return branch
    raw = read_raw_manifest(ctx.project.root_manifest_path)
    if isinstance(raw, Err):
        return raw
    policy = ctx.policies.lookup(branch.value)
    return Ok(
        VersionInfo(
            branch=branch.value,
            version=raw.value.version,
            package_name=raw.value.name,
            has_policy=policy is not None,
            expected_major=policy.max_major if policy is not None else None,
        )
    )
