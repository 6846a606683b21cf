"""Safe version bumper.

Turns the commits since the last tag into a minor or patch bump and applies
it without ever letting the major version leave the branch policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from relver.core.result import Err, Ok, Result
from relver.versioning.commits import bump_kind_for, collect_commits
from relver.versioning.context import ReleaseContext
from relver.versioning.errors import VersioningError
from relver.versioning.manifest import ManifestUpdate, apply_version, read_manifest
from relver.versioning.model import BumpKind, CommitRange
from relver.versioning.policy import BranchPolicy
from relver.versioning.resolver import resolve_branch
from relver.versioning.semver import Version

SkipReason = Literal["no_policy", "no_commits", "unchanged"]


@dataclass(frozen=True, slots=True)
class BumpPlan:
    branch: str
    current: Version | None = None
    policy: BranchPolicy | None = None
    commits: CommitRange = field(default_factory=CommitRange)
    kind: BumpKind | None = None
    new_version: Version | None = None

    @property
    def skip_reason(self) -> SkipReason | None:
        if self.policy is None:
            return "no_policy"
        if self.commits.is_empty:
            return "no_commits"
        if self.new_version is None or self.new_version == self.current:
            return "unchanged"
        return None


@dataclass(frozen=True, slots=True)
class BumpOutcome:
    plan: BumpPlan
    updates: tuple[ManifestUpdate, ...] = ()

    @property
    def bumped(self) -> bool:
        return len(self.updates) > 0


def plan_bump(ctx: ReleaseContext) -> Result[BumpPlan, VersioningError]:
    """Work out the bump without touching any file.

    Branches without a policy are settled before the manifest is read.
    """
    branch = resolve_branch(ctx)
    if isinstance(branch, Err):
        return branch
    policy = ctx.policies.lookup(branch.value)
    if policy is None:
        return Ok(BumpPlan(branch=branch.value))

    manifest = read_manifest(ctx.project.root_manifest_path)
    if isinstance(manifest, Err):
        return manifest
    current = manifest.value.version

    commits = collect_commits(
        repo=ctx.repo,
        fallback_limit=ctx.project.config.commits.fallback_limit,
        console=ctx.console,
    )
    if commits.is_empty:
        return Ok(BumpPlan(branch=branch.value, current=current, policy=policy, commits=commits))

    kind = bump_kind_for(commits.commits)
    return Ok(
        BumpPlan(
            branch=branch.value,
            current=current,
            policy=policy,
            commits=commits,
            kind=kind,
            new_version=policy.next_version(current, kind),
        )
    )


def describe_plan(ctx: ReleaseContext, plan: BumpPlan) -> None:
    console = ctx.console
    console.print(f"Branch: {plan.branch}")
    if plan.policy is None:
        console.info(f"no version policy for branch {plan.branch}, nothing to bump")
        return

    console.print(f"Current version: {plan.current}")
    console.print(f"Major version constraint: <= {plan.policy.max_major}")
    if plan.skip_reason == "no_commits":
        console.info(f"no new commits found, keeping version {plan.current}")
        return

    console.print(f"Found {len(plan.commits.commits)} commits since {plan.commits.since_label}:")
    for commit in plan.commits.commits:
        console.print(f"  - {commit}")
    console.print(f"Recommended bump type: {plan.kind}")
    if plan.skip_reason == "unchanged":
        console.info("no version change needed")
    else:
        console.print(f"New version: {plan.new_version}")


def safe_bump(ctx: ReleaseContext) -> Result[BumpOutcome, VersioningError]:
    """Bump the manifests according to the commits since the last tag.

    A computed version above the policy ceiling is rejected before any file
    is written.
    """
    ctx.console.header("Analyzing commits for version bump")
    planned = plan_bump(ctx)
    if isinstance(planned, Err):
        return planned
    plan = planned.value
    describe_plan(ctx, plan)

    if plan.skip_reason is not None or plan.new_version is None or plan.policy is None:
        return Ok(BumpOutcome(plan=plan))

    checked = plan.policy.check_ceiling(plan.new_version)
    if isinstance(checked, Err):
        return checked

    applied = apply_version(project=ctx.project, version=plan.new_version)
    if isinstance(applied, Err):
        return applied
    for update in applied.value:
        if update.changed:
            ctx.console.print(f"Updated {update.path.name} to {plan.new_version}")

    ctx.console.success(f"version safely bumped to {plan.new_version}")
    return Ok(BumpOutcome(plan=plan, updates=tuple(applied.value)))
