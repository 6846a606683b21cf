"""Changelog generator.

Renders the commits since the last tag as a dated entry, inserts it at the
top of CHANGELOG.md, commits the file and tags the release.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from relver.core.result import Err, Ok, Result
from relver.platform.files import atomic_write_text, read_text_if_exists
from relver.versioning.commits import categorize, collect_commits
from relver.versioning.context import ReleaseContext
from relver.versioning.errors import VersioningError
from relver.versioning.manifest import read_manifest
from relver.versioning.model import Commit, CommitBuckets, CommitRange
from relver.versioning.policy import BranchPolicy
from relver.versioning.resolver import resolve_branch
from relver.versioning.semver import Version

DEFAULT_HEADER = (
    "# Changelog\n\nAll notable changes to this project will be documented in this file.\n"
)
ENTRY_MARKER = "## ["

_ENTRY_RE = re.compile(r"^## \[", re.MULTILINE)

_SECTIONS: tuple[tuple[str, str], ...] = (
    ("breaking", "Breaking Changes"),
    ("features", "Features"),
    ("fixes", "Bug Fixes"),
    ("other", "Other Changes"),
)

StepName = Literal["write", "stage", "commit", "tag"]


def release_tag_name(branch: str, version: Version) -> str:
    return f"{branch}-v{version}"


def release_commit_message(version: Version) -> str:
    return f"chore(release): add changelog for {version} [skip ci]"


def release_tag_message(version: Version, branch: str) -> str:
    return f"Release {version} for {branch} branch"


def _bullet(commit: Commit) -> str:
    return f"- {commit.message} ({commit.sha})"


def render_entry(
    *,
    version: Version,
    buckets: CommitBuckets,
    framework: str,
    today: date,
) -> str:
    lines: list[str] = []
    lines.append(f"{ENTRY_MARKER}{version}] - {today.isoformat()}")
    lines.append("")
    lines.append(f"### {framework} Compatibility")
    lines.append("")

    for attr, title in _SECTIONS:
        commits: tuple[Commit, ...] = getattr(buckets, attr)
        if not commits:
            continue
        lines.append(f"### {title}")
        lines.extend(_bullet(c) for c in commits)
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def insert_entry(document: str, entry: str) -> str:
    """Insert ``entry`` below the header and above the newest entry.

    The header is everything before the first ``## [`` line, however many
    lines it has. A document without entries keeps its whole text as the
    header; an empty document gets the default header.
    """
    if not document.strip():
        document = DEFAULT_HEADER

    m = _ENTRY_RE.search(document)
    if m is None:
        head, tail = document, ""
    else:
        head, tail = document[: m.start()], document[m.start() :]

    parts = [p for p in (head.rstrip("\n"), entry.strip("\n"), tail.rstrip("\n")) if p]
    return "\n\n".join(parts) + "\n"


@dataclass(frozen=True, slots=True)
class ChangelogPlan:
    branch: str
    version: Version | None = None
    policy: BranchPolicy | None = None
    commits: CommitRange = field(default_factory=CommitRange)
    buckets: CommitBuckets = field(default_factory=CommitBuckets)
    entry: str | None = None

    @property
    def tag_name(self) -> str | None:
        if self.version is None:
            return None
        return release_tag_name(self.branch, self.version)


@dataclass(frozen=True, slots=True)
class PublishStep:
    name: StepName
    ok: bool
    detail: str
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class PublishReport:
    steps: tuple[PublishStep, ...] = ()

    @property
    def failed_steps(self) -> list[StepName]:
        return [s.name for s in self.steps if not s.ok]

    @property
    def ok(self) -> bool:
        return not self.failed_steps

    def step(self, name: StepName) -> PublishStep | None:
        return next((s for s in self.steps if s.name == name), None)


@dataclass(frozen=True, slots=True)
class ChangelogOutcome:
    plan: ChangelogPlan
    report: PublishReport | None = None


def plan_changelog(
    ctx: ReleaseContext,
    *,
    today: date,
    version: Version | None = None,
) -> Result[ChangelogPlan, VersioningError]:
    """Render the entry for ``version`` (default: the manifest version).

    ``entry`` stays None when the branch has no policy or there are no new
    commits. Without a policy the manifest is not read at all.
    """
    branch = resolve_branch(ctx)
    if isinstance(branch, Err):
        return branch
    policy = ctx.policies.lookup(branch.value)
    if policy is None:
        return Ok(ChangelogPlan(branch=branch.value))

    if version is None:
        manifest = read_manifest(ctx.project.root_manifest_path)
        if isinstance(manifest, Err):
            return manifest
        version = manifest.value.version

    commits = collect_commits(
        repo=ctx.repo,
        fallback_limit=ctx.project.config.commits.fallback_limit,
        console=ctx.console,
    )
    if commits.is_empty:
        return Ok(
            ChangelogPlan(branch=branch.value, version=version, policy=policy, commits=commits)
        )

    buckets = categorize(commits.commits)
    entry = render_entry(
        version=version,
        buckets=buckets,
        framework=ctx.project.config.changelog.framework,
        today=today,
    )
    return Ok(
        ChangelogPlan(
            branch=branch.value,
            version=version,
            policy=policy,
            commits=commits,
            buckets=buckets,
            entry=entry,
        )
    )


def publish(ctx: ReleaseContext, plan: ChangelogPlan) -> PublishReport:
    """Write, stage, commit and tag.

    Every step is attempted once and in order; failures are reported, never
    raised, so the report says exactly which steps still need doing.
    """
    assert plan.entry is not None and plan.version is not None
    console = ctx.console
    steps: list[PublishStep] = []
    path = ctx.project.changelog_path

    try:
        existing = read_text_if_exists(path) or ""
        atomic_write_text(path, insert_entry(existing, plan.entry))
        steps.append(PublishStep(name="write", ok=True, detail=f"updated {path.name}"))
        console.success(f"updated {path.name}")
    except OSError as e:
        steps.append(PublishStep(name="write", ok=False, detail=str(e)))
        console.warning(f"failed to write {path.name}: {e}")

    staged = ctx.repo.add(ctx.project.changelog_rel_path)
    if isinstance(staged, Err):
        steps.append(PublishStep(name="stage", ok=False, detail=staged.error.message))
        console.warning(f"git add failed: {staged.error.message}")
    else:
        steps.append(PublishStep(name="stage", ok=True, detail=ctx.project.changelog_rel_path))

    message = release_commit_message(plan.version)
    committed = ctx.repo.commit(message)
    if isinstance(committed, Err):
        steps.append(PublishStep(name="commit", ok=False, detail=committed.error.message))
        console.warning(f"git commit failed: {committed.error.message}")
    else:
        steps.append(PublishStep(name="commit", ok=True, detail=message))
        console.success(f"committed changelog with message: {message}")

    steps.append(_tag(ctx, plan))
    return PublishReport(steps=tuple(steps))


def _tag(ctx: ReleaseContext, plan: ChangelogPlan) -> PublishStep:
    console = ctx.console
    assert plan.version is not None
    name = release_tag_name(plan.branch, plan.version)

    exists = ctx.repo.tag_exists(name)
    if isinstance(exists, Err):
        console.warning(f"cannot check tag {name}: {exists.error.message}")
        return PublishStep(name="tag", ok=False, detail=exists.error.message)
    if exists.value:
        console.info(f"tag {name} already exists, skipping tag creation")
        return PublishStep(name="tag", ok=True, detail=name, skipped=True)

    created = ctx.repo.create_annotated_tag(name, release_tag_message(plan.version, plan.branch))
    if isinstance(created, Err):
        console.warning(f"failed to create git tag {name}: {created.error.message}")
        return PublishStep(name="tag", ok=False, detail=created.error.message)

    console.success(f"created git tag: {name}")
    return PublishStep(name="tag", ok=True, detail=name)


def generate_changelog(
    ctx: ReleaseContext, *, today: date | None = None
) -> Result[ChangelogOutcome, VersioningError]:
    console = ctx.console
    planned = plan_changelog(ctx, today=today or date.today())
    if isinstance(planned, Err):
        return planned
    plan = planned.value

    if plan.policy is None:
        console.info(f"no version policy for branch {plan.branch}, skipping changelog")
        return Ok(ChangelogOutcome(plan=plan))
    console.header(f"Generating changelog for version {plan.version} on branch {plan.branch}")
    if plan.entry is None:
        console.info("no new commits found since last tag, skipping changelog generation")
        return Ok(ChangelogOutcome(plan=plan))

    console.print(f"Found {len(plan.commits.commits)} commits since {plan.commits.since_label}:")
    for commit in plan.commits.commits:
        console.print(f"  - {commit}")

    console.newline()
    console.print("Generated changelog entry:")
    console.rule()
    console.print(plan.entry.rstrip())
    console.rule()

    report = publish(ctx, plan)
    if report.ok:
        console.success(f"changelog generated and committed for version {plan.version}")
    else:
        console.warning(f"release steps incomplete: {', '.join(report.failed_steps)}")
    return Ok(ChangelogOutcome(plan=plan, report=report))
