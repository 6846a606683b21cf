"""Workflow self-test.

Walks the CI release sequence against the current checkout. The resolver
steps run for real; the bump and changelog steps are previewed without
writing, committing or tagging. Failures are reported and never stop the
remaining steps.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from relver.core.result import Err, Result
from relver.output.console import Style
from relver.versioning.bumper import BumpPlan, describe_plan, plan_bump
from relver.versioning.changelog import plan_changelog
from relver.versioning.commits import bump_kind_for
from relver.versioning.context import ReleaseContext
from relver.versioning.errors import VersioningError
from relver.versioning.model import BumpKind, Commit
from relver.versioning.resolver import update_version, validate_version

# (commit type, description, expected bump)
SAMPLE_COMMITS: tuple[tuple[str, str, BumpKind], ...] = (
    ("feat", "add new feature", "minor"),
    ("fix", "fix bug", "patch"),
    ("perf", "improve performance", "patch"),
    ("feat!", "breaking change", "minor"),
    ("docs", "update docs", "patch"),
    ("chore", "update dependencies", "patch"),
)

PIPELINE_STEPS: tuple[str, ...] = (
    "Update version for branch",
    "Validate version constraints",
    "Safe version bump (analyzes commits, bumps version)",
    "Generate changelog (creates CHANGELOG.md, git tag)",
    "Final validation",
    "Build package",
    "Publish to package registry",
    "Create release",
)


@dataclass(frozen=True, slots=True)
class StepStatus:
    title: str
    ok: bool
    detail: str = ""


@dataclass(frozen=True, slots=True)
class RuleCheck:
    commit_type: str
    description: str
    expected: BumpKind
    actual: BumpKind

    @property
    def matches(self) -> bool:
        return self.expected == self.actual


@dataclass(frozen=True, slots=True)
class SelfTestReport:
    steps: tuple[StepStatus, ...]
    rules: tuple[RuleCheck, ...]

    @property
    def failed(self) -> list[str]:
        return [s.title for s in self.steps if not s.ok]


def check_bump_rules() -> tuple[RuleCheck, ...]:
    out: list[RuleCheck] = []
    for commit_type, description, expected in SAMPLE_COMMITS:
        actual = bump_kind_for([Commit(sha="0000000", message=f"{commit_type}: {description}")])
        out.append(
            RuleCheck(
                commit_type=commit_type,
                description=description,
                expected=expected,
                actual=actual,
            )
        )
    return tuple(out)


def _run_step(
    ctx: ReleaseContext,
    title: str,
    action: Callable[[], Result[object, VersioningError]],
) -> StepStatus:
    ctx.console.header(title)
    result = action()
    if isinstance(result, Err):
        ctx.console.error(f"failed: {result.error.pretty()}")
        return StepStatus(title=title, ok=False, detail=result.error.message)
    ctx.console.success("success")
    return StepStatus(title=title, ok=True)


def _preview(ctx: ReleaseContext, today: date) -> list[StepStatus]:
    console = ctx.console
    steps: list[StepStatus] = []

    title = "Safe version bump (simulation)"
    console.header(title)
    planned = plan_bump(ctx)
    plan: BumpPlan | None = None
    if isinstance(planned, Err):
        console.error(f"failed: {planned.error.pretty()}")
        steps.append(StepStatus(title=title, ok=False, detail=planned.error.message))
    else:
        plan = planned.value
        describe_plan(ctx, plan)
        console.warning("skipped - would update the manifests")
        steps.append(StepStatus(title=title, ok=True, detail=str(plan.new_version or "")))

    title = "Generate changelog (simulation)"
    console.header(title)
    version = plan.new_version if plan is not None else None
    changelog = plan_changelog(ctx, today=today, version=version)
    if isinstance(changelog, Err):
        console.error(f"failed: {changelog.error.pretty()}")
        steps.append(StepStatus(title=title, ok=False, detail=changelog.error.message))
    else:
        entry = changelog.value.entry
        if entry is None:
            console.info("no changelog entry would be generated")
        else:
            console.rule()
            console.print(entry.rstrip())
            console.rule()
            console.print(f"would tag: {changelog.value.tag_name}", Style.DIM)
        console.warning("skipped - would write CHANGELOG.md, commit and tag")
        steps.append(StepStatus(title=title, ok=True, detail=changelog.value.tag_name or ""))

    return steps


def _print_rules(ctx: ReleaseContext, rules: tuple[RuleCheck, ...]) -> None:
    console = ctx.console
    console.header("Version bump rules")
    for rule in rules:
        style = Style.DEFAULT if rule.matches else Style.ERROR
        console.print(
            f"  {rule.commit_type:<8} -> {rule.actual:<5} ({rule.description})",
            style,
        )
    # BumpKind has no "major"; this guards against the classifier drifting.
    if any(r.actual not in ("minor", "patch") for r in rules):
        console.error("a commit type would cause a major version bump")
    else:
        console.success("no commit type can cause a major version bump")


def _print_summary(ctx: ReleaseContext, steps: list[StepStatus]) -> None:
    console = ctx.console
    console.header("CI workflow steps")
    for i, title in enumerate(PIPELINE_STEPS, start=1):
        console.print(f"{i}. {title}")

    failed = [s.title for s in steps if not s.ok]
    console.newline()
    if failed:
        console.warning(f"integration status: {len(failed)} step(s) failed: {', '.join(failed)}")
    else:
        console.success("integration status: complete")


def run_selftest(ctx: ReleaseContext, *, today: date | None = None) -> SelfTestReport:
    ctx.console.header("Testing CI workflow integration")

    steps: list[StepStatus] = []
    steps.append(
        _run_step(ctx, "Update package version for branch", lambda: update_version(ctx))
    )
    steps.append(_run_step(ctx, "Validate version for branch", lambda: validate_version(ctx)))
    steps.extend(_preview(ctx, today or date.today()))
    steps.append(_run_step(ctx, "Final validation", lambda: validate_version(ctx)))

    rules = check_bump_rules()
    _print_rules(ctx, rules)
    _print_summary(ctx, steps)
    return SelfTestReport(steps=tuple(steps), rules=rules)
