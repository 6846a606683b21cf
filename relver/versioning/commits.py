"""Commit collection and conventional-commit classification.

The bumper and the changelog generator both go through this module, so a
commit always lands in the same category whichever utility looks at it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from relver.core.result import Err
from relver.git.repository import GitRepository
from relver.output.console import ConsoleProtocol
from relver.versioning.model import BumpKind, Commit, CommitBuckets, CommitCategory, CommitRange

_BREAKING_MARKERS = ("breaking change", "!:")
_FEATURE_PREFIXES = ("feat:", "feat(")
_FIX_PREFIXES = ("fix:", "fix(")


def parse_commit_line(line: str) -> Commit:
    """Split ``<hash> <subject>`` on the first space."""
    sha, _, message = line.strip().partition(" ")
    return Commit(sha=sha, message=message.strip())


def classify_commit(message: str) -> CommitCategory:
    """Category of a commit message; breaking > feature > fix > other."""
    text = message.strip().lower()
    if any(marker in text for marker in _BREAKING_MARKERS):
        return "breaking"
    if text.startswith(_FEATURE_PREFIXES):
        return "feature"
    if text.startswith(_FIX_PREFIXES):
        return "fix"
    return "other"


def bump_kind_for(commits: Iterable[Commit]) -> BumpKind:
    """Bump requested by a set of commits.

    Breaking changes only ever request a minor bump; anything that is not a
    feature or breaking change falls back to a patch bump.
    """
    categories = {classify_commit(c.message) for c in commits}
    if categories & {"breaking", "feature"}:
        return "minor"
    return "patch"


def categorize(commits: Sequence[Commit]) -> CommitBuckets:
    buckets: dict[CommitCategory, list[Commit]] = {
        "breaking": [],
        "feature": [],
        "fix": [],
        "other": [],
    }
    for commit in commits:
        buckets[classify_commit(commit.message)].append(commit)
    return CommitBuckets(
        breaking=tuple(buckets["breaking"]),
        features=tuple(buckets["feature"]),
        fixes=tuple(buckets["fix"]),
        other=tuple(buckets["other"]),
    )


def collect_commits(
    *,
    repo: GitRepository,
    fallback_limit: int,
    console: ConsoleProtocol | None = None,
) -> CommitRange:
    """Non-merge commits after the most recent tag.

    Without a tag the most recent ``fallback_limit`` commits are used. Git
    failures produce an empty range; this never raises.
    """
    last_tag = repo.last_tag()
    if last_tag is None:
        if console is not None:
            console.info("no previous tag found, using recent commits")
        result = repo.log_oneline(since=None, limit=fallback_limit)
    else:
        if console is not None:
            console.info(f"collecting commits since tag {last_tag}")
        result = repo.log_oneline(since=last_tag, limit=None)

    if isinstance(result, Err):
        if console is not None:
            console.warning(f"could not read commit history: {result.error.message}")
        return CommitRange(commits=(), last_tag=last_tag)

    commits = tuple(parse_commit_line(line) for line in result.value)
    return CommitRange(commits=commits, last_tag=last_tag)
