from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# Major bumps are deliberately absent: the major version tracks the upstream
# framework release, not semantic-versioning breaking changes.
BumpKind = Literal["minor", "patch"]

CommitCategory = Literal["breaking", "feature", "fix", "other"]


@dataclass(frozen=True, slots=True)
class Commit:
    """One line of ``git log --oneline``."""

    sha: str
    message: str

    def __str__(self) -> str:
        return f"{self.sha} {self.message}".rstrip()


@dataclass(frozen=True, slots=True)
class CommitRange:
    """Commits since the last tag, newest first.

    ``last_tag`` is None when the repository has no tag and the range is
    the most recent N commits instead.
    """

    commits: tuple[Commit, ...] = field(default_factory=tuple)
    last_tag: str | None = None

    @property
    def is_empty(self) -> bool:
        return len(self.commits) == 0

    @property
    def since_label(self) -> str:
        return self.last_tag or "beginning"


@dataclass(frozen=True, slots=True)
class CommitBuckets:
    breaking: tuple[Commit, ...] = ()
    features: tuple[Commit, ...] = ()
    fixes: tuple[Commit, ...] = ()
    other: tuple[Commit, ...] = ()
