"""Git repository abstraction.

This module provides the Repository class for the handful of git
operations the release utilities need. Queries that may legitimately come
back empty (no tags yet) return None; everything else returns a Result.

Usage:
    repo = Repository(Path("/path/to/checkout"))

    match repo.current_branch():
        case Ok(branch):
            print(f"Branch: {branch}")
        case Err(e):
            print(f"Error: {e.message}")

    tag = repo.last_tag()
    match repo.log_oneline(since=tag, limit=10):
        case Ok(lines):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relver.core.result import Err, Ok, Result
from relver.platform.process import ProcessError
from relver.platform.process import run as run_process

__all__ = [
    "GitError",
    "GitRepository",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class GitRepository(Protocol):
    """Git operations consumed by the release services."""

    def current_branch(self) -> Result[str, GitError]: ...

    def last_tag(self) -> str | None: ...

    def log_oneline(
        self, *, since: str | None, limit: int | None, no_merges: bool = True
    ) -> Result[list[str], GitError]: ...

    def add(self, path: str) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[None, GitError]: ...

    def tag_exists(self, name: str) -> Result[bool, GitError]: ...

    def create_annotated_tag(self, name: str, message: str) -> Result[None, GitError]: ...


class Repository:
    """Git checkout driven through the ``git`` executable.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def current_branch(self) -> Result[str, GitError]:
        """Get the current branch name.

        A detached HEAD has no symbolic name and is reported as an error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse --abbrev-ref HEAD", e, "cannot read branch"))
            case Ok(stdout):
                branch = stdout.strip()
                if not branch or branch == "HEAD":
                    return Err(
                        GitError(
                            command="rev-parse --abbrev-ref HEAD",
                            message="HEAD is detached (no branch name)",
                        )
                    )
                return Ok(branch)

    def last_tag(self) -> str | None:
        """Most recent tag reachable from HEAD, None when there is none."""
        result = self._run(["describe", "--tags", "--abbrev=0"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def log_oneline(
        self,
        *,
        since: str | None,
        limit: int | None,
        no_merges: bool = True,
    ) -> Result[list[str], GitError]:
        """One-line log entries (``<hash> <subject>``), newest first.

        Args:
            since: Only commits after this ref (``since..HEAD``).
            limit: Maximum number of commits, None for no limit.
            no_merges: Skip merge commits.
        """
        args = ["log"]
        if since is not None:
            args.append(f"{since}..HEAD")
        args.append("--oneline")
        if no_merges:
            args.append("--no-merges")
        if limit is not None:
            args.append(f"-{limit}")

        result = self._run(args)
        match result:
            case Err(e):
                return Err(self._error("log", e, "git log failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def add(self, path: str) -> Result[None, GitError]:
        result = self._run(["add", "--", path])
        if isinstance(result, Err):
            return Err(self._error("add", result.error, f"git add {path} failed"))
        return Ok(None)

    def commit(self, message: str) -> Result[None, GitError]:
        result = self._run(["commit", "-m", message])
        if isinstance(result, Err):
            return Err(self._error("commit", result.error, "git commit failed"))
        return Ok(None)

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        result = self._run(["tag", "-l", name])
        match result:
            case Err(e):
                return Err(self._error("tag -l", e, "git tag -l failed"))
            case Ok(stdout):
                return Ok(any(ln.strip() == name for ln in stdout.splitlines()))

    def create_annotated_tag(self, name: str, message: str) -> Result[None, GitError]:
        result = self._run(["tag", "-a", name, "-m", message])
        if isinstance(result, Err):
            return Err(self._error("tag -a", result.error, f"cannot create tag {name}"))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path)

    def _error(self, command: str, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )
