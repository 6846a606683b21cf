"""Shared fixtures: an in-memory git repository and a manifest project."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from relver.core.config import Config
from relver.core.project import Project
from relver.core.result import Err, Ok, Result
from relver.git.repository import GitError
from relver.output.console import MockConsole
from relver.versioning.context import ReleaseContext


@dataclass
class FakeRepository:
    """GitRepository stand-in driven by plain lists."""

    branch: str | None = "main"
    tags: list[str] = field(default_factory=list)
    log: list[str] = field(default_factory=list)
    log_fails: bool = False
    failing: set[str] = field(default_factory=set)
    calls: list[tuple[str, ...]] = field(default_factory=list)

    def current_branch(self) -> Result[str, GitError]:
        if self.branch is None:
            return Err(GitError(command="rev-parse", message="not a git repository"))
        return Ok(self.branch)

    def last_tag(self) -> str | None:
        return self.tags[-1] if self.tags else None

    def log_oneline(
        self, *, since: str | None, limit: int | None, no_merges: bool = True
    ) -> Result[list[str], GitError]:
        self.calls.append(("log", str(since), str(limit), str(no_merges)))
        if self.log_fails:
            return Err(GitError(command="log", message="bad revision"))
        lines = list(self.log)
        return Ok(lines if limit is None else lines[:limit])

    def add(self, path: str) -> Result[None, GitError]:
        self.calls.append(("add", path))
        if "add" in self.failing:
            return Err(GitError(command="add", message="add failed"))
        return Ok(None)

    def commit(self, message: str) -> Result[None, GitError]:
        self.calls.append(("commit", message))
        if "commit" in self.failing:
            return Err(GitError(command="commit", message="nothing to commit"))
        return Ok(None)

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        return Ok(name in self.tags)

    def create_annotated_tag(self, name: str, message: str) -> Result[None, GitError]:
        self.calls.append(("tag", name, message))
        if "tag" in self.failing:
            return Err(GitError(command="tag -a", message="tag failed"))
        self.tags.append(name)
        return Ok(None)


def write_manifest(path: Path, name: str, version: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"name": name, "version": version}, indent=2) + "\n")


def manifest_version(path: Path) -> str:
    return json.loads(path.read_text())["version"]


@pytest.fixture
def project(tmp_path: Path) -> Project:
    (tmp_path / ".git").mkdir()
    write_manifest(tmp_path / "package.json", "picker-workspace", "15.2.5")
    write_manifest(tmp_path / "projects" / "picker" / "package.json", "picker", "15.2.5")
    return Project(root=tmp_path, config=Config())


@pytest.fixture
def repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def ctx(project: Project, repo: FakeRepository, console: MockConsole) -> ReleaseContext:
    return ReleaseContext.create(project=project, repo=repo, console=console)


@pytest.fixture
def set_version(project: Project):
    """Rewrite the version in both manifests of the project fixture."""

    def _set(version: str) -> None:
        write_manifest(project.root_manifest_path, "picker-workspace", version)
        library = project.library_manifest_path
        assert library is not None
        write_manifest(library, "picker", version)

    return _set


@pytest.fixture
def read_version():
    return manifest_version
