"""Project detection and paths.

A project is the git checkout that holds the package manifests. It is
identified by the presence of ``.git`` (a directory, or a file for worktrees
and submodules). All paths the utilities touch are derived from the
detected root and the loaded config, never from the location of the
installed code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .config import CONFIG_FILE_NAME, Config
from .result import Err, Ok, Result

__all__ = [
    "ENV_VAR",
    "Project",
    "ProjectError",
    "detect_project_root",
    "find_project_upward",
    "is_project_root",
]

ENV_VAR = "RELVER_ROOT"


@dataclass(frozen=True, slots=True)
class ProjectError:
    """Error when the project root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Project:
    """A detected project root plus its configuration."""

    root: Path
    config: Config = field(default_factory=Config)

    @property
    def config_path(self) -> Path:
        return config_path_for(self.root)

    @property
    def root_manifest_path(self) -> Path:
        return self.root / self.config.manifests.root

    @property
    def library_manifest_path(self) -> Path | None:
        """Path of the nested library manifest, None when not configured."""
        if self.config.manifests.library is None:
            return None
        return self.root / self.config.manifests.library

    @property
    def changelog_path(self) -> Path:
        return self.root / self.config.changelog.path

    @property
    def changelog_rel_path(self) -> str:
        """Changelog path relative to the root, as passed to ``git add``."""
        return self.config.changelog.path

    def __str__(self) -> str:
        return str(self.root)


def config_path_for(root: Path) -> Path:
    return root / CONFIG_FILE_NAME


def is_project_root(path: Path) -> bool:
    return (path / ".git").exists()


def find_project_upward(start: Path) -> Path | None:
    """Search upward from start for the nearest git checkout root."""
    for parent in (start, *start.parents):
        if is_project_root(parent):
            return parent
    return None


def detect_project_root(
    *,
    explicit: Path | None = None,
    start_dir: Path | None = None,
    env_var: str = ENV_VAR,
) -> Result[Path, ProjectError]:
    """Detect the project root directory.

    Detection order:
    1. explicit path (the ``--root`` option)
    2. RELVER_ROOT environment variable
    3. Search upward from start_dir (or cwd) for ``.git``
    """
    if explicit is not None:
        root = explicit.expanduser().resolve()
        if not root.is_dir():
            return Err(ProjectError(message=f"--root '{root}' is not a directory"))
        return Ok(root)

    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir():
            return Ok(env_path)
        return Err(
            ProjectError(
                message=f"${env_var} is set to '{env_value}' but it is not a directory",
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_project_upward(search_start)
    if found is None:
        return Err(
            ProjectError(
                message="Could not find project root (.git not found)",
                searched_from=search_start,
            )
        )
    return Ok(found)
