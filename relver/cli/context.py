from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relver.core.config import Config, load_config_or_default
from relver.core.errors import ErrorCode
from relver.core.project import Project, config_path_for, detect_project_root
from relver.core.result import Err
from relver.git.repository import Repository
from relver.output.console import ConsoleProtocol, RichConsole
from relver.versioning.context import ReleaseContext


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    config: Config
    console: ConsoleProtocol
    release: ReleaseContext


def build_context(root: Path | None = None) -> CLIContext:
    root_result = detect_project_root(explicit=root)
    if isinstance(root_result, Err):
        typer.echo(f"error: {root_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    project_root = root_result.value

    config_result = load_config_or_default(config_path_for(project_root))
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    config = config_result.value

    project = Project(root=project_root, config=config)
    console = RichConsole()
    release = ReleaseContext.create(
        project=project,
        repo=Repository(project_root),
        console=console,
    )
    return CLIContext(project=project, config=config, console=console, release=release)
