from __future__ import annotations

import typer

from relver.cli.commands._helpers import exit_on_error, group_callback, root_from
from relver.cli.context import build_context
from relver.versioning.bumper import safe_bump


bump_app = typer.Typer(
    add_completion=False,
    help="Bump the version from conventional commits, never past the branch major.",
)
bump_app.callback(invoke_without_command=True)(group_callback)


@bump_app.command("bump")
def bump(ctx: typer.Context) -> None:
    """Safely bump the version based on conventional commits."""
    cli = build_context(root_from(ctx))
    exit_on_error(safe_bump(cli.release), cli)
