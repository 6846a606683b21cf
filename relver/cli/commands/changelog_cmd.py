from __future__ import annotations

import typer

from relver.cli.commands._helpers import exit_on_error, group_callback, root_from
from relver.cli.context import build_context
from relver.versioning.changelog import generate_changelog


changelog_app = typer.Typer(
    add_completion=False,
    help="Generate the changelog entry and tag the release.",
)
changelog_app.callback(invoke_without_command=True)(group_callback)


@changelog_app.command("generate")
def generate(ctx: typer.Context) -> None:
    """Generate the changelog, commit it and create the git tag."""
    cli = build_context(root_from(ctx))
    exit_on_error(generate_changelog(cli.release), cli)
