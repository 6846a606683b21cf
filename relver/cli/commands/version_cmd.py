from __future__ import annotations

import json

import typer

from relver.cli.commands._helpers import exit_on_error, group_callback, root_from
from relver.cli.context import build_context
from relver.versioning.resolver import update_version, validate_version, version_info


version_app = typer.Typer(
    add_completion=False,
    help="Resolve the branch version policy and keep the manifests on it.",
)
version_app.callback(invoke_without_command=True)(group_callback)


@version_app.command("update")
def update(ctx: typer.Context) -> None:
    """Update the manifest version for the current branch."""
    cli = build_context(root_from(ctx))
    exit_on_error(update_version(cli.release), cli)


@version_app.command("info")
def info(ctx: typer.Context) -> None:
    """Print branch and version info as JSON."""
    cli = build_context(root_from(ctx))
    details = exit_on_error(version_info(cli.release), cli)
    typer.echo(json.dumps(details.as_dict(), indent=2))


@version_app.command("validate")
def validate(ctx: typer.Context) -> None:
    """Validate that the version matches the branch policy."""
    cli = build_context(root_from(ctx))
    exit_on_error(validate_version(cli.release), cli)
