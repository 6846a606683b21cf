from __future__ import annotations

import click
import typer

from relver import __version__
from relver.cli.commands._helpers import group_callback
from relver.cli.commands.bump_cmd import bump_app
from relver.cli.commands.changelog_cmd import changelog_app
from relver.cli.commands.selftest_cmd import selftest, selftest_app
from relver.cli.commands.version_cmd import version_app
from relver.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    help=f"Branch-constrained release versioning (relver {__version__}).",
)
app.callback(invoke_without_command=True)(group_callback)

app.add_typer(version_app, name="version")
app.add_typer(bump_app, name="bump")
app.add_typer(changelog_app, name="changelog")
app.command("selftest")(selftest)


def run_app(target: typer.Typer, args: list[str] | None = None) -> int:
    """Run a Typer app and return its exit code.

    Click reports usage errors with exit code 2; the release pipeline treats
    every usage problem as a plain failure, so they are mapped to 1.
    """
    try:
        rv = target(args=args, standalone_mode=False)
    except click.UsageError as e:
        e.show()
        return int(ErrorCode.FAILURE)
    except click.Abort:
        typer.echo("Aborted!", err=True)
        return int(ErrorCode.FAILURE)
    return rv if isinstance(rv, int) else int(ErrorCode.OK)


def main() -> None:
    raise SystemExit(run_app(app))


def version_main() -> None:
    raise SystemExit(run_app(version_app))


def bump_main() -> None:
    raise SystemExit(run_app(bump_app))


def changelog_main() -> None:
    raise SystemExit(run_app(changelog_app))


def selftest_main() -> None:
    raise SystemExit(run_app(selftest_app))
