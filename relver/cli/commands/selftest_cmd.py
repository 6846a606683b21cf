from __future__ import annotations

from pathlib import Path

import typer

from relver.cli.context import build_context
from relver.versioning.selftest import run_selftest


def selftest(
    ctx: typer.Context,
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root (overrides RELVER_ROOT and .git detection).",
    ),
) -> None:
    """Simulate the CI release workflow without committing changes."""
    cli = build_context(root or ctx.find_object(Path))
    # Reports status only; failed steps never change the exit code.
    run_selftest(cli.release)


selftest_app = typer.Typer(add_completion=False)
selftest_app.command()(selftest)
