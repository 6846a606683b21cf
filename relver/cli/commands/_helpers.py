"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from relver.core.errors import ErrorCode
from relver.core.result import Err, Result
from relver.output.console import Style

if TYPE_CHECKING:
    from relver.cli.context import CLIContext

T = TypeVar("T")
E = TypeVar("E")


def exit_on_error(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.FAILURE,
) -> T:
    """Return the Ok value, or print the error and exit.

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        ctx.console.error(message)
        if hint:
            ctx.console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def root_from(ctx: typer.Context) -> Path | None:
    """Project root chosen by a ``--root`` option on this or a parent group."""
    return ctx.find_object(Path)


def group_callback(
    ctx: typer.Context,
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root (overrides RELVER_ROOT and .git detection).",
    ),
) -> None:
    # Shared by every group: record --root, exit 1 when no subcommand is given.
    if root is not None:
        ctx.obj = root
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        exit_with_code(int(ErrorCode.FAILURE))
