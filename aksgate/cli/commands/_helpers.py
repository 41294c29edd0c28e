"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from aksgate.core.errors import ErrorCode
from aksgate.core.result import Err, Result
from aksgate.output.console import Style
from aksgate.services.outputs import write_github_outputs

if TYPE_CHECKING:
    from aksgate.cli.context import CLIContext


T = TypeVar("T")
E = TypeVar("E")


def exit_on_error(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> None:
    """Print the error and exit if ``result`` is Err.

    Error objects are expected to carry ``message`` and an optional ``hint``;
    plain strings are printed as they are.
    """
    if isinstance(result, Err):
        exit_with_error(result.error, ctx, error_code)


def exit_with_error(
    error: object, ctx: CLIContext, error_code: ErrorCode = ErrorCode.USER_ERROR
) -> NoReturn:
    message: str = getattr(error, "message", str(error))
    hint: str | None = getattr(error, "hint", None)
    ctx.console.error(message)
    if hint:
        ctx.console.print(f"hint: {hint}", Style.DIM)
    raise typer.Exit(code=int(error_code))


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def output_path(ctx: CLIContext, explicit: Path | None) -> Path | None:
    """Where step outputs go: --github-output, else $GITHUB_OUTPUT, else nowhere."""
    if explicit is not None:
        return explicit
    env = ctx.environ.get("GITHUB_OUTPUT", "").strip()
    return Path(env) if env else None


def publish_outputs(
    ctx: CLIContext, pairs: Iterable[tuple[str, str]], explicit: Path | None
) -> None:
    path = output_path(ctx, explicit)
    if path is None:
        return
    exit_on_error(write_github_outputs(pairs, path), ctx, ErrorCode.IO_ERROR)
    ctx.console.print(f"outputs written to {path}", Style.DIM)
