from __future__ import annotations

import os
from pathlib import Path

import typer

from aksgate import __version__
from aksgate.cli.commands.check import check
from aksgate.cli.commands.profiles import profiles
from aksgate.cli.commands.resolve_cmd import resolve_cmd
from aksgate.cli.commands.rollback_cmd import rollback
from aksgate.cli.commands.version_cmd import version
from aksgate.core.config import CONFIG_ENV_VAR
from aksgate.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command("resolve")(resolve_cmd)
app.command()(profiles)
app.command()(check)
app.command()(version)
app.command()(rollback)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Config file (default: ${CONFIG_ENV_VAR}, then ./aksgate.toml)",
    ),
) -> None:
    if show_version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' does not exist", err=True)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

        os.environ[CONFIG_ENV_VAR] = str(path)


def main() -> None:
    app()
