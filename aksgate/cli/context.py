from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

import typer

from aksgate.core.config import Config, find_config_path, load_config_or_default
from aksgate.core.errors import ErrorCode
from aksgate.core.result import Err
from aksgate.output.console import ConsoleProtocol, RichConsole, Style


def _os_environ() -> Mapping[str, str]:
    return os.environ


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    environ: Mapping[str, str] = field(default_factory=_os_environ)


def build_context(*, stderr: bool = False) -> CLIContext:
    """Load configuration once for the command.

    Args:
        stderr: Send console output to stderr (used when stdout carries JSON).
    """
    console = RichConsole(stderr=stderr)
    config_result = load_config_or_default(find_config_path())
    if isinstance(config_result, Err):
        error = config_result.error
        console.error(error.message)
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(config=config_result.value, console=console)
