from __future__ import annotations

import typer

from aksgate.cli.context import CLIContext, build_context
from aksgate.core.errors import ErrorCode
from aksgate.output.console import Style
from aksgate.resolver.profiles import find_profile
from aksgate.services.check import CheckResult, CheckStatus, check_profiles
from aksgate.services.secrets import store_from_config


def check(
    environment: str | None = typer.Option(
        None, "--environment", "-e", help="Check one environment; missing secrets fail."
    ),
) -> None:
    """Check configuration and that profile secrets resolve."""
    ctx = build_context()
    config = ctx.config

    ctx.console.print(f"config: {config.source or 'built-in defaults'}", Style.DIM)
    ctx.console.print(f"secrets: {config.secrets.backend}", Style.DIM)

    if environment is not None and find_profile(config.profiles, environment) is None:
        ctx.console.error(f"unknown environment: {environment}")
        ctx.console.print(
            f"hint: Known: {', '.join(p.name for p in config.profiles)}", Style.DIM
        )
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    store = store_from_config(config.secrets, environ=ctx.environ)
    report = check_profiles(config.profiles, store, only=environment)

    for name, results in report.profiles.items():
        _print_group(ctx, name, results)

    if report.has_errors():
        raise typer.Exit(code=int(ErrorCode.COORDINATES_UNRESOLVED))


def _print_group(ctx: CLIContext, title: str, results: list[CheckResult]) -> None:
    console = ctx.console
    console.header(title)
    for r in results:
        console.print(f"{r.name}: {r.message}", _style_for_status(r.status))
        if r.hint and r.status != CheckStatus.OK:
            console.print(f"hint: {r.hint}", Style.DIM)


def _style_for_status(status: CheckStatus) -> Style:
    if status == CheckStatus.OK:
        return Style.SUCCESS
    if status == CheckStatus.WARNING:
        return Style.WARNING
    return Style.ERROR
