from __future__ import annotations

import shlex
from pathlib import Path

import typer

from aksgate.cli.commands._helpers import exit_with_error, publish_outputs
from aksgate.cli.context import build_context
from aksgate.core.errors import ErrorCode
from aksgate.core.result import Err
from aksgate.output.console import Style
from aksgate.services.rollback import RollbackError, RollbackRequest, plan_rollback
from aksgate.services.secrets import store_from_config


def _exit_code(error: RollbackError) -> ErrorCode:
    if error.kind == "coordinates_unresolved":
        return ErrorCode.COORDINATES_UNRESOLVED
    if error.kind == "unknown_environment":
        return ErrorCode.NO_ENVIRONMENT
    return ErrorCode.USER_ERROR


def rollback(
    environment: str = typer.Option(..., "--environment", "-e", help="Environment to roll back."),
    application: str = typer.Option(..., "--app", help="Helm release name."),
    strategy: str = typer.Option(
        "previous-version",
        "--strategy",
        help="previous-version, specific-version or specific-revision.",
    ),
    target_version: str | None = typer.Option(
        None, "--version", help="Image tag for specific-version."
    ),
    target_revision: str | None = typer.Option(
        None, "--revision", help="Helm revision for specific-revision."
    ),
    namespace: str = typer.Option("default", "--namespace", "-n", help="Kubernetes namespace."),
    chart: str | None = typer.Option(
        None, "--chart", help="Chart path for specific-version (default: helm/<app>)."
    ),
    github_output: Path | None = typer.Option(
        None, "--github-output", help="Step output file (default: $GITHUB_OUTPUT)."
    ),
) -> None:
    """Validate a rollback request and print the Helm command."""
    ctx = build_context()

    request = RollbackRequest(
        environment=environment,
        application=application,
        strategy=strategy,
        target_version=target_version,
        target_revision=target_revision,
        namespace=namespace,
        chart_path=chart,
    )
    store = store_from_config(ctx.config.secrets, environ=ctx.environ)
    planned = plan_rollback(request, ctx.config.profiles, store.get)
    if isinstance(planned, Err):
        exit_with_error(planned.error, ctx, _exit_code(planned.error))
    plan = planned.value

    ctx.console.header(f"Rollback {plan.application} in {plan.environment}")
    ctx.console.print(f"strategy: {plan.strategy}", Style.DIM)
    ctx.console.print(f"target: {plan.target}", Style.DIM)
    ctx.console.print(f"cluster: {plan.cluster_name}", Style.DIM)
    ctx.console.print(f"resource group: {plan.resource_group}", Style.DIM)
    ctx.console.raw(shlex.join(plan.helm_command))
    publish_outputs(ctx, plan.as_outputs(), github_output)
