from __future__ import annotations

import json
from pathlib import Path

import typer

from aksgate.cli.commands._helpers import (
    exit_on_error,
    exit_with_code,
    exit_with_error,
    publish_outputs,
)
from aksgate.cli.context import CLIContext, build_context
from aksgate.core.errors import ErrorCode
from aksgate.core.result import Err
from aksgate.output.console import Style
from aksgate.output.errors import print_resolution_error, resolution_exit_code
from aksgate.resolver.model import ResolutionResult
from aksgate.resolver.resolve import resolve
from aksgate.services.audit import AuditLog
from aksgate.services.outputs import resolution_outputs, result_to_dict
from aksgate.services.secrets import store_from_config
from aksgate.services.trigger import TriggerOverrides, trigger_from_github_env


def resolve_cmd(
    ref: str | None = typer.Option(None, "--ref", help="Git ref (default: $GITHUB_REF)."),
    event: str | None = typer.Option(
        None, "--event", help="Event name (default: $GITHUB_EVENT_NAME)."
    ),
    environment: str | None = typer.Option(
        None, "--environment", "-e", help="Requested environment (manual dispatch input)."
    ),
    override: bool = typer.Option(
        False, "--override", help="Bypass branch validation for the requested environment."
    ),
    notes: str | None = typer.Option(None, "--notes", help="Override justification."),
    actor: str | None = typer.Option(None, "--actor", help="Actor (default: $GITHUB_ACTOR)."),
    strict: bool = typer.Option(
        False, "--strict", help="Fail when no environment matches the ref."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    github_output: Path | None = typer.Option(
        None, "--github-output", help="Step output file (default: $GITHUB_OUTPUT)."
    ),
    audit: bool = typer.Option(True, "--audit/--no-audit", help="Append to the audit log."),
) -> None:
    """Resolve the target environment and cluster for this run."""
    ctx = build_context(stderr=json_output)

    trigger = trigger_from_github_env(
        ctx.environ,
        TriggerOverrides(
            ref=ref,
            event=event,
            environment=environment,
            override_validation=True if override else None,
            override_notes=notes,
            actor=actor,
        ),
    )
    if isinstance(trigger, Err):
        exit_with_error(trigger.error, ctx, ErrorCode.USER_ERROR)
    context = trigger.value

    store = store_from_config(ctx.config.secrets, environ=ctx.environ)
    result = resolve(context, ctx.config.profiles, store.get)

    if audit and ctx.config.audit.path:
        log = AuditLog(Path(ctx.config.audit.path))
        exit_on_error(log.append(result.audit_record), ctx, ErrorCode.IO_ERROR)
    publish_outputs(ctx, resolution_outputs(result), github_output)

    _print_summary(ctx, result)
    if json_output:
        ctx.console.raw(json.dumps(result_to_dict(result), indent=2))

    code = resolution_exit_code(result.error, strict=strict)
    if code != int(ErrorCode.OK):
        exit_with_code(code)


def _print_summary(ctx: CLIContext, result: ResolutionResult) -> None:
    console = ctx.console
    record = result.audit_record
    console.print(f"ref: {record.ref} ({record.event_kind})", Style.DIM)
    if record.requested_environment:
        console.print(f"requested: {record.requested_environment}", Style.DIM)
    if record.override_used:
        console.warning(f"override requested by {record.actor}")
        if record.override_notes:
            console.print(f"notes: {record.override_notes}", Style.DIM)

    if result.error is not None:
        print_resolution_error(result.error, console)
    else:
        console.success(f"deploy to {result.target_environment}")
        console.print(f"cluster: {result.cluster_name}", Style.DIM)
        console.print(f"resource group: {result.resource_group}", Style.DIM)
        if result.create_release:
            console.info("release will be created after deployment")

    console.print(f"audit: {json.dumps(record.to_dict(), sort_keys=True)}", Style.DIM)
