from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import typer

from aksgate.cli.commands._helpers import exit_with_error, publish_outputs
from aksgate.cli.context import build_context
from aksgate.core.errors import ErrorCode
from aksgate.core.result import Err
from aksgate.output.console import Style
from aksgate.resolver.profiles import find_profile
from aksgate.services.version import compute_version, head_sha, latest_tag


def version(
    environment: str = typer.Option(
        ..., "--environment", "-e", help="Resolved target environment."
    ),
    ref: str | None = typer.Option(None, "--ref", help="Git ref (default: $GITHUB_REF)."),
    sha: str | None = typer.Option(None, "--sha", help="Commit SHA (default: $GITHUB_SHA)."),
    repo: Path = typer.Option(Path("."), "--repo", help="Repository used for git lookups."),
    github_output: Path | None = typer.Option(
        None, "--github-output", help="Step output file (default: $GITHUB_OUTPUT)."
    ),
) -> None:
    """Compute version, image tag and Helm chart version."""
    ctx = build_context()

    ref = ref or ctx.environ.get("GITHUB_REF", "").strip()
    if not ref:
        ctx.console.error("no git ref available")
        ctx.console.print("hint: Pass --ref or run inside a GitHub Actions job", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    sha = sha or ctx.environ.get("GITHUB_SHA", "").strip()
    if not sha:
        head = head_sha(repo)
        if isinstance(head, Err):
            exit_with_error(head.error, ctx, ErrorCode.IO_ERROR)
        sha = head.value

    profile = find_profile(ctx.config.profiles, environment)
    name = profile.name if profile is not None else environment.strip()
    production = profile.protected if profile is not None else False

    latest = latest_tag(repo)
    if isinstance(latest, Err):
        ctx.console.warning(f"could not read git tags: {latest.error}")
        tag = None
    else:
        tag = latest.value

    info = compute_version(
        ref=ref,
        environment=name,
        sha=sha,
        build_date=datetime.now(UTC).date(),
        latest=tag,
        production=production,
    )

    ctx.console.print(f"ref: {ref}", Style.DIM)
    ctx.console.success(f"version {info.version}")
    ctx.console.print(f"image tag: {info.image_tag}", Style.DIM)
    ctx.console.print(f"helm version: {info.helm_version}", Style.DIM)
    publish_outputs(ctx, info.as_outputs(), github_output)
