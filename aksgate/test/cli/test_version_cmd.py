from __future__ import annotations

from pathlib import Path

import pytest
import typer

from aksgate.cli.context import CLIContext
from aksgate.core.config import Config
from aksgate.core.errors import ErrorCode
from aksgate.core.result import Err, Ok, Result
from aksgate.output.console import MockConsole

SHA = "89abcdef0123456789abcdef0123456789abcdef"


def _setup(
    monkeypatch: pytest.MonkeyPatch,
    environ: dict[str, str],
    *,
    tag: Result[str | None, str] = Ok("v1.2.3"),
) -> CLIContext:
    import aksgate.cli.commands.version_cmd as version_cmd

    ctx = CLIContext(config=Config(), console=MockConsole(), environ=environ)
    monkeypatch.setattr(version_cmd, "build_context", lambda: ctx)
    monkeypatch.setattr(version_cmd, "latest_tag", lambda repo: tag)
    monkeypatch.setattr(version_cmd, "head_sha", lambda repo: Ok(SHA))
    return ctx


def _run(tmp_path: Path, **overrides: object) -> None:
    import aksgate.cli.commands.version_cmd as version_cmd

    args: dict[str, object] = {
        "environment": "dev",
        "ref": None,
        "sha": None,
        "repo": tmp_path,
        "github_output": None,
    }
    args.update(overrides)
    version_cmd.version(**args)  # type: ignore[arg-type]


def test_dev_version_written(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    out = tmp_path / "out"
    _setup(
        monkeypatch,
        {"GITHUB_REF": "refs/heads/develop", "GITHUB_SHA": SHA, "GITHUB_OUTPUT": str(out)},
    )

    _run(tmp_path)

    assert out.read_text(encoding="utf-8").splitlines() == [
        "version=dev-89abcde",
        "image_tag=dev-89abcde",
        "helm_version=0.1.0-dev-89abcde",
    ]


def test_release_branch_bumps_tag(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    ctx = _setup(monkeypatch, {}, tag=Ok("v1.2.3"))

    _run(tmp_path, environment="prod", ref="refs/heads/release/next")

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("OK version v1.2.4")


def test_alias_resolves_production_tier(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    ctx = _setup(monkeypatch, {"GITHUB_REF": "refs/heads/main"})

    _run(tmp_path, environment="prod")

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("OK version v1.0.0-")


def test_git_tag_failure_warns(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    ctx = _setup(monkeypatch, {}, tag=Err("fatal: not a git repository"))

    _run(tmp_path, ref="refs/heads/release/next", sha=SHA)

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("warning: could not read git tags")
    assert ctx.console.find("OK version v0.0.1")


def test_missing_ref(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _setup(monkeypatch, {})

    with pytest.raises(typer.Exit) as exc:
        _run(tmp_path)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
