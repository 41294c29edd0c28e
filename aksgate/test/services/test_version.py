"""Tests for version computation and git lookups."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from aksgate.core.result import Err, Ok, Result
from aksgate.platform.process import ProcessError
from aksgate.services import version as version_mod
from aksgate.services.semver import SemVer, parse_tag_prefix, starts_with_version
from aksgate.services.version import VersionInfo, compute_version, head_sha, latest_tag

SHA = "0123456789abcdef0123456789abcdef01234567"
BUILD_DATE = date(2026, 5, 17)


def _compute(ref: str, environment: str = "dev", *, latest: str | None = None, production: bool = False) -> VersionInfo:
    return compute_version(
        ref=ref,
        environment=environment,
        sha=SHA,
        build_date=BUILD_DATE,
        latest=latest,
        production=production,
    )


class TestSemVer:
    def test_parse_tag_prefix(self) -> None:
        assert parse_tag_prefix("v1.2.3") == SemVer(1, 2, 3)
        assert parse_tag_prefix("1.2.3-rc.1") == SemVer(1, 2, 3)
        assert parse_tag_prefix("release-1") is None

    def test_bump_patch(self) -> None:
        assert SemVer(1, 2, 3).bump_patch().to_tag() == "v1.2.4"

    def test_starts_with_version(self) -> None:
        assert starts_with_version("1.4.0")
        assert starts_with_version("1.4.0-hotfix")
        assert not starts_with_version("v1.4.0")
        assert not starts_with_version("spring")


class TestComputeVersion:
    def test_tag_used_as_is(self) -> None:
        info = _compute("refs/tags/v2.0.0", "production", production=True)
        assert info == VersionInfo("v2.0.0", "v2.0.0", "v2.0.0")

    def test_release_branch_with_version(self) -> None:
        info = _compute("refs/heads/release/1.4.0", "production", latest="v1.3.9", production=True)
        assert info.version == "v1.4.0"
        assert info.helm_version == "v1.4.0"

    def test_release_branch_bumps_latest_tag(self) -> None:
        info = _compute("refs/heads/release/spring", "production", latest="v1.3.9", production=True)
        assert info.version == "v1.3.10"

    def test_release_branch_without_tags(self) -> None:
        info = _compute("refs/heads/release/spring", "production", latest=None, production=True)
        assert info.version == "v0.0.1"

    def test_production_from_other_ref(self) -> None:
        info = _compute("refs/heads/main", "production", production=True)
        assert info.version == "v1.0.0-20260517-0123456"
        assert info.image_tag == info.version

    def test_non_production(self) -> None:
        info = _compute("refs/heads/develop", "dev")
        assert info == VersionInfo("dev-0123456", "dev-0123456", "0.1.0-dev-0123456")

    def test_as_outputs(self) -> None:
        assert dict(_compute("refs/heads/develop").as_outputs()) == {
            "version": "dev-0123456",
            "image_tag": "dev-0123456",
            "helm_version": "0.1.0-dev-0123456",
        }


def _patch_run(monkeypatch: pytest.MonkeyPatch, result: Result[str, ProcessError]) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], cwd: Path | None = None, *, timeout: float | None = None):
        calls.append(cmd)
        return result

    monkeypatch.setattr(version_mod, "run_process", fake_run)
    return calls


class TestGit:
    def test_latest_tag(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        calls = _patch_run(monkeypatch, Ok("v1.2.3\n"))
        assert latest_tag(tmp_path) == Ok("v1.2.3")
        assert calls == [["git", "describe", "--tags", "--abbrev=0"]]

    def test_latest_tag_none(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _patch_run(
            monkeypatch,
            Err(ProcessError(("git",), 128, "fatal: No names found, cannot describe anything.")),
        )
        assert latest_tag(tmp_path) == Ok(None)

    def test_latest_tag_failure(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _patch_run(monkeypatch, Err(ProcessError(("git",), 128, "fatal: not a git repository")))
        result = latest_tag(tmp_path)
        assert isinstance(result, Err)
        assert "not a git repository" in result.error

    def test_head_sha(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        _patch_run(monkeypatch, Ok(SHA + "\n"))
        assert head_sha(tmp_path) == Ok(SHA)
