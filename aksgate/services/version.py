"""Version, image tag and Helm chart version for a deployment.

- tag push: the tag is used as-is
- ``release/X.Y.Z`` branch: ``vX.Y.Z``
- other ``release/*`` branch: latest tag with the patch bumped
- production tier from any other ref: ``v1.0.0-<YYYYMMDD>-<sha7>``
- everything else: ``<env>-<sha7>``, chart ``0.1.0-<env>-<sha7>``
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from aksgate.core.result import Err, Ok, Result
from aksgate.platform.process import run as run_process
from aksgate.resolver.patterns import parse_ref
from aksgate.services.semver import ZERO, parse_tag_prefix, starts_with_version

__all__ = [
    "GIT_TIMEOUT_SECONDS",
    "VersionInfo",
    "compute_version",
    "head_sha",
    "latest_tag",
    "short_sha",
]

GIT_TIMEOUT_SECONDS = 30.0
_RELEASE_PREFIX = "release/"


@dataclass(frozen=True, slots=True)
class VersionInfo:
    version: str
    image_tag: str
    helm_version: str

    def as_outputs(self) -> list[tuple[str, str]]:
        return [
            ("version", self.version),
            ("image_tag", self.image_tag),
            ("helm_version", self.helm_version),
        ]


def short_sha(sha: str) -> str:
    return sha.strip()[:7]


def compute_version(
    *,
    ref: str,
    environment: str,
    sha: str,
    build_date: date,
    latest: str | None,
    production: bool,
) -> VersionInfo:
    """Compute the version triple for one deployment.

    Args:
        ref: Full git ref being deployed.
        environment: Resolved environment name.
        sha: Commit SHA (full or short).
        build_date: Date used for production builds from non-release refs.
        latest: Most recent git tag, if any.
        production: Whether the environment is production tier.
    """
    parsed = parse_ref(ref)
    sha7 = short_sha(sha)

    if parsed.tag is not None:
        return VersionInfo(parsed.tag, parsed.tag, parsed.tag)

    if parsed.branch is not None and parsed.branch.startswith(_RELEASE_PREFIX):
        name = parsed.branch[len(_RELEASE_PREFIX) :]
        if starts_with_version(name):
            version = f"v{name}"
        else:
            base = parse_tag_prefix(latest) if latest else None
            version = (base or ZERO).bump_patch().to_tag()
        return VersionInfo(version, version, version)

    if production:
        version = f"v1.0.0-{build_date.strftime('%Y%m%d')}-{sha7}"
        return VersionInfo(version, version, version)

    version = f"{environment}-{sha7}"
    return VersionInfo(version, version, f"0.1.0-{environment}-{sha7}")


def latest_tag(repo: Path) -> Result[str | None, str]:
    """Most recent tag reachable from HEAD; Ok(None) when there are no tags."""
    result = run_process(
        ["git", "describe", "--tags", "--abbrev=0"], cwd=repo, timeout=GIT_TIMEOUT_SECONDS
    )
    if isinstance(result, Err):
        stderr = result.error.stderr
        if "No names found" in stderr or "No tags can describe" in stderr:
            return Ok(None)
        return Err(stderr.strip() or str(result.error))
    return Ok(result.value.strip() or None)


def head_sha(repo: Path) -> Result[str, str]:
    result = run_process(["git", "rev-parse", "HEAD"], cwd=repo, timeout=GIT_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(result.error.stderr.strip() or str(result.error))
    return Ok(result.value.strip())
