"""Publishing results to later workflow steps.

The result is written to ``$GITHUB_OUTPUT`` exactly once, in one place, so
jobs downstream read the same values the resolver produced.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from pathlib import Path

from aksgate.core.result import Err, Ok, Result
from aksgate.resolver.model import ResolutionResult

__all__ = [
    "format_outputs",
    "resolution_outputs",
    "result_to_dict",
    "write_github_outputs",
]


def _bool(value: bool) -> str:
    return "true" if value else "false"


def resolution_outputs(result: ResolutionResult) -> list[tuple[str, str]]:
    """Output names are the ones the deploy and release jobs read."""
    return [
        ("should_deploy", _bool(result.should_deploy)),
        ("target_environment", result.target_environment),
        ("aks_cluster_name", result.cluster_name),
        ("aks_resource_group", result.resource_group),
        ("create_release", _bool(result.create_release)),
        ("error_kind", result.error.kind if result.error is not None else ""),
    ]


def result_to_dict(result: ResolutionResult) -> dict[str, object]:
    data: dict[str, object] = {
        "should_deploy": result.should_deploy,
        "target_environment": result.target_environment,
        "cluster_name": result.cluster_name,
        "resource_group": result.resource_group,
        "create_release": result.create_release,
        "error": None,
        "audit": result.audit_record.to_dict(),
    }
    if result.error is not None:
        data["error"] = {
            "kind": result.error.kind,
            "message": result.error.message,
            "hint": result.error.hint,
        }
    return data


def format_outputs(pairs: Iterable[tuple[str, str]]) -> str:
    lines: list[str] = []
    for key, value in pairs:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            lines.append(f"{key}<<{delimiter}")
            lines.append(value)
            lines.append(delimiter)
        else:
            lines.append(f"{key}={value}")
    return "\n".join(lines) + "\n"


def write_github_outputs(
    pairs: Iterable[tuple[str, str]], path: Path
) -> Result[None, str]:
    """Append step outputs to the runner's output file."""
    text = format_outputs(pairs)
    try:
        with path.open("a", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        return Err(f"cannot write step outputs to {path}: {e}")
    return Ok(None)
