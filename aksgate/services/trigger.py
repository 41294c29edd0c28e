"""Trigger context from GitHub Actions event metadata.

Reads the variables the runner sets for every job (``GITHUB_REF``,
``GITHUB_EVENT_NAME``, ``GITHUB_ACTOR``) and the ``inputs`` object of the
event payload at ``GITHUB_EVENT_PATH`` for manual dispatches.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from aksgate.core.result import Err, Ok, Result
from aksgate.core.structured import StrDict, as_str_dict, get_bool, get_str, get_table
from aksgate.resolver.model import EventKind, TriggerContext

__all__ = [
    "EVENT_KINDS",
    "TriggerError",
    "TriggerOverrides",
    "event_kind_from_name",
    "trigger_from_github_env",
]

EVENT_KINDS: dict[str, EventKind] = {
    "push": EventKind.PUSH,
    "workflow_dispatch": EventKind.MANUAL_DISPATCH,
    "pull_request": EventKind.PULL_REQUEST,
    "pull_request_target": EventKind.PULL_REQUEST,
}


@dataclass(frozen=True, slots=True)
class TriggerError:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class TriggerOverrides:
    """Values given on the command line; they win over the event metadata."""

    ref: str | None = None
    event: str | None = None
    environment: str | None = None
    override_validation: bool | None = None
    override_notes: str | None = None
    actor: str | None = None


def event_kind_from_name(name: str) -> Result[EventKind, TriggerError]:
    key = name.strip().lower()
    kind = EVENT_KINDS.get(key)
    if kind is None:
        # Also accept our own spelling, e.g. --event manual_dispatch.
        try:
            kind = EventKind(key)
        except ValueError:
            return Err(
                TriggerError(
                    message=f"unsupported event: {name}",
                    hint=f"Expected one of: {', '.join(EVENT_KINDS)}",
                )
            )
    return Ok(kind)


def _read_event_inputs(path: Path) -> Result[StrDict, TriggerError]:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(TriggerError(message=f"event payload not found: {path}"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(TriggerError(message=f"cannot read event payload: {e}"))
    except json.JSONDecodeError as e:
        return Err(TriggerError(message=f"event payload is not valid JSON: {e}"))

    payload = as_str_dict(obj)
    if payload is None:
        return Err(TriggerError(message="event payload must be a JSON object"))
    return Ok(get_table(payload, "inputs") or {})


def trigger_from_github_env(
    environ: Mapping[str, str],
    overrides: TriggerOverrides | None = None,
) -> Result[TriggerContext, TriggerError]:
    """Build the trigger context for this job.

    Args:
        environ: Job environment (``os.environ`` in production).
        overrides: Command line values taking precedence.
    """
    overrides = overrides or TriggerOverrides()

    ref = overrides.ref or environ.get("GITHUB_REF", "").strip()
    if not ref:
        return Err(
            TriggerError(
                message="no git ref available",
                hint="Pass --ref or run inside a GitHub Actions job",
            )
        )

    event_name = overrides.event or environ.get("GITHUB_EVENT_NAME", "").strip() or "push"
    kind = event_kind_from_name(event_name)
    if isinstance(kind, Err):
        return kind

    inputs: StrDict = {}
    event_path = environ.get("GITHUB_EVENT_PATH", "").strip()
    if event_path and kind.value == EventKind.MANUAL_DISPATCH:
        read = _read_event_inputs(Path(event_path))
        if isinstance(read, Err):
            return read
        inputs = read.value

    override_validation = overrides.override_validation
    if override_validation is None:
        override_validation = get_bool(inputs, "override_validation") or False

    return Ok(
        TriggerContext(
            ref=ref,
            event_kind=kind.value,
            manual_environment=overrides.environment or get_str(inputs, "environment"),
            override_validation=override_validation,
            override_notes=overrides.override_notes or get_str(inputs, "override_notes"),
            actor=overrides.actor or environ.get("GITHUB_ACTOR", "").strip() or "unknown",
        )
    )
