"""Value types for environment resolution.

Everything here is frozen: a trigger context is read once from the workflow
engine, the profile table is loaded once per process, and a resolution result
is produced once and then only read by downstream steps.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aksgate.resolver.errors import ResolutionError

__all__ = [
    "UNKNOWN_ENVIRONMENT",
    "AUTO_ENVIRONMENT",
    "EventKind",
    "TriggerContext",
    "EnvironmentProfile",
    "AuditRecord",
    "ResolutionResult",
]

UNKNOWN_ENVIRONMENT = "unknown"

# Workflow callers pass "auto" when no environment input was given.
AUTO_ENVIRONMENT = "auto"


class EventKind(str, Enum):
    """What started the pipeline run."""

    PUSH = "push"
    MANUAL_DISPATCH = "manual_dispatch"
    PULL_REQUEST = "pull_request"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TriggerContext:
    """Event data for one pipeline invocation.

    Attributes:
        ref: Full git ref (``refs/heads/develop``, ``refs/tags/v1.2.0``).
        event_kind: Push, manual dispatch or pull request.
        manual_environment: Environment requested by the operator, if any.
        override_validation: Bypass branch-to-environment matching.
        override_notes: Justification; mandatory for production-tier overrides.
        actor: Who triggered the run, recorded in the audit entry.
    """

    ref: str
    event_kind: EventKind
    manual_environment: str | None = None
    override_validation: bool = False
    override_notes: str | None = None
    actor: str = "unknown"

    @property
    def requested_environment(self) -> str | None:
        """The manual environment, with blanks and ``auto`` treated as unset."""
        if self.manual_environment is None:
            return None
        name = self.manual_environment.strip()
        if not name or name.lower() == AUTO_ENVIRONMENT:
            return None
        return name

    @property
    def notes(self) -> str | None:
        if self.override_notes is None:
            return None
        return self.override_notes.strip() or None


@dataclass(frozen=True, slots=True)
class EnvironmentProfile:
    """One deployable environment.

    Coordinates are never stored here, only the names of the secrets that
    hold them.
    """

    name: str
    branch_patterns: tuple[str, ...]
    cluster_secret_key: str
    resource_group_secret_key: str
    creates_release: bool = False
    protected: bool = False
    aliases: tuple[str, ...] = ()

    def answers_to(self, name: str) -> bool:
        """True if ``name`` is this profile's name or one of its aliases."""
        wanted = name.strip().lower()
        return wanted == self.name.lower() or wanted in (a.lower() for a in self.aliases)


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """Structured log entry for one resolution, success or failure."""

    timestamp: str
    actor: str
    ref: str
    event_kind: EventKind
    override_used: bool
    override_notes: str | None
    requested_environment: str | None
    target_environment: str
    should_deploy: bool
    outcome: str

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["event_kind"] = self.event_kind.value
        return data


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Decision handed, unchanged, to every downstream deployment step."""

    should_deploy: bool
    target_environment: str
    cluster_name: str
    resource_group: str
    create_release: bool
    audit_record: AuditRecord
    error: ResolutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
