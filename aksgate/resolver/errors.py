"""Resolution failure kinds.

Each kind is terminal for the invocation and travels inside the
``ResolutionResult``; none of them is raised. ``kind`` strings are part of the
step output contract and must stay stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class NoEnvironmentMatched:
    """The trigger selected zero profiles, or more than one."""

    kind: ClassVar[str] = "no_environment_matched"

    ref: str
    reason: str
    candidates: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        if self.candidates:
            return f"no environment for {self.ref}: {self.reason} ({', '.join(self.candidates)})"
        return f"no environment for {self.ref}: {self.reason}"

    @property
    def hint(self) -> str | None:
        if self.candidates:
            return "Make branch patterns disjoint across environments"
        return "Push to a mapped branch or dispatch manually with an environment"


@dataclass(frozen=True, slots=True)
class CoordinatesUnresolved:
    """The profile matched but its cluster coordinates are missing."""

    kind: ClassVar[str] = "coordinates_unresolved"

    environment: str
    missing_keys: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"cluster coordinates unresolved for {self.environment}"

    @property
    def hint(self) -> str | None:
        keys = ", ".join(self.missing_keys)
        return f"Check that secret(s) {keys} are set"


@dataclass(frozen=True, slots=True)
class OverrideRejected:
    """Production-tier override requested without notes."""

    kind: ClassVar[str] = "override_rejected"

    environment: str

    @property
    def message(self) -> str:
        return f"override to {self.environment} rejected: notes are required"

    @property
    def hint(self) -> str | None:
        return "Re-run with override notes explaining the deployment"


ResolutionError = NoEnvironmentMatched | CoordinatesUnresolved | OverrideRejected
