"""Preflight check that every profile's cluster coordinates resolve."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto

from aksgate.core.result import Err
from aksgate.resolver.model import EnvironmentProfile
from aksgate.services.secrets import SecretStore

__all__ = ["CheckStatus", "CheckResult", "CheckReport", "check_profiles"]


class CheckStatus(Enum):
    OK = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of a single check.

    Attributes:
        name: What was checked (e.g. "dev: AKS_CLUSTER_NAME_DEV")
        status: Whether the check passed, warned, or failed
        message: Human-readable result message
        hint: Optional fix
    """

    name: str
    status: CheckStatus
    message: str
    hint: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status == CheckStatus.ERROR

    @classmethod
    def success(cls, name: str, message: str) -> CheckResult:
        return cls(name=name, status=CheckStatus.OK, message=message)

    @classmethod
    def warning(cls, name: str, message: str, hint: str | None = None) -> CheckResult:
        return cls(name=name, status=CheckStatus.WARNING, message=message, hint=hint)

    @classmethod
    def error(cls, name: str, message: str, hint: str | None = None) -> CheckResult:
        return cls(name=name, status=CheckStatus.ERROR, message=message, hint=hint)


@dataclass(frozen=True, slots=True)
class CheckReport:
    profiles: dict[str, list[CheckResult]]

    def all_results(self) -> list[CheckResult]:
        return [r for results in self.profiles.values() for r in results]

    def has_errors(self) -> bool:
        return any(r.is_error for r in self.all_results())


def _check_key(store: SecretStore, key: str, *, required: bool) -> CheckResult:
    result = store.lookup(key)
    if not isinstance(result, Err):
        return CheckResult.success(key, "set")
    error = result.error
    hint = None if error.kind == "backend_failed" else f"Add secret {key} to the repository"
    if required:
        return CheckResult.error(key, error.message, hint)
    return CheckResult.warning(key, error.message, hint)


def check_profiles(
    profiles: Sequence[EnvironmentProfile],
    store: SecretStore,
    *,
    only: str | None = None,
) -> CheckReport:
    """Look up both coordinate secrets of each profile.

    With ``only`` set, that profile is checked and missing secrets are errors;
    otherwise every profile is checked and missing secrets only warn, since a
    repository may not deploy to all environments.
    """
    selected = [p for p in profiles if only is None or p.answers_to(only)]
    required = only is not None
    report: dict[str, list[CheckResult]] = {}
    for profile in selected:
        report[profile.name] = [
            _check_key(store, profile.cluster_secret_key, required=required),
            _check_key(store, profile.resource_group_secret_key, required=required),
        ]
    return CheckReport(profiles=report)
