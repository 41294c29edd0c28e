"""Rollback request validation and Helm command planning.

Rollbacks use the same profile table and secret store as deployments, so a
rollback can only ever reach the cluster a deployment would have reached.
The plan is printed and published as step outputs; Helm runs it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from aksgate.core.result import Err, Ok, Result
from aksgate.resolver.model import EnvironmentProfile
from aksgate.resolver.profiles import find_profile
from aksgate.resolver.resolve import SecretLookup

__all__ = [
    "ROLLBACK_STRATEGIES",
    "HELM_TIMEOUT",
    "RollbackError",
    "RollbackPlan",
    "RollbackRequest",
    "plan_rollback",
]

RollbackStrategy = Literal["previous-version", "specific-version", "specific-revision"]
ROLLBACK_STRATEGIES: tuple[RollbackStrategy, ...] = (
    "previous-version",
    "specific-version",
    "specific-revision",
)
HELM_TIMEOUT = "10m"


@dataclass(frozen=True, slots=True)
class RollbackError:
    kind: Literal["invalid_input", "unknown_environment", "coordinates_unresolved"]
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class RollbackRequest:
    environment: str
    application: str
    strategy: str
    target_version: str | None = None
    target_revision: str | None = None
    namespace: str = "default"
    chart_path: str | None = None


@dataclass(frozen=True, slots=True)
class RollbackPlan:
    environment: str
    application: str
    strategy: RollbackStrategy
    target: str
    namespace: str
    cluster_name: str
    resource_group: str
    helm_command: tuple[str, ...]

    def as_outputs(self) -> list[tuple[str, str]]:
        return [
            ("should_rollback", "true"),
            ("target_environment", self.environment),
            ("aks_cluster_name", self.cluster_name),
            ("aks_resource_group", self.resource_group),
            ("rollback_target", self.target),
            ("namespace", self.namespace),
        ]


def _strategy(value: str) -> Result[RollbackStrategy, RollbackError]:
    for strategy in ROLLBACK_STRATEGIES:
        if value == strategy:
            return Ok(strategy)
    return Err(
        RollbackError(
            kind="invalid_input",
            message=f"unknown rollback strategy: {value}",
            hint=f"Expected one of: {', '.join(ROLLBACK_STRATEGIES)}",
        )
    )


def _target(request: RollbackRequest, strategy: RollbackStrategy) -> Result[str, RollbackError]:
    match strategy:
        case "previous-version":
            return Ok("previous")
        case "specific-version":
            version = (request.target_version or "").strip()
            if not version:
                return Err(
                    RollbackError(
                        kind="invalid_input",
                        message="specific-version rollback needs a target version",
                        hint="Pass --version, e.g. --version v1.4.2",
                    )
                )
            return Ok(version)
        case "specific-revision":
            revision = (request.target_revision or "").strip()
            if not revision.isdigit() or int(revision) < 1:
                return Err(
                    RollbackError(
                        kind="invalid_input",
                        message=f"invalid Helm revision: '{revision}'",
                        hint="Pass --revision with a positive integer from `helm history`",
                    )
                )
            return Ok(str(int(revision)))
        case _:
            raise AssertionError(f"unexpected rollback strategy: {strategy}")


def _helm_command(
    request: RollbackRequest, strategy: RollbackStrategy, target: str
) -> tuple[str, ...]:
    wait = ("--wait", f"--timeout={HELM_TIMEOUT}")
    match strategy:
        case "previous-version":
            return ("helm", "rollback", request.application, "-n", request.namespace, *wait)
        case "specific-revision":
            return ("helm", "rollback", request.application, target, "-n", request.namespace, *wait)
        case "specific-version":
            chart = request.chart_path or f"helm/{request.application}"
            return (
                "helm",
                "upgrade",
                request.application,
                chart,
                "-n",
                request.namespace,
                "--reuse-values",
                "--set",
                f"image.tag={target}",
                *wait,
            )
        case _:
            raise AssertionError(f"unexpected rollback strategy: {strategy}")


def plan_rollback(
    request: RollbackRequest,
    profiles: Sequence[EnvironmentProfile],
    secret_lookup: SecretLookup,
) -> Result[RollbackPlan, RollbackError]:
    """Validate ``request`` and build the plan.

    Both coordinates must resolve; a partial result is an error, as for
    deployments.
    """
    strategy = _strategy(request.strategy)
    if isinstance(strategy, Err):
        return strategy

    target = _target(request, strategy.value)
    if isinstance(target, Err):
        return target

    if not request.application.strip():
        return Err(RollbackError(kind="invalid_input", message="application name is required"))

    profile = find_profile(profiles, request.environment)
    if profile is None:
        return Err(
            RollbackError(
                kind="unknown_environment",
                message=f"unknown environment: {request.environment}",
                hint=f"Known: {', '.join(p.name for p in profiles)}",
            )
        )

    cluster = (secret_lookup(profile.cluster_secret_key) or "").strip()
    resource_group = (secret_lookup(profile.resource_group_secret_key) or "").strip()
    missing = [
        key
        for key, value in (
            (profile.cluster_secret_key, cluster),
            (profile.resource_group_secret_key, resource_group),
        )
        if not value
    ]
    if missing:
        return Err(
            RollbackError(
                kind="coordinates_unresolved",
                message=f"cluster coordinates unresolved for {profile.name}",
                hint=f"Check that secret(s) {', '.join(missing)} are set",
            )
        )

    return Ok(
        RollbackPlan(
            environment=profile.name,
            application=request.application,
            strategy=strategy.value,
            target=target.value,
            namespace=request.namespace,
            cluster_name=cluster,
            resource_group=resource_group,
            helm_command=_helm_command(request, strategy.value, target.value),
        )
    )
