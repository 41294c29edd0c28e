from __future__ import annotations

import pytest

from aksgate.core.result import Err, Ok
from aksgate.resolver.profiles import DEFAULT_PROFILES
from aksgate.services.rollback import RollbackPlan, RollbackRequest, plan_rollback

SECRETS = {
    "AKS_CLUSTER_NAME_SQE": "sqe-cluster",
    "AKS_RESOURCE_GROUP_SQE": "sqe-rg",
}


def _plan(request: RollbackRequest, secrets: dict[str, str] = SECRETS) -> RollbackPlan:
    result = plan_rollback(request, DEFAULT_PROFILES, secrets.get)
    assert isinstance(result, Ok), result
    return result.value


def test_previous_version() -> None:
    plan = _plan(RollbackRequest(environment="sqe", application="api", strategy="previous-version"))
    assert plan.environment == "staging"
    assert plan.target == "previous"
    assert plan.helm_command == (
        "helm", "rollback", "api", "-n", "default", "--wait", "--timeout=10m",
    )
    assert dict(plan.as_outputs()) == {
        "should_rollback": "true",
        "target_environment": "staging",
        "aks_cluster_name": "sqe-cluster",
        "aks_resource_group": "sqe-rg",
        "rollback_target": "previous",
        "namespace": "default",
    }


def test_specific_revision() -> None:
    plan = _plan(
        RollbackRequest(
            environment="staging",
            application="api",
            strategy="specific-revision",
            target_revision=" 04 ",
            namespace="apps",
        )
    )
    assert plan.target == "4"
    assert plan.helm_command[:6] == ("helm", "rollback", "api", "4", "-n", "apps")


def test_specific_version_uses_upgrade() -> None:
    plan = _plan(
        RollbackRequest(
            environment="staging",
            application="api",
            strategy="specific-version",
            target_version="v1.4.2",
        )
    )
    assert plan.helm_command[:4] == ("helm", "upgrade", "api", "helm/api")
    assert "--reuse-values" in plan.helm_command
    assert "image.tag=v1.4.2" in plan.helm_command


@pytest.mark.parametrize(
    ("strategy", "version", "revision"),
    [
        ("specific-version", None, None),
        ("specific-version", "  ", None),
        ("specific-revision", None, None),
        ("specific-revision", None, "0"),
        ("specific-revision", None, "abc"),
        ("latest", None, None),
    ],
)
def test_invalid_input(strategy: str, version: str | None, revision: str | None) -> None:
    result = plan_rollback(
        RollbackRequest(
            environment="staging",
            application="api",
            strategy=strategy,
            target_version=version,
            target_revision=revision,
        ),
        DEFAULT_PROFILES,
        SECRETS.get,
    )
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
    assert result.error.hint is not None


def test_application_required() -> None:
    result = plan_rollback(
        RollbackRequest(environment="staging", application=" ", strategy="previous-version"),
        DEFAULT_PROFILES,
        SECRETS.get,
    )
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"


def test_unknown_environment() -> None:
    result = plan_rollback(
        RollbackRequest(environment="qa", application="api", strategy="previous-version"),
        DEFAULT_PROFILES,
        SECRETS.get,
    )
    assert isinstance(result, Err)
    assert result.error.kind == "unknown_environment"


def test_partial_coordinates_rejected() -> None:
    result = plan_rollback(
        RollbackRequest(environment="staging", application="api", strategy="previous-version"),
        DEFAULT_PROFILES,
        {"AKS_CLUSTER_NAME_SQE": "sqe-cluster"}.get,
    )
    assert isinstance(result, Err)
    assert result.error.kind == "coordinates_unresolved"
    assert result.error.hint is not None
    assert "AKS_RESOURCE_GROUP_SQE" in result.error.hint
