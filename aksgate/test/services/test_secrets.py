from __future__ import annotations

import pytest

from aksgate.core.config import SecretsConfig
from aksgate.core.result import Err, Ok, Result
from aksgate.platform.process import ProcessError
from aksgate.services import secrets as secrets_mod
from aksgate.services.secrets import (
    EnvSecretStore,
    KeyVaultSecretStore,
    MappingSecretStore,
    store_from_config,
)


class TestEnvSecretStore:
    def test_lookup_and_get(self) -> None:
        store = EnvSecretStore({"AKS_CLUSTER_NAME_DEV": " dev-cluster\n"})
        assert store.lookup("AKS_CLUSTER_NAME_DEV") == Ok("dev-cluster")
        assert store.get("AKS_CLUSTER_NAME_DEV") == "dev-cluster"

    def test_missing(self) -> None:
        result = EnvSecretStore({}).lookup("AKS_CLUSTER_NAME_DEV")
        assert isinstance(result, Err)
        assert result.error.kind == "missing"
        assert result.error.key == "AKS_CLUSTER_NAME_DEV"

    def test_empty(self) -> None:
        store = EnvSecretStore({"AKS_CLUSTER_NAME_DEV": "   "})
        result = store.lookup("AKS_CLUSTER_NAME_DEV")
        assert isinstance(result, Err)
        assert result.error.kind == "empty"
        assert store.get("AKS_CLUSTER_NAME_DEV") is None

    def test_prefix(self) -> None:
        store = EnvSecretStore({"DEPLOY_AKS_CLUSTER_NAME_DEV": "c"}, prefix="DEPLOY_")
        assert store.get("AKS_CLUSTER_NAME_DEV") == "c"


class TestKeyVaultSecretStore:
    def _patch(
        self, monkeypatch: pytest.MonkeyPatch, result: Result[str, ProcessError]
    ) -> list[list[str]]:
        calls: list[list[str]] = []

        def fake_run(cmd: list[str], cwd: object = None, *, timeout: float | None = None):
            calls.append(cmd)
            return result

        monkeypatch.setattr(secrets_mod, "run_process", fake_run)
        return calls

    def test_secret_name_mapping(self) -> None:
        assert KeyVaultSecretStore.secret_name("AKS_CLUSTER_NAME_DEV") == "AKS-CLUSTER-NAME-DEV"

    def test_lookup_runs_az(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = self._patch(monkeypatch, Ok("aks-dev-01\n"))
        store = KeyVaultSecretStore("ci-vault")

        assert store.get("AKS_CLUSTER_NAME_DEV") == "aks-dev-01"
        assert calls == [
            [
                "az",
                "keyvault",
                "secret",
                "show",
                "--vault-name",
                "ci-vault",
                "--name",
                "AKS-CLUSTER-NAME-DEV",
                "--query",
                "value",
                "-o",
                "tsv",
            ]
        ]

    def test_not_found(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._patch(
            monkeypatch,
            Err(ProcessError(("az",), 3, "ERROR: (SecretNotFound) A secret with name x was not found")),
        )
        result = KeyVaultSecretStore("ci-vault").lookup("AKS_CLUSTER_NAME_DEV")
        assert isinstance(result, Err)
        assert result.error.kind == "missing"

    def test_backend_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._patch(monkeypatch, Err(ProcessError(("az",), -1, "Command timed out after 30.0s")))
        store = KeyVaultSecretStore("ci-vault")
        result = store.lookup("AKS_CLUSTER_NAME_DEV")
        assert isinstance(result, Err)
        assert result.error.kind == "backend_failed"
        assert "timed out" in result.error.message
        assert store.get("AKS_CLUSTER_NAME_DEV") is None


def test_mapping_store_records_requests() -> None:
    store = MappingSecretStore({"A": "1"})
    assert store.get("A") == "1"
    assert store.get("B") is None
    assert store.requested == ["A", "B"]


def test_store_from_config() -> None:
    env_store = store_from_config(SecretsConfig(), environ={"K": "v"})
    assert isinstance(env_store, EnvSecretStore)
    assert env_store.get("K") == "v"

    kv_store = store_from_config(SecretsConfig(backend="keyvault", keyvault="ci-vault"))
    assert isinstance(kv_store, KeyVaultSecretStore)
