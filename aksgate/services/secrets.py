"""Secret store backends.

A store answers ``lookup(key)`` with the secret value or a ``SecretError``.
``get`` collapses that to ``str | None``, the shape the resolver expects:
an unreachable store and a missing secret both leave coordinates
unresolved, and neither is retried within one invocation.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal, Protocol

from aksgate.core.config import SecretsConfig
from aksgate.core.result import Err, Ok, Result
from aksgate.platform.process import run as run_process

__all__ = [
    "KEYVAULT_TIMEOUT_SECONDS",
    "SecretError",
    "SecretStore",
    "EnvSecretStore",
    "KeyVaultSecretStore",
    "MappingSecretStore",
    "store_from_config",
]

KEYVAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class SecretError:
    kind: Literal["missing", "empty", "backend_failed"]
    key: str
    message: str


def _value_or_none(result: Result[str, SecretError]) -> str | None:
    if isinstance(result, Ok):
        return result.value
    return None


class SecretStore(Protocol):
    def lookup(self, key: str) -> Result[str, SecretError]: ...

    def get(self, key: str) -> str | None: ...


def _non_empty(key: str, value: str | None) -> Result[str, SecretError]:
    if value is None:
        return Err(SecretError(kind="missing", key=key, message=f"secret {key} is not set"))
    value = value.strip()
    if not value:
        return Err(SecretError(kind="empty", key=key, message=f"secret {key} is empty"))
    return Ok(value)


class EnvSecretStore:
    """Secrets exposed to the job as environment variables.

    GitHub Actions workflows map ``secrets.*``/``vars.*`` into ``env:``; an
    optional prefix lets several tools share one job environment.
    """

    def __init__(self, environ: Mapping[str, str] | None = None, *, prefix: str = "") -> None:
        self._environ = os.environ if environ is None else environ
        self._prefix = prefix

    def lookup(self, key: str) -> Result[str, SecretError]:
        return _non_empty(key, self._environ.get(f"{self._prefix}{key}"))

    def get(self, key: str) -> str | None:
        return _value_or_none(self.lookup(key))


class KeyVaultSecretStore:
    """Azure Key Vault through the ``az`` CLI.

    Key Vault secret names allow only alphanumerics and dashes, so
    ``AKS_CLUSTER_NAME_DEV`` is read as ``AKS-CLUSTER-NAME-DEV``.
    """

    def __init__(self, vault_name: str, *, timeout: float = KEYVAULT_TIMEOUT_SECONDS) -> None:
        self._vault_name = vault_name
        self._timeout = timeout

    @staticmethod
    def secret_name(key: str) -> str:
        return key.replace("_", "-")

    def lookup(self, key: str) -> Result[str, SecretError]:
        cmd = [
            "az",
            "keyvault",
            "secret",
            "show",
            "--vault-name",
            self._vault_name,
            "--name",
            self.secret_name(key),
            "--query",
            "value",
            "-o",
            "tsv",
        ]
        result = run_process(cmd, timeout=self._timeout)
        if isinstance(result, Err):
            stderr = result.error.stderr.strip()
            if "SecretNotFound" in stderr or "was not found" in stderr:
                return Err(
                    SecretError(
                        kind="missing",
                        key=key,
                        message=f"secret {self.secret_name(key)} not found in {self._vault_name}",
                    )
                )
            return Err(
                SecretError(
                    kind="backend_failed",
                    key=key,
                    message=stderr or str(result.error),
                )
            )
        return _non_empty(key, result.value)

    def get(self, key: str) -> str | None:
        return _value_or_none(self.lookup(key))


@dataclass
class MappingSecretStore:
    """In-memory store for tests and offline runs. Records every lookup."""

    values: Mapping[str, str] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)

    def lookup(self, key: str) -> Result[str, SecretError]:
        self.requested.append(key)
        return _non_empty(key, self.values.get(key))

    def get(self, key: str) -> str | None:
        return _value_or_none(self.lookup(key))


def store_from_config(
    config: SecretsConfig, *, environ: Mapping[str, str] | None = None
) -> SecretStore:
    if config.backend == "keyvault" and config.keyvault:
        return KeyVaultSecretStore(config.keyvault)
    return EnvSecretStore(environ, prefix=config.prefix)
