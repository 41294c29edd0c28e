"""Typed configuration loading.

aksgate.toml layout::

    [secrets]
    backend = "env"            # or "keyvault"
    keyvault = "kv-platform"   # required for keyvault
    prefix = ""

    [audit]
    path = ".aksgate/audit.jsonl"

    [environments.dev]
    branches = ["develop"]
    cluster_secret = "AKS_CLUSTER_NAME_DEV"
    resource_group_secret = "AKS_RESOURCE_GROUP_DEV"

Without ``[environments]`` the built-in table is used.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from aksgate.resolver.model import EnvironmentProfile
from aksgate.resolver.profiles import DEFAULT_PROFILES, parse_profiles

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_AUDIT_PATH",
    "AuditConfig",
    "Config",
    "ConfigError",
    "SecretsConfig",
    "find_config_path",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "aksgate.toml"
CONFIG_ENV_VAR = "AKSGATE_CONFIG"
DEFAULT_AUDIT_PATH = ".aksgate/audit.jsonl"

SecretBackend = Literal["env", "keyvault"]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Config file could not be read or is invalid."""

    message: str
    path: Path | None = None

    @property
    def hint(self) -> str | None:
        if self.path is None:
            return None
        return f"config: {self.path}"


@dataclass(frozen=True, slots=True)
class SecretsConfig:
    backend: SecretBackend = "env"
    keyvault: str | None = None
    prefix: str = ""


@dataclass(frozen=True, slots=True)
class AuditConfig:
    """Audit log location; None disables the file log."""

    path: str | None = DEFAULT_AUDIT_PATH


@dataclass(frozen=True, slots=True)
class Config:
    secrets: SecretsConfig = field(default_factory=SecretsConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    profiles: tuple[EnvironmentProfile, ...] = DEFAULT_PROFILES
    source: Path | None = None


def _secrets_from(table: Mapping[str, object]) -> Result[SecretsConfig, str]:
    backend = get_str(table, "backend") or "env"
    keyvault = get_str(table, "keyvault")
    prefix = get_str(table, "prefix") or ""
    if backend == "env":
        return Ok(SecretsConfig(backend="env", keyvault=keyvault, prefix=prefix))
    if backend == "keyvault":
        if keyvault is None:
            return Err("secrets.keyvault is required when backend = \"keyvault\"")
        return Ok(SecretsConfig(backend="keyvault", keyvault=keyvault, prefix=prefix))
    return Err(f"secrets.backend must be \"env\" or \"keyvault\", got \"{backend}\"")


def _section(data: Mapping[str, object], key: str) -> Result[StrDict, str]:
    if key not in data:
        return Ok({})
    table = get_table(data, key)
    if table is None:
        return Err(f"{key} must be a table")
    return Ok(table)


def config_from_dict(data: Mapping[str, object], *, source: Path | None = None) -> Result[Config, str]:
    secrets_table = _section(data, "secrets")
    if isinstance(secrets_table, Err):
        return secrets_table
    secrets = _secrets_from(secrets_table.value)
    if isinstance(secrets, Err):
        return secrets

    audit_table = _section(data, "audit")
    if isinstance(audit_table, Err):
        return audit_table
    if "path" in audit_table.value:
        audit = AuditConfig(path=get_str(audit_table.value, "path"))
    else:
        audit = AuditConfig()

    profiles = DEFAULT_PROFILES
    if "environments" in data:
        environments = _section(data, "environments")
        if isinstance(environments, Err):
            return environments
        parsed = parse_profiles(environments.value)
        if isinstance(parsed, Err):
            return parsed
        profiles = parsed.value

    return Ok(Config(secrets=secrets.value, audit=audit, profiles=profiles, source=source))


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate aksgate.toml.

    Args:
        path: Path to the TOML file.

    Returns:
        Ok(Config) on success, Err(ConfigError) when the file is unreadable
        or the profile table breaks an invariant.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    config = config_from_dict(result.value, source=path)
    if isinstance(config, Err):
        return Err(ConfigError(config.error, path=path))
    return Ok(config.value)


def find_config_path(
    explicit: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Path | None:
    """Locate the config file: explicit path, then $AKSGATE_CONFIG, then ./aksgate.toml.

    An explicit or env-provided path is returned even if missing, so that
    loading reports it; the cwd default is only returned if it exists.
    """
    if explicit is not None:
        return explicit
    env = os.environ if environ is None else environ
    from_env = env.get(CONFIG_ENV_VAR, "").strip()
    if from_env:
        return Path(from_env).expanduser()
    candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None


def load_config_or_default(path: Path | None) -> Result[Config, ConfigError]:
    """Like load_config, but no path means the built-in defaults."""
    if path is None:
        return Ok(Config())
    return load_config(path)
