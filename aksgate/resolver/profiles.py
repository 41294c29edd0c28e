"""The environment profile table.

The table is the single place where branches map to environments. It is built
from ``[environments.*]`` tables in aksgate.toml, or from the defaults below,
and validated once before any resolution happens.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from aksgate.core.result import Err, Ok, Result
from aksgate.core.structured import as_str_dict, get_bool, get_str, get_str_list
from aksgate.resolver.model import UNKNOWN_ENVIRONMENT, AUTO_ENVIRONMENT, EnvironmentProfile
from aksgate.resolver.patterns import RefPattern, parse_pattern, patterns_overlap

__all__ = [
    "DEFAULT_PROFILES",
    "find_profile",
    "parse_profiles",
    "validate_profiles",
]

# Keys that would embed coordinates directly in configuration.
_LITERAL_COORDINATE_KEYS = ("cluster", "cluster_name", "resource_group", "aks_cluster_name")
_RESERVED_NAMES = (UNKNOWN_ENVIRONMENT, AUTO_ENVIRONMENT)


DEFAULT_PROFILES: tuple[EnvironmentProfile, ...] = (
    EnvironmentProfile(
        name="dev",
        branch_patterns=("develop",),
        cluster_secret_key="AKS_CLUSTER_NAME_DEV",
        resource_group_secret_key="AKS_RESOURCE_GROUP_DEV",
    ),
    EnvironmentProfile(
        name="staging",
        aliases=("sqe", "ppr"),
        branch_patterns=("main",),
        cluster_secret_key="AKS_CLUSTER_NAME_SQE",
        resource_group_secret_key="AKS_RESOURCE_GROUP_SQE",
    ),
    EnvironmentProfile(
        name="production",
        aliases=("prod",),
        branch_patterns=("release/*", "refs/tags/*"),
        cluster_secret_key="AKS_CLUSTER_NAME_PROD",
        resource_group_secret_key="AKS_RESOURCE_GROUP_PROD",
        creates_release=True,
        protected=True,
    ),
)


def find_profile(
    profiles: Iterable[EnvironmentProfile], name: str
) -> EnvironmentProfile | None:
    """Look a profile up by name or alias, case-insensitively."""
    for profile in profiles:
        if profile.answers_to(name):
            return profile
    return None


def _parse_one(name: str, table: Mapping[str, object]) -> Result[EnvironmentProfile, str]:
    for key in _LITERAL_COORDINATE_KEYS:
        if key in table:
            return Err(
                f"environments.{name}: '{key}' is not allowed, "
                "reference coordinates through cluster_secret/resource_group_secret"
            )

    branches = get_str_list(table, "branches")
    if branches is None:
        return Err(f"environments.{name}: 'branches' must be a list of strings")

    cluster_secret = get_str(table, "cluster_secret")
    rg_secret = get_str(table, "resource_group_secret")
    if cluster_secret is None or rg_secret is None:
        return Err(
            f"environments.{name}: 'cluster_secret' and 'resource_group_secret' are required"
        )

    aliases = get_str_list(table, "aliases")
    if "aliases" in table and aliases is None:
        return Err(f"environments.{name}: 'aliases' must be a list of strings")

    return Ok(
        EnvironmentProfile(
            name=name,
            aliases=tuple(aliases or ()),
            branch_patterns=tuple(branches),
            cluster_secret_key=cluster_secret,
            resource_group_secret_key=rg_secret,
            creates_release=get_bool(table, "create_release") or False,
            protected=get_bool(table, "protected") or False,
        )
    )


def parse_profiles(
    environments: Mapping[str, object],
) -> Result[tuple[EnvironmentProfile, ...], str]:
    """Build and validate profiles from the ``environments`` TOML table.

    Profile order follows the file, which keeps ``profiles`` output stable.
    """
    profiles: list[EnvironmentProfile] = []
    for name, raw in environments.items():
        table = as_str_dict(raw)
        if table is None:
            return Err(f"environments.{name} must be a table")
        parsed = _parse_one(name, table)
        if isinstance(parsed, Err):
            return parsed
        profiles.append(parsed.value)

    if not profiles:
        return Err("no environments defined")

    return validate_profiles(profiles)


def validate_profiles(
    profiles: Sequence[EnvironmentProfile],
) -> Result[tuple[EnvironmentProfile, ...], str]:
    """Check the table invariants.

    - names and aliases are unique (case-insensitive) and not reserved
    - every pattern parses
    - no ref can be matched by patterns of two different profiles
    """
    seen_names: dict[str, str] = {}
    for profile in profiles:
        for label in (profile.name, *profile.aliases):
            key = label.lower()
            if key in _RESERVED_NAMES:
                return Err(f"'{label}' is reserved and cannot name an environment")
            owner = seen_names.get(key)
            if owner is not None:
                return Err(f"name '{label}' is used by both {owner} and {profile.name}")
            seen_names[key] = profile.name

    parsed: list[tuple[str, RefPattern]] = []
    for profile in profiles:
        for pattern in profile.branch_patterns:
            result = parse_pattern(pattern)
            if isinstance(result, Err):
                return Err(f"environments.{profile.name}: {result.error}")
            parsed.append((profile.name, result.value))

    for i, (owner_a, a) in enumerate(parsed):
        for owner_b, b in parsed[i + 1 :]:
            if owner_a != owner_b and patterns_overlap(a, b):
                return Err(
                    f"patterns overlap: '{a.source}' ({owner_a}) and '{b.source}' ({owner_b})"
                )

    return Ok(tuple(profiles))
