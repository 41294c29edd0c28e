from __future__ import annotations

from aksgate.core.result import Err, Ok
from aksgate.resolver.model import EnvironmentProfile
from aksgate.resolver.profiles import (
    DEFAULT_PROFILES,
    find_profile,
    parse_profiles,
    validate_profiles,
)


def _profile(name: str, *patterns: str, aliases: tuple[str, ...] = ()) -> EnvironmentProfile:
    upper = name.upper()
    return EnvironmentProfile(
        name=name,
        aliases=aliases,
        branch_patterns=patterns,
        cluster_secret_key=f"AKS_CLUSTER_NAME_{upper}",
        resource_group_secret_key=f"AKS_RESOURCE_GROUP_{upper}",
    )


def test_default_profiles_are_valid() -> None:
    assert validate_profiles(DEFAULT_PROFILES) == Ok(DEFAULT_PROFILES)


def test_default_production_is_protected_and_releases() -> None:
    production = find_profile(DEFAULT_PROFILES, "production")
    assert production is not None
    assert production.protected
    assert production.creates_release
    assert find_profile(DEFAULT_PROFILES, "prod") is production


def test_find_profile_by_alias_case_insensitive() -> None:
    staging = find_profile(DEFAULT_PROFILES, "SQE")
    assert staging is not None
    assert staging.name == "staging"
    assert find_profile(DEFAULT_PROFILES, "qa") is None


def test_duplicate_alias_rejected() -> None:
    result = validate_profiles(
        [_profile("dev", "develop", aliases=("test",)), _profile("test", "main")]
    )
    assert isinstance(result, Err)
    assert "'test'" in result.error


def test_reserved_names_rejected() -> None:
    assert isinstance(validate_profiles([_profile("unknown", "develop")]), Err)
    assert isinstance(validate_profiles([_profile("dev", "develop", aliases=("auto",))]), Err)


def test_bad_pattern_rejected() -> None:
    result = validate_profiles([_profile("dev", "feat*ure")])
    assert isinstance(result, Err)
    assert "environments.dev" in result.error


def test_same_profile_may_repeat_overlapping_patterns() -> None:
    result = validate_profiles([_profile("production", "release/*", "release/1.0")])
    assert isinstance(result, Ok)


def test_cross_profile_overlap_rejected() -> None:
    result = validate_profiles([_profile("dev", "develop"), _profile("staging", "develop")])
    assert isinstance(result, Err)
    assert "overlap" in result.error


def test_parse_profiles_keeps_file_order() -> None:
    result = parse_profiles(
        {
            "staging": {
                "branches": ["main"],
                "cluster_secret": "C",
                "resource_group_secret": "D",
            },
            "dev": {
                "branches": ["develop"],
                "aliases": ["development"],
                "cluster_secret": "A",
                "resource_group_secret": "B",
                "protected": "false",
            },
        }
    )
    assert isinstance(result, Ok)
    assert [p.name for p in result.value] == ["staging", "dev"]
    assert result.value[1].aliases == ("development",)
    assert not result.value[1].protected


def test_parse_profiles_requires_secret_keys() -> None:
    result = parse_profiles({"dev": {"branches": ["develop"], "cluster_secret": "A"}})
    assert isinstance(result, Err)
    assert "resource_group_secret" in result.error


def test_parse_profiles_requires_branch_list() -> None:
    result = parse_profiles(
        {"dev": {"branches": "develop", "cluster_secret": "A", "resource_group_secret": "B"}}
    )
    assert isinstance(result, Err)


def test_parse_profiles_empty_table() -> None:
    assert parse_profiles({}) == Err("no environments defined")
