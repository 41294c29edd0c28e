"""Environment resolution.

``resolve`` maps one trigger to one immutable decision:

1. A manual dispatch naming a known environment selects it directly.
2. Otherwise the ref is matched by tier (exact branch, branch prefix, tag).
   The first tier with a hit decides; more than one profile in that tier is
   ambiguous and nothing is deployed.
3. An override honors the requested environment whatever the event, but a
   production-tier target needs notes.
4. Both coordinates must come back from the secret store, or neither is used.

The function performs no I/O of its own; the secret lookup and the clock are
passed in.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from aksgate.core.result import Err, Ok, Result
from aksgate.resolver.errors import (
    CoordinatesUnresolved,
    NoEnvironmentMatched,
    OverrideRejected,
    ResolutionError,
)
from aksgate.resolver.model import (
    UNKNOWN_ENVIRONMENT,
    AuditRecord,
    EnvironmentProfile,
    EventKind,
    ResolutionResult,
    TriggerContext,
)
from aksgate.resolver.patterns import PatternTier, parse_pattern, parse_ref
from aksgate.resolver.profiles import find_profile

__all__ = ["SecretLookup", "Clock", "resolve", "match_ref"]

SecretLookup = Callable[[str], str | None]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def match_ref(
    ref: str, profiles: Sequence[EnvironmentProfile]
) -> Result[EnvironmentProfile, NoEnvironmentMatched]:
    """Pick the profile whose patterns match ``ref``."""
    parsed_ref = parse_ref(ref)
    hits: dict[PatternTier, list[EnvironmentProfile]] = {tier: [] for tier in PatternTier}

    for profile in profiles:
        for text in profile.branch_patterns:
            pattern = parse_pattern(text)
            # Unparseable patterns are rejected at load time; skip them here.
            if isinstance(pattern, Err) or not pattern.value.matches(parsed_ref):
                continue
            bucket = hits[pattern.value.tier]
            if profile not in bucket:
                bucket.append(profile)

    for tier in sorted(PatternTier):
        matched = hits[tier]
        if len(matched) == 1:
            return Ok(matched[0])
        if len(matched) > 1:
            return Err(
                NoEnvironmentMatched(
                    ref=ref,
                    reason="ambiguous match",
                    candidates=tuple(p.name for p in matched),
                )
            )

    return Err(NoEnvironmentMatched(ref=ref, reason="no branch pattern matched"))


def _select(
    context: TriggerContext, profiles: Sequence[EnvironmentProfile]
) -> Result[EnvironmentProfile, NoEnvironmentMatched]:
    requested = context.requested_environment
    explicit = requested is not None and (
        context.override_validation or context.event_kind == EventKind.MANUAL_DISPATCH
    )
    if not explicit or requested is None:
        return match_ref(context.ref, profiles)

    profile = find_profile(profiles, requested)
    if profile is None:
        return Err(
            NoEnvironmentMatched(ref=context.ref, reason=f"unknown environment '{requested}'")
        )
    return Ok(profile)


def _lookup(secret_lookup: SecretLookup, key: str) -> str:
    # A failing or timed-out store leaves the coordinate unresolved.
    try:
        value = secret_lookup(key)
    except Exception:
        return ""
    if value is None:
        return ""
    return value.strip()


def resolve(
    context: TriggerContext,
    profiles: Sequence[EnvironmentProfile],
    secret_lookup: SecretLookup,
    *,
    clock: Clock = _utcnow,
) -> ResolutionResult:
    """Resolve the deployment target for one pipeline invocation.

    Args:
        context: Trigger data from the workflow engine.
        profiles: The validated profile table.
        secret_lookup: Returns the secret value for a key, or None.
        clock: Source of the audit timestamp.

    Returns:
        A result whose ``should_deploy`` is authoritative. On failure
        ``error`` says which failure class occurred.
    """
    target = UNKNOWN_ENVIRONMENT
    cluster = ""
    resource_group = ""
    create_release = False
    error: ResolutionError | None = None

    selection = _select(context, profiles)
    if isinstance(selection, Err):
        error = selection.error
    else:
        profile = selection.value
        target = profile.name
        if context.override_validation and profile.protected and context.notes is None:
            error = OverrideRejected(environment=profile.name)
        else:
            cluster = _lookup(secret_lookup, profile.cluster_secret_key)
            resource_group = _lookup(secret_lookup, profile.resource_group_secret_key)
            missing = tuple(
                key
                for key, value in (
                    (profile.cluster_secret_key, cluster),
                    (profile.resource_group_secret_key, resource_group),
                )
                if not value
            )
            if missing:
                cluster = resource_group = ""
                error = CoordinatesUnresolved(environment=profile.name, missing_keys=missing)
            else:
                create_release = profile.creates_release

    should_deploy = error is None
    audit = AuditRecord(
        timestamp=clock().isoformat(),
        actor=context.actor,
        ref=context.ref,
        event_kind=context.event_kind,
        override_used=context.override_validation,
        override_notes=context.notes,
        requested_environment=context.requested_environment,
        target_environment=target,
        should_deploy=should_deploy,
        outcome="approved" if error is None else error.kind,
    )
    return ResolutionResult(
        should_deploy=should_deploy,
        target_environment=target,
        cluster_name=cluster,
        resource_group=resource_group,
        create_release=create_release and should_deploy,
        audit_record=audit,
        error=error,
    )
