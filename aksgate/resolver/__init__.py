"""Environment resolution core.

Pure logic only: this package must not import the CLI, services or output
layers.
"""

from .errors import CoordinatesUnresolved, NoEnvironmentMatched, OverrideRejected, ResolutionError
from .model import (
    UNKNOWN_ENVIRONMENT,
    AuditRecord,
    EnvironmentProfile,
    EventKind,
    ResolutionResult,
    TriggerContext,
)
from .profiles import DEFAULT_PROFILES, find_profile, parse_profiles, validate_profiles
from .resolve import SecretLookup, match_ref, resolve

__all__ = [
    # errors
    "CoordinatesUnresolved",
    "NoEnvironmentMatched",
    "OverrideRejected",
    "ResolutionError",
    # model
    "UNKNOWN_ENVIRONMENT",
    "AuditRecord",
    "EnvironmentProfile",
    "EventKind",
    "ResolutionResult",
    "TriggerContext",
    # profiles
    "DEFAULT_PROFILES",
    "find_profile",
    "parse_profiles",
    "validate_profiles",
    # resolve
    "SecretLookup",
    "match_ref",
    "resolve",
]
