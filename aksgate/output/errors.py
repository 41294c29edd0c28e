"""Error presentation and exit code mapping for resolution failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aksgate.core.errors import ErrorCode
from aksgate.output.console import Style
from aksgate.resolver.errors import (
    CoordinatesUnresolved,
    NoEnvironmentMatched,
    OverrideRejected,
    ResolutionError,
)

if TYPE_CHECKING:
    from aksgate.output.console import ConsoleProtocol

__all__ = ["print_resolution_error", "resolution_exit_code"]


def print_resolution_error(error: ResolutionError, console: ConsoleProtocol) -> None:
    match error:
        case NoEnvironmentMatched(candidates=candidates) if candidates:
            console.error(error.message)
        case NoEnvironmentMatched():
            console.warning(error.message)
        case CoordinatesUnresolved(missing_keys=keys):
            console.error(error.message)
            for key in keys:
                console.print(f"  missing: {key}", Style.DIM)
        case OverrideRejected():
            console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def resolution_exit_code(error: ResolutionError | None, *, strict: bool = False) -> int:
    """Exit status for a resolution.

    An unmatched ref is a normal "nothing to deploy" outcome unless
    ``strict``; missing coordinates and rejected overrides always fail.
    """
    match error:
        case None:
            return int(ErrorCode.OK)
        case NoEnvironmentMatched(candidates=candidates) if candidates:
            return int(ErrorCode.NO_ENVIRONMENT)
        case NoEnvironmentMatched():
            return int(ErrorCode.NO_ENVIRONMENT) if strict else int(ErrorCode.OK)
        case CoordinatesUnresolved():
            return int(ErrorCode.COORDINATES_UNRESOLVED)
        case OverrideRejected():
            return int(ErrorCode.OVERRIDE_REJECTED)
    return int(ErrorCode.USER_ERROR)
