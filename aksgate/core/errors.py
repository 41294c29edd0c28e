"""Process exit codes.

A workflow step only sees the exit status of ``aksgate``, so every failure
class gets its own stable code:
- 0: Success (including "nothing to deploy" outside strict mode)
- 1: User error (bad flags, malformed event payload)
- 2: Configuration error (invalid aksgate.toml, bad profile table)
- 3: No environment matched the trigger (strict mode only)
- 4: Environment matched but cluster coordinates are missing
- 5: Override rejected (production tier without notes)
- 6: I/O error (outputs or audit log not writable)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values must remain stable."""

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    NO_ENVIRONMENT = 3
    COORDINATES_UNRESOLVED = 4
    OVERRIDE_REJECTED = 5
    IO_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
