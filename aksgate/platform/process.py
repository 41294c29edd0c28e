"""Subprocess execution returning a Result.

Used for the ``az`` and ``git`` calls; a non-zero exit, a timeout or a
missing executable all come back as ``Err(ProcessError)``.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from aksgate.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A failed command.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process never completed.
        stderr: Error output, or a description of the failure.
    """

    command: tuple[str, ...]
    returncode: int
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` and return its stdout.

    Args:
        cmd: Command and arguments.
        cwd: Working directory (current directory if None).
        timeout: Seconds before the command is abandoned.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stderr=proc.stderr)
        )
    return Ok(proc.stdout)
