"""Console output and error presentation for the CLI."""

from .console import ConsoleProtocol, MockConsole, RichConsole, Style
from .errors import print_resolution_error, resolution_exit_code

__all__ = [
    # console
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    # errors
    "print_resolution_error",
    "resolution_exit_code",
]
