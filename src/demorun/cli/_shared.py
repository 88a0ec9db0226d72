"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- Console utilities for error handling
"""

from enum import IntEnum
from typing import Never

from rich.console import Console

__all__ = [
    "ExitCode",
    "exit_with_error",
    "get_error_console",
]


class ExitCode(IntEnum):
    """Standard exit codes for demorun commands."""

    SUCCESS = 0
    FAILURE = 1
    CONFIG_ERROR = 2


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.FAILURE,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to FAILURE).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)
