"""Execution utilities for one-shot external commands.

This module runs a command to completion with timeout handling, optional
stdin, output capture and error reporting. It backs short helper steps such
as loading the SQL seed file through the database client.
"""

import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

# Default timeout in seconds
DEFAULT_TIMEOUT: float = 60.0

# Maximum output size in bytes
MAX_OUTPUT_BYTES: int = 102400  # 100KB


@dataclass(frozen=True, slots=True)
class CommandConfig:
    """Configuration for command execution.

    Attributes:
        argv: Command and arguments to execute.
        cwd: Working directory for execution.
        env: Additional environment variables to set.
        stdin: Optional stdin data to pipe to the command.
        timeout: Execution timeout in seconds.
    """

    argv: Sequence[str]
    cwd: str | Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    stdin: bytes | None = None
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result from command execution.

    Attributes:
        success: Whether the command ran to completion (any exit code).
        exit_code: Process exit code, or None if execution failed.
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        error: Error message if execution failed (timeout, not found, etc.).
        timed_out: Whether the command timed out.
        command_not_found: Whether the command was not found.
    """

    success: bool
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    timed_out: bool = False
    command_not_found: bool = False

    @property
    def ok(self) -> bool:
        """Return True if the command ran and exited with code 0."""
        return self.success and self.exit_code == 0


def truncate_output(output: str, max_bytes: int = MAX_OUTPUT_BYTES) -> str:
    """Truncate output to max bytes, preserving valid UTF-8.

    Args:
        output: The string to truncate.
        max_bytes: Maximum size in bytes.

    Returns:
        Truncated string with indicator if truncated.
    """
    if not output:
        return output

    encoded = output.encode("utf-8")
    if len(encoded) <= max_bytes:
        return output

    # Use 'ignore' to skip an incomplete multi-byte sequence at the cut
    truncated = encoded[:max_bytes].decode("utf-8", errors="ignore")

    return truncated + "\n... [output truncated]"


def run_command(config: CommandConfig) -> CommandResult:
    """Execute a command to completion.

    Handles timeouts and missing executables, and captures stdout/stderr.

    Args:
        config: Command configuration specifying argv, env, cwd, stdin, timeout.

    Returns:
        CommandResult with execution outcome.
    """
    argv = list(config.argv)
    if not argv:
        return CommandResult(success=False, error="No command specified")

    env = {**os.environ, **config.env}
    cwd = str(config.cwd) if config.cwd else None

    try:
        result = subprocess.run(  # noqa: S603
            argv,
            env=env,
            cwd=cwd,
            input=config.stdin,
            capture_output=True,
            timeout=config.timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            success=False,
            error=f"Command timed out after {config.timeout:g}s: {shlex.join(argv)}",
            timed_out=True,
        )
    except FileNotFoundError as e:
        return CommandResult(
            success=False,
            error=str(e),
            command_not_found=True,
        )
    except OSError as e:
        return CommandResult(success=False, error=str(e))

    return CommandResult(
        success=True,
        exit_code=result.returncode,
        stdout=truncate_output(result.stdout.decode("utf-8", errors="replace")),
        stderr=truncate_output(result.stderr.decode("utf-8", errors="replace")),
    )
