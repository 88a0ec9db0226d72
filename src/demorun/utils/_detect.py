"""Detection utilities for the tools the demo depends on."""

import shutil
import subprocess
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

_MAX_RETRIES = 3
_BASE_DELAY = 0.1
_VERSION_TIMEOUT = 5.0

# Java prints its version with a single dash
_VERSION_ARGS: dict[str, tuple[str, ...]] = {
    "java": ("-version",),
}


@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Detection result for a single tool.

    Attributes:
        name: Logical tool name (for example "maven").
        executable: Configured executable name or path.
        path: Resolved absolute path, or None if not installed.
        version: First line of the version output, if available.
    """

    name: str
    executable: str
    path: str | None = None
    version: str | None = None

    @property
    def available(self) -> bool:
        """Return True if the executable was found."""
        return self.path is not None


def _run_with_retry(cmd: list[str], timeout: float) -> subprocess.CompletedProcess[str]:
    """Run subprocess with retry on BlockingIOError.

    Args:
        cmd: Command to run.
        timeout: Timeout in seconds.

    Returns:
        CompletedProcess result.

    Raises:
        BlockingIOError: If all retries exhausted.
        subprocess.TimeoutExpired: If command times out.
        FileNotFoundError: If executable not found.
    """
    last_error: BlockingIOError | None = None

    for attempt in range(_MAX_RETRIES):
        try:
            return subprocess.run(  # noqa: S603
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except BlockingIOError as e:
            last_error = e
            delay = _BASE_DELAY * (1 << attempt)
            time.sleep(delay)

    if last_error is not None:
        raise last_error
    msg = "Unexpected state: no exception but loop completed"
    raise RuntimeError(msg)


def _first_line(*outputs: str) -> str | None:
    for output in outputs:
        for line in output.splitlines():
            if line.strip():
                return line.strip()
    return None


def find_tool(
    name: str,
    executable: str,
    version_args: Sequence[str] | None = None,
) -> ToolStatus:
    """Locate a tool and read its version.

    Args:
        name: Logical tool name.
        executable: Executable name or path to look up on PATH.
        version_args: Arguments that print the version. Defaults to
            `-version` for java and `--version` otherwise.

    Returns:
        ToolStatus for the tool. A tool that is found but whose version
        command fails is still reported as available.
    """
    path = shutil.which(executable)
    if path is None:
        return ToolStatus(name=name, executable=executable)

    args = tuple(version_args) if version_args is not None else _VERSION_ARGS.get(
        name, ("--version",)
    )

    try:
        result = _run_with_retry([path, *args], timeout=_VERSION_TIMEOUT)
    except (subprocess.TimeoutExpired, OSError):
        return ToolStatus(name=name, executable=executable, path=path)

    # Some tools (java) print their version on stderr
    version = _first_line(result.stdout, result.stderr) if result.returncode == 0 else None
    return ToolStatus(name=name, executable=executable, path=path, version=version)


def detect_tooling(tools: Mapping[str, str]) -> dict[str, ToolStatus]:
    """Detect every configured tool.

    Args:
        tools: Logical tool names mapped to executable names or paths.

    Returns:
        A dict mapping tool name to its ToolStatus, in input order.
    """
    return {name: find_tool(name, executable) for name, executable in tools.items()}
