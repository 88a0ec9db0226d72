"""Foreground launch of the interactive client."""

import os
from collections.abc import Mapping, Sequence
from pathlib import Path

import anyio

from demorun.exceptions import ServiceLaunchError


async def run_client(
    command: Sequence[str],
    *,
    name: str = "client",
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run the client with the terminal's stdio and wait for it to exit.

    If the calling task is cancelled the client is killed.

    Args:
        command: Command and arguments to execute.
        name: Name used in error messages.
        cwd: Working directory for the client.
        env: Additional environment variables.

    Returns:
        The client's exit code.

    Raises:
        ServiceLaunchError: If the client cannot be spawned.
    """
    merged_env = {**os.environ, **env} if env else None

    try:
        process = await anyio.open_process(
            list(command),
            cwd=cwd,
            env=merged_env,
            stdin=None,
            stdout=None,
            stderr=None,
        )
    except OSError as e:
        msg = f"Failed to start '{name}': {e}"
        raise ServiceLaunchError(msg, service_name=name, cause=e) from e

    async with process:
        return await process.wait()
