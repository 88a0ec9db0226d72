"""Service process management for a single launch attempt.

This module provides the ServiceProcess class that spawns the service with
its output going straight into the attempt's log files, watches for exit and
stops or releases it.
"""

import os
import shlex
import signal
import subprocess
from pathlib import Path
from typing import final

import anyio
import anyio.abc

from demorun.exceptions import ServiceLaunchError, ServiceStopError

# Seconds between exit checks of the spawned process
_EXIT_POLL_INTERVAL = 0.05

# Seconds to wait for the exit watcher after the process group was killed
_JOIN_TIMEOUT = 5.0


@final
class ServiceProcess:
    """A spawned service process with its output captured to files.

    The process runs in its own session so the whole process group (for
    example a build tool and the server it forks) can be signalled at once.
    Its stdout and stderr are the attempt's log files themselves, so the
    logs keep filling for as long as the process lives, with or without
    demorun. An exit watcher runs in the caller's task group under its own
    cancel scope.

    Attributes:
        name: Service name used in messages.
        command: Command and arguments to execute.
        stdout_log: File receiving standard output.
        stderr_log: File receiving standard error.
        pid: Process ID once spawned.
        returncode: Exit code once the process has exited.
        exited: Event set when the process exits.
    """

    __slots__ = (
        "_cancel_scope",
        "_cwd",
        "_env",
        "_finished",
        "_popen",
        "command",
        "exited",
        "name",
        "pid",
        "returncode",
        "stderr_log",
        "stdout_log",
    )

    def __init__(  # noqa: PLR0913
        self,
        name: str,
        command: tuple[str, ...],
        *,
        stdout_log: Path,
        stderr_log: Path,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self.name = name
        self.command = command
        self.stdout_log = stdout_log
        self.stderr_log = stderr_log
        self.pid: int | None = None
        self.returncode: int | None = None
        self.exited = anyio.Event()
        self._cwd = cwd
        self._env = env or {}
        self._popen: subprocess.Popen[bytes] | None = None
        self._cancel_scope = anyio.CancelScope()
        self._finished = anyio.Event()

    async def _watch(self, popen: subprocess.Popen[bytes]) -> None:
        """Record the exit code once the process ends."""
        try:
            with self._cancel_scope:
                while (code := popen.poll()) is None:
                    await anyio.sleep(_EXIT_POLL_INTERVAL)
                self.returncode = code
                self.exited.set()
        finally:
            self._finished.set()

    async def start(self, task_group: anyio.abc.TaskGroup) -> None:
        """Spawn the process and start watching for its exit.

        Args:
            task_group: Task group that owns the exit watcher.

        Raises:
            ServiceLaunchError: If the process cannot be spawned. The error
                is also written to the stderr log.
        """
        env: dict[str, str] | None = None
        if self._env:
            env = {**os.environ, **self._env}

        # The child keeps its own descriptors; ours close when the block ends
        with (
            self.stdout_log.open("wb") as stdout_file,
            self.stderr_log.open("wb") as stderr_file,
        ):
            try:
                popen = subprocess.Popen(  # noqa: ASYNC220, S603
                    list(self.command),
                    cwd=self._cwd,
                    env=env,
                    stdin=subprocess.DEVNULL,
                    stdout=stdout_file,
                    stderr=stderr_file,
                    start_new_session=True,
                )
            except OSError as e:
                line = f"Failed to start {shlex.join(self.command)}: {e}\n"
                _ = stderr_file.write(line.encode())
                self._finished.set()
                msg = f"Failed to start service '{self.name}': {e}"
                raise ServiceLaunchError(msg, service_name=self.name, cause=e) from e

        self._popen = popen
        self.pid = popen.pid
        task_group.start_soon(self._watch, popen)

    def is_running(self) -> bool:
        """Check if the process has been spawned and has not exited."""
        return self._popen is not None and not self.exited.is_set()

    def _send_stop_signal(self, *, force: bool) -> None:
        """Signal the whole process group to stop.

        The group is signalled even after the launcher itself exited, so
        anything it forked into the session goes too.

        Args:
            force: Send SIGKILL instead of SIGTERM.

        Raises:
            ServiceStopError: If the signal cannot be delivered.
        """
        if self._popen is None:
            return

        try:
            if os.name == "posix":
                os.killpg(self._popen.pid, signal.SIGKILL if force else signal.SIGTERM)
            elif force:
                self._popen.kill()
            else:
                self._popen.terminate()
        except ProcessLookupError:
            # Process group already gone
            pass
        except OSError as e:
            msg = f"Failed to stop service '{self.name}': {e}"
            raise ServiceStopError(msg, service_name=self.name, cause=e) from e

    async def _join(self) -> None:
        """Wait for the exit watcher to finish, cancelling it if it lingers."""
        with anyio.move_on_after(_JOIN_TIMEOUT):
            await self._finished.wait()

        if not self._finished.is_set():
            self._cancel_scope.cancel()
            await self._finished.wait()

    async def kill(self) -> None:
        """Hard-kill the process group and wait for the leader to be reaped."""
        with anyio.CancelScope(shield=True):
            self._send_stop_signal(force=True)
            await self._join()

    async def terminate(self, graceful_timeout: float) -> None:
        """Stop the process group gracefully, killing it after a timeout.

        Sends SIGTERM and waits for exit. If the process doesn't exit
        within the timeout, or left other processes behind in its group,
        those get SIGKILL.

        Args:
            graceful_timeout: Seconds to wait for graceful shutdown.

        Raises:
            ServiceStopError: If the process cannot be signalled.
        """
        with anyio.CancelScope(shield=True):
            if self.is_running():
                self._send_stop_signal(force=False)

                with anyio.move_on_after(graceful_timeout):
                    await self.exited.wait()

            self._send_stop_signal(force=True)
            await self._join()

    def detach(self) -> None:
        """Stop watching the process and leave it running.

        After this call the process is no longer signalled by `kill()` or
        `terminate()`.
        """
        self._cancel_scope.cancel()
        self._popen = None
