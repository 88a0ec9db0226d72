"""Data models for the startup supervisor.

This module defines the core data types for bringing a service up:
- AttemptOutcome: Resolution states of a launch attempt
- LaunchMethod: Which launch path an attempt used
- LaunchSpec: How to start the service (prebuilt artifact or fallback)
- SupervisorConfig: Explicit supervisor settings
- AttemptRecord: Mutable per-attempt bookkeeping
- StartupResult: Outcome of ensure_running()
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from demorun.exceptions import ServiceLaunchError

from ._diagnosis import Diagnosis

_MAX_PORT = 65535


class AttemptOutcome(StrEnum):
    """Launch attempt outcomes.

    - PENDING: Attempt is in progress
    - SUCCEEDED: Port became reachable
    - FAILED: Process exited early or could not be spawned
    - KILLED: Readiness timed out and the process was terminated
    """

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    KILLED = "killed"


class LaunchMethod(StrEnum):
    """Launch paths available to a LaunchSpec."""

    ARTIFACT = "artifact"
    FALLBACK = "fallback"


def expand_command(parts: Sequence[str], values: Mapping[str, str]) -> tuple[str, ...]:
    """Replace `{name}` placeholders in each command part.

    Unknown placeholders are left untouched so that literal braces in
    arguments survive.

    Args:
        parts: Command and arguments, possibly containing placeholders.
        values: Placeholder names mapped to their replacement text.

    Returns:
        The expanded command.
    """
    expanded: list[str] = []
    for part in parts:
        for name, value in values.items():
            part = part.replace(f"{{{name}}}", value)  # noqa: PLW2901
        expanded.append(part)
    return tuple(expanded)


@dataclass(frozen=True, slots=True)
class LaunchSpec:
    """How to start a service.

    The prebuilt artifact is preferred: when `artifact` matches a file in
    the working directory, `artifact_command` is used with `{artifact}`
    replaced by that file. Otherwise `fallback_command` (a build-and-run
    command) is used.

    Attributes:
        fallback_command: Build-and-run command used when no artifact exists.
        artifact: Glob (relative to cwd) or absolute path of the artifact.
        artifact_command: Command that runs the artifact.
        cwd: Working directory for the process.
        env: Additional environment variables.
        substitutions: Placeholder values such as tool paths or base URL.
    """

    fallback_command: tuple[str, ...] = ()
    artifact: str | None = None
    artifact_command: tuple[str, ...] = ("java", "-jar", "{artifact}")
    cwd: Path | None = None
    env: dict[str, str] = field(default_factory=dict)
    substitutions: dict[str, str] = field(default_factory=dict)

    def find_artifact(self) -> Path | None:
        """Return the newest file matching the artifact glob, if any."""
        if not self.artifact:
            return None

        pattern = Path(self.artifact)
        if pattern.is_absolute():
            return pattern if pattern.is_file() else None

        base = self.cwd if self.cwd is not None else Path.cwd()
        matches = [path for path in base.glob(self.artifact) if path.is_file()]
        if not matches:
            return None
        return max(matches, key=lambda path: path.stat().st_mtime)

    def resolve(self, name: str = "service") -> tuple[tuple[str, ...], LaunchMethod]:
        """Pick the launch path and expand its placeholders.

        Args:
            name: Service name, used in error messages.

        Returns:
            The command to run and the launch method it came from.

        Raises:
            ServiceLaunchError: If neither launch path is usable.
        """
        artifact = self.find_artifact()
        if artifact is not None and self.artifact_command:
            values = {**self.substitutions, "artifact": str(artifact)}
            return expand_command(self.artifact_command, values), LaunchMethod.ARTIFACT

        if self.fallback_command:
            return (
                expand_command(self.fallback_command, self.substitutions),
                LaunchMethod.FALLBACK,
            )

        msg = f"No prebuilt artifact found and no fallback command for '{name}'"
        raise ServiceLaunchError(msg, service_name=name)


@dataclass(frozen=True, slots=True)
class SupervisorConfig:
    """Configuration for the startup supervisor.

    Attributes:
        name: Service name used in log file names and messages.
        port: TCP port the service listens on.
        log_dir: Directory receiving per-attempt log files.
        host: Host to probe for readiness.
        max_attempts: Launch attempt budget.
        readiness_timeout: Seconds to wait for the port on each attempt.
        poll_interval: Seconds between readiness probes.
        connect_timeout: Seconds allowed for a single TCP connect probe.
        retry_delay: Seconds to pause between failed attempts.
        tail_lines: Number of log lines shown for a failed attempt.
        shutdown_timeout: Seconds to wait for graceful shutdown before kill.
    """

    name: str
    port: int
    log_dir: Path
    host: str = "127.0.0.1"
    max_attempts: int = 3
    readiness_timeout: float = 60.0
    poll_interval: float = 1.0
    connect_timeout: float = 1.0
    retry_delay: float = 3.0
    tail_lines: int = 50
    shutdown_timeout: float = 10.0

    def __post_init__(self) -> None:
        if not 0 < self.port <= _MAX_PORT:
            msg = f"port must be between 1 and {_MAX_PORT}, got {self.port}"
            raise ValueError(msg)
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.readiness_timeout < 1:
            msg = f"readiness_timeout must be at least 1, got {self.readiness_timeout}"
            raise ValueError(msg)
        if self.poll_interval <= 0:
            msg = f"poll_interval must be positive, got {self.poll_interval}"
            raise ValueError(msg)

    @property
    def address(self) -> str:
        """Return `host:port`."""
        return f"{self.host}:{self.port}"


@dataclass(slots=True)
class AttemptRecord:
    """Mutable record of a single launch attempt.

    Attributes:
        index: Attempt number, starting at 1.
        started_at: ISO 8601 timestamp of the attempt start.
        stdout_log: File receiving the child's standard output.
        stderr_log: File receiving the child's standard error.
        command: Command used for the launch.
        method: Launch path the command came from.
        pid: Process ID of the child, once spawned.
        outcome: Current outcome of the attempt.
        exit_code: Exit code if the child terminated.
        error: Launch error text if the child could not be spawned.
        finished_at: ISO 8601 timestamp of resolution.
        diagnosis: Log diagnosis for a failed attempt.
    """

    index: int
    started_at: str
    stdout_log: Path
    stderr_log: Path
    command: tuple[str, ...] = ()
    method: LaunchMethod | None = None
    pid: int | None = None
    outcome: AttemptOutcome = AttemptOutcome.PENDING
    exit_code: int | None = None
    error: str | None = None
    finished_at: str | None = None
    diagnosis: Diagnosis | None = None

    @property
    def failed(self) -> bool:
        """Return True if the attempt resolved without readiness."""
        return self.outcome in (AttemptOutcome.FAILED, AttemptOutcome.KILLED)


@dataclass(frozen=True, slots=True)
class StartupResult:
    """Outcome of StartupSupervisor.ensure_running().

    Attributes:
        success: Whether the service is reachable.
        already_running: Whether the service was reachable before any launch.
        attempts: Records of every launch attempt made.
        log_dir: Directory holding the attempt logs.
    """

    success: bool
    already_running: bool = False
    attempts: tuple[AttemptRecord, ...] = ()
    log_dir: Path | None = None

    @property
    def attempt_count(self) -> int:
        """Return the number of launch attempts made."""
        return len(self.attempts)
