"""Startup supervisor for bringing a dependent service up.

This module provides the StartupSupervisor class that drives the bounded
retry loop: short-circuit probe, launch, readiness polling, log capture and
failure diagnosis. It uses anyio for structured concurrency.
"""

import shlex
from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING, Self, final

import anyio
import anyio.abc

from demorun.exceptions import ServiceLaunchError
from demorun.utils._logging import create_null_logger

from ._diagnosis import DEFAULT_RULES, DiagnosisRule, diagnose_files
from ._logs import attempt_log_paths, get_timestamp, tail_lines
from ._models import (
    AttemptOutcome,
    AttemptRecord,
    LaunchSpec,
    StartupResult,
    SupervisorConfig,
)
from ._output import ConsoleReporter
from ._probe import is_port_open, wait_for_port
from ._protocol import Reporter
from ._service import ServiceProcess

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


@final
class StartupSupervisor:
    """Brings a service from unreachable to reachable, or fails loudly.

    Must be used as an async context manager. A service launched by the
    supervisor is owned by it until either `detach()` hands it over to the
    operator, leaving it running after the context exits, or the context
    exits without a detach (for example because the body raised), in which
    case it is stopped gracefully. A service that was already running
    before the supervisor looked is never touched.

    Attempts are strictly sequential: attempt k+1 starts only after
    attempt k has succeeded, timed out or had its process killed.

    Example:
        >>> async with StartupSupervisor(config, launch) as supervisor:
        ...     result = await supervisor.ensure_running()
        ...     if result.success:
        ...         ...  # use the service
        ...         await supervisor.detach()
    """

    __slots__ = (
        "_attempts",
        "_config",
        "_launch",
        "_logger",
        "_process",
        "_reporter",
        "_rules",
        "_task_group",
    )

    def __init__(
        self,
        config: SupervisorConfig,
        launch: LaunchSpec,
        reporter: Reporter | None = None,
        *,
        rules: Sequence[DiagnosisRule] = DEFAULT_RULES,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            config: Supervisor settings (host, port, budgets, timeouts).
            launch: How to start the service.
            reporter: Operator-facing output. Uses ConsoleReporter if None.
            rules: Diagnosis rules applied to failed attempts.
            logger: Structured logger. Uses a null logger if None.
        """
        self._config = config
        self._launch = launch
        self._reporter: Reporter = reporter or ConsoleReporter()
        self._rules = tuple(rules)
        base_logger = logger if logger is not None else create_null_logger()
        self._logger = base_logger.bind(service=config.name)
        self._attempts: list[AttemptRecord] = []
        self._process: ServiceProcess | None = None
        self._task_group: anyio.abc.TaskGroup | None = None

    @property
    def config(self) -> SupervisorConfig:
        """Return the supervisor configuration."""
        return self._config

    @property
    def attempts(self) -> tuple[AttemptRecord, ...]:
        """Return the records of all launch attempts so far."""
        return tuple(self._attempts)

    @property
    def process(self) -> ServiceProcess | None:
        """Return the service process launched by this supervisor, if any."""
        return self._process

    async def __aenter__(self) -> Self:
        self._task_group = anyio.create_task_group()
        _ = await self._task_group.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        task_group = self._task_group
        if task_group is None:
            return None

        try:
            await self.stop()
        finally:
            self._task_group = None
            # Anything still in the group belongs to an already stopped process.
            # The body's exception is not handed to the group so it propagates
            # unwrapped.
            task_group.cancel_scope.cancel()
            _ = await task_group.__aexit__(None, None, None)

        return None

    async def stop(self) -> None:
        """Stop the service launched by this supervisor, if it is running.

        Raises:
            ServiceStopError: If the service cannot be signalled.
        """
        process = self._process
        if process is None:
            return

        self._process = None
        was_running = process.is_running()
        await process.terminate(self._config.shutdown_timeout)
        if was_running:
            self._logger.info("service_stopped", pid=process.pid, exit_code=process.returncode)
            await self._reporter.message("info", f"Stopped {self._config.name} (pid {process.pid})")

    async def detach(self) -> ServiceProcess | None:
        """Hand the launched service over so it outlives the supervisor.

        Its output keeps going to the attempt's log files.

        Returns:
            The released process, or None if nothing was launched.
        """
        process = self._process
        if process is None:
            return None

        self._process = None
        process.detach()
        self._logger.info("service_detached", pid=process.pid)
        await self._reporter.message(
            "info",
            f"{self._config.name} keeps running (pid {process.pid}); "
            f"logs in {process.stdout_log.parent}",
        )
        return process

    async def ensure_running(self) -> StartupResult:
        """Make sure the service is reachable on its port.

        Probes the port once; if it is open, returns immediately without
        launching anything. Otherwise launches the service up to
        `max_attempts` times, waiting up to `readiness_timeout` seconds for
        the port on each attempt.

        Returns:
            StartupResult describing the outcome and every attempt made.

        Raises:
            RuntimeError: If called outside the async context manager.
            ServiceLaunchError: If the launch spec has no usable launch path.
        """
        if self._task_group is None:
            msg = "StartupSupervisor must be used as an async context manager"
            raise RuntimeError(msg)

        config = self._config
        if await is_port_open(config.host, config.port, timeout=config.connect_timeout):
            self._logger.info("service_already_running", address=config.address)
            await self._reporter.message(
                "success", f"{config.name} is already running on {config.address}"
            )
            return StartupResult(success=True, already_running=True, log_dir=config.log_dir)

        config.log_dir.mkdir(parents=True, exist_ok=True)
        await self._reporter.message(
            "info", f"{config.name} is not reachable on {config.address}; starting it"
        )

        for index in range(1, config.max_attempts + 1):
            record = await self._run_attempt(index)
            self._attempts.append(record)

            if record.outcome == AttemptOutcome.SUCCEEDED:
                return StartupResult(
                    success=True,
                    attempts=tuple(self._attempts),
                    log_dir=config.log_dir,
                )

            if index < config.max_attempts:
                await self._reporter.message(
                    "warning", f"Retrying in {config.retry_delay:g}s"
                )
                await anyio.sleep(config.retry_delay)

        self._logger.error(
            "service_unavailable",
            attempts=config.max_attempts,
            log_dir=str(config.log_dir),
        )
        await self._reporter.message(
            "error",
            f"{config.name} did not start after {config.max_attempts} attempt(s); "
            f"logs are in {config.log_dir}",
        )
        return StartupResult(
            success=False,
            attempts=tuple(self._attempts),
            log_dir=config.log_dir,
        )

    async def _run_attempt(self, index: int) -> AttemptRecord:
        """Run a single launch attempt through to resolution.

        Args:
            index: Attempt number, starting at 1.

        Returns:
            The resolved attempt record.
        """
        config = self._config
        logger = self._logger.bind(attempt=index)
        stdout_log, stderr_log = attempt_log_paths(config.log_dir, config.name, index)
        record = AttemptRecord(
            index=index,
            started_at=get_timestamp(),
            stdout_log=stdout_log,
            stderr_log=stderr_log,
        )

        # Resolved per attempt so a fallback build that produced the artifact
        # is picked up by the next attempt
        record.command, record.method = self._launch.resolve(config.name)

        logger.info("attempt_started", method=record.method.value, command=list(record.command))
        await self._reporter.message(
            "info",
            f"Attempt {index}/{config.max_attempts}: starting {config.name} "
            f"({record.method.value}): {shlex.join(record.command)}",
        )

        process = ServiceProcess(
            config.name,
            record.command,
            stdout_log=stdout_log,
            stderr_log=stderr_log,
            cwd=self._launch.cwd,
            env=self._launch.env,
        )

        if self._task_group is None:
            msg = "StartupSupervisor must be used as an async context manager"
            raise RuntimeError(msg)

        try:
            await process.start(self._task_group)
        except ServiceLaunchError as e:
            record.outcome = AttemptOutcome.FAILED
            record.error = str(e)
            await self._resolve_failure(record, logger)
            return record

        record.pid = process.pid
        ready = await wait_for_port(
            config.host,
            config.port,
            timeout=config.readiness_timeout,
            interval=config.poll_interval,
            connect_timeout=config.connect_timeout,
            exited=process.exited,
        )

        if ready:
            record.outcome = AttemptOutcome.SUCCEEDED
            record.finished_at = get_timestamp()
            self._process = process
            logger.info("attempt_ready", pid=process.pid, address=config.address)
            await self._reporter.message(
                "success",
                f"{config.name} is up on {config.address} (pid {process.pid})",
            )
            return record

        record.outcome = (
            AttemptOutcome.FAILED if process.exited.is_set() else AttemptOutcome.KILLED
        )
        await process.kill()
        record.exit_code = process.returncode
        await self._resolve_failure(record, logger)
        return record

    async def _resolve_failure(
        self,
        record: AttemptRecord,
        logger: "FilteringBoundLogger",
    ) -> None:
        """Show log tails and the diagnosis for a failed attempt."""
        config = self._config
        record.finished_at = get_timestamp()
        record.diagnosis = diagnose_files((record.stdout_log, record.stderr_log), self._rules)

        logger.warning(
            "attempt_failed",
            outcome=record.outcome.value,
            exit_code=record.exit_code,
            error=record.error,
            diagnosis=sorted(record.diagnosis.names),
        )

        if record.outcome == AttemptOutcome.KILLED:
            reason = f"not reachable after {config.readiness_timeout:g}s; process killed"
        elif record.error is not None:
            reason = record.error
        else:
            reason = f"process exited early with code {record.exit_code}"
        await self._reporter.message(
            "error", f"Attempt {record.index}/{config.max_attempts} failed: {reason}"
        )

        await self._reporter.log_tail(
            "stdout", record.stdout_log, tail_lines(record.stdout_log, config.tail_lines)
        )
        await self._reporter.log_tail(
            "stderr", record.stderr_log, tail_lines(record.stderr_log, config.tail_lines)
        )
        await self._reporter.diagnosis(record.diagnosis)
