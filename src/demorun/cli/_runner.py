"""Async runner for the demo.

This module provides the async entry points that coordinate tool detection,
the optional seed step, service startup, endpoint probing and the client.
"""

from collections.abc import Callable, Mapping, Sequence
from functools import partial
from typing import TYPE_CHECKING, TypeAlias

import anyio
import anyio.to_thread
import httpx
from rich.prompt import Prompt

from demorun.client import run_client
from demorun.config import Config
from demorun.endpoints import EndpointResult, query_endpoints
from demorun.exceptions import SeedError, ServiceLaunchError
from demorun.seed import run_seed
from demorun.supervisor import Reporter, StartupSupervisor
from demorun.utils._detect import ToolStatus, detect_tooling
from demorun.utils._logging import create_null_logger

from ._services import create_client_launch, create_service_launch, create_supervisor_config
from ._shared import ExitCode

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

PasswordPrompt: TypeAlias = Callable[[str], str]

_MISSING_TOOL_HINTS: dict[str, str] = {
    "java": "launches will fail until a Java runtime is installed",
    "maven": "only a prebuilt artifact can be launched",
    "mysql": "the seed step will be skipped",
}


def prompt_password(prompt: str) -> str:
    """Ask for a password on the terminal without echoing it."""
    return Prompt.ask(prompt, password=True)


async def report_tooling(reporter: Reporter, statuses: Mapping[str, ToolStatus]) -> None:
    """Report the detected tools; missing ones are warnings only."""
    for status in statuses.values():
        if status.available:
            version = f" ({status.version})" if status.version else ""
            await reporter.message("info", f"{status.name}: {status.path}{version}")
        else:
            hint = _MISSING_TOOL_HINTS.get(status.name, "some steps may fail")
            await reporter.message(
                "warning", f"{status.name} not found ({status.executable}); {hint}"
            )


async def load_seed(
    config: Config,
    reporter: Reporter,
    tools: Mapping[str, ToolStatus],
    *,
    password_prompt: PasswordPrompt,
    logger: "FilteringBoundLogger",
) -> bool:
    """Load the SQL seed file if everything it needs is present.

    Returns:
        True if the seed was loaded.
    """
    sql_file = config.seed_file
    if not sql_file.is_file():
        await reporter.message("warning", f"Seed file not found: {sql_file}; skipping")
        return False

    mysql = tools.get("mysql")
    if mysql is None or mysql.path is None:
        await reporter.message(
            "warning", "Database client not installed; skipping the seed step"
        )
        return False

    seed = config.seed
    password = await anyio.to_thread.run_sync(
        password_prompt, f"Password for {seed.user}@{seed.host}"
    )

    await reporter.message("info", f"Loading {sql_file}")
    try:
        await anyio.to_thread.run_sync(
            partial(run_seed, sql_file, seed, mysql=mysql.path, password=password)
        )
    except SeedError as e:
        logger.warning("seed_failed", sql_file=str(sql_file), error=str(e))
        await reporter.message("error", str(e))
        if e.stderr:
            await reporter.message("error", e.stderr.strip())
        return False

    logger.info("seed_loaded", sql_file=str(sql_file))
    await reporter.message("success", f"Loaded {sql_file}")
    return True


async def probe_endpoints(
    reporter: Reporter,
    base_url: str,
    paths: Sequence[str],
    *,
    timeout: float,
    logger: "FilteringBoundLogger",
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[EndpointResult]:
    """Query the endpoints and report each payload or error."""
    results = await query_endpoints(base_url, paths, timeout=timeout, transport=transport)

    for result in results:
        if result.ok:
            await reporter.payload(f"GET {result.url}", result.data)
        else:
            logger.warning("endpoint_failed", url=result.url, error=result.error)
            await reporter.message("error", f"GET {result.url} failed: {result.error}")

    return results


async def launch_client(
    config: Config,
    reporter: Reporter,
    *,
    logger: "FilteringBoundLogger",
) -> int | None:
    """Run the interactive client in the foreground.

    Returns:
        The client's exit code, or None if it could not be started.
    """
    spec = create_client_launch(config)

    try:
        command, method = spec.resolve("client")
    except ServiceLaunchError as e:
        await reporter.message("warning", f"{e}; skipping the client")
        return None

    await reporter.message("info", f"Starting client ({method.value}): {' '.join(command)}")
    try:
        exit_code = await run_client(command, cwd=spec.cwd, env=spec.env)
    except ServiceLaunchError as e:
        logger.warning("client_failed", error=str(e))
        await reporter.message("error", str(e))
        return None

    logger.info("client_exited", exit_code=exit_code)
    level = "success" if exit_code == 0 else "warning"
    await reporter.message(level, f"Client exited with code {exit_code}")
    return exit_code


async def run_demo(  # noqa: PLR0913
    config: Config,
    reporter: Reporter,
    *,
    load_data: bool = False,
    run_client_step: bool = True,
    logger: "FilteringBoundLogger | None" = None,
    password_prompt: PasswordPrompt = prompt_password,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ExitCode:
    """Run the whole demo.

    A service launched here is left running when the run completes. It is
    stopped only if the run is interrupted before that point.

    Args:
        config: Loaded configuration.
        reporter: Operator-facing output.
        load_data: Load the SQL seed before starting the service.
        run_client_step: Launch the interactive client after probing.
        logger: Structured logger. Uses a null logger if None.
        password_prompt: Asks for the database password.
        transport: Optional HTTP transport override for the endpoint probe.

    Returns:
        SUCCESS if the service came up, FAILURE otherwise. The client's
        exit code does not affect the result.
    """
    log = logger if logger is not None else create_null_logger()

    tools = await anyio.to_thread.run_sync(detect_tooling, config.tools.as_dict())
    await report_tooling(reporter, tools)

    if load_data:
        _ = await load_seed(
            config, reporter, tools, password_prompt=password_prompt, logger=log
        )

    async with StartupSupervisor(
        create_supervisor_config(config),
        create_service_launch(config),
        reporter,
        rules=config.diagnosis.build_rules(),
        logger=log,
    ) as supervisor:
        result = await supervisor.ensure_running()
        if not result.success:
            return ExitCode.FAILURE

        if config.endpoints.enabled:
            _ = await probe_endpoints(
                reporter,
                config.service.base_url,
                config.endpoints.paths,
                timeout=config.endpoints.timeout,
                logger=log,
                transport=transport,
            )

        if run_client_step and config.client.enabled:
            _ = await launch_client(config, reporter, logger=log)

        # Ownership passes to the operator; an interrupted run stops it instead
        _ = await supervisor.detach()

    return ExitCode.SUCCESS
