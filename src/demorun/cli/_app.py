"""The command-line interface for demorun."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from functools import partial
from pathlib import Path
from typing import Annotated

import anyio
from cyclopts import App, Parameter
from rich.console import Console

from demorun.config import Config, safe_load_config
from demorun.supervisor import ConsoleReporter, diagnose_files
from demorun.utils._logging import create_cli_logger, create_null_logger

from ._runner import probe_endpoints, run_demo
from ._shared import ExitCode, exit_with_error

_HELP = "Bring up the demo API, probe its endpoints and hand over to the client."


def _load_config(
    config_path: Path | None,
    error_console: Console,
    *,
    verbose: bool = False,
) -> Config:
    overrides: dict[str, object] | None = None
    if verbose:
        overrides = {"logging": {"level": "debug"}}

    loaded, error = safe_load_config(config_path=config_path, cli_overrides=overrides)
    if loaded is None:
        exit_with_error(
            error or "Failed to load configuration",
            ExitCode.CONFIG_ERROR,
            console=error_console,
        )
    return loaded


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="demorun",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.default
    def run(  # pyright: ignore[reportUnusedFunction]
        *,
        load_data: Annotated[
            bool,
            Parameter(name="--load-data", negative=(), help="Load the SQL seed first"),
        ] = False,
        no_client: Annotated[
            bool,
            Parameter(name="--no-client", negative=(), help="Do not start the client"),
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        verbose: Annotated[
            bool,
            Parameter(name="--verbose", negative=(), help="Enable debug logging"),
        ] = False,
    ) -> None:
        """Run the demo.

        Detects the required tools, optionally loads the seed data, makes
        sure the API service is running, queries its endpoints and starts
        the interactive client. A service started here is stopped on exit.

        Args:
            load_data: Load the SQL seed file before starting the service.
            no_client: Skip the interactive client.
            config: Explicit path to config file.
            verbose: Write debug-level entries to the log file.
        """
        loaded = _load_config(config, error_console, verbose=verbose)
        logger = create_cli_logger(
            loaded.log_file,
            level=loaded.logging.level.value,
            log_format=loaded.logging.format.value,
            command="run",
        )

        code = anyio.run(
            partial(
                run_demo,
                loaded,
                ConsoleReporter(console),
                load_data=load_data,
                run_client_step=not no_client,
                logger=logger,
            )
        )
        if code != ExitCode.SUCCESS:
            raise SystemExit(code)

    @app.command(name="diagnose")
    def diagnose(  # pyright: ignore[reportUnusedFunction]
        *logs: Path,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Diagnose existing service log files.

        Args:
            logs: Log files to scan.
            config: Explicit path to config file.
        """
        loaded = _load_config(config, error_console)

        existing = [path for path in logs if path.is_file()]
        for path in logs:
            if not path.is_file():
                error_console.print(f"[yellow]Warning:[/yellow] {path} not found")
        if not existing:
            exit_with_error("No readable log files given", console=error_console)

        reporter = ConsoleReporter(console)
        result = diagnose_files(existing, loaded.diagnosis.build_rules())
        anyio.run(reporter.diagnosis, result)

    @app.command(name="probe")
    def probe(  # pyright: ignore[reportUnusedFunction]
        *,
        base_url: Annotated[
            str | None,
            Parameter(name="--base-url", help="Service base URL (default from config)"),
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Query the endpoints of an already running service.

        Args:
            base_url: Service base URL.
            config: Explicit path to config file.
        """
        loaded = _load_config(config, error_console)

        results = anyio.run(
            partial(
                probe_endpoints,
                ConsoleReporter(console),
                base_url or loaded.service.base_url,
                loaded.endpoints.paths,
                timeout=loaded.endpoints.timeout,
                logger=create_null_logger(),
            )
        )
        if not all(result.ok for result in results):
            raise SystemExit(ExitCode.FAILURE)

    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `demorun` CLI."""
    app = create_app()
    app()


if __name__ == "__main__":
    main()
