"""Logging utilities for demorun.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to a file. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, DEMORUN_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("DEMORUN_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def _create_logger(
    log_file_path: str,
    *,
    log_level: int = logging.INFO,
    log_format: LogFormatType = "json",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger writing to the specified file.

    Args:
        log_file_path: Path to the log file (will be opened in append mode).
        log_level: Minimum level that gets written.
        log_format: Output format, either "json" or "text".

    Returns:
        A configured FilteringBoundLogger instance.
    """
    log_path = Path(log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger_factory = structlog.WriteLoggerFactory(file=log_path.open("a"))

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        # Add dict_tracebacks for structured exception logging in JSON
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(log_level)

    # wrap_logger doesn't affect global config
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


def create_cli_logger(
    log_file: str | Path,
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    command: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger for CLI commands.

    The log level can be overridden by environment variables:
    - DEMORUN_DEBUG: If set, enables DEBUG level logging regardless of config

    Args:
        log_file: Path to the log file.
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        command: Name of the CLI command for context (bound to all entries).

    Returns:
        A FilteringBoundLogger instance configured for CLI logging.
    """
    logger = _create_logger(
        str(log_file),
        log_level=_log_level_from_string(level, respect_env=True),
        log_format=log_format,
    )

    if command:
        return logger.bind(command=command)
    return logger


def create_null_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger that discards every event.

    Used by components that were not handed a logger.
    """
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[],
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
            context_class=dict,
        ),
    )
