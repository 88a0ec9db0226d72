"""Supervisor configuration helpers for the demo runner.

This module provides factory functions that translate the loaded
configuration into the explicit structures the supervisor and the client
launcher work with.
"""

from demorun.config import Config
from demorun.supervisor import LaunchSpec, SupervisorConfig


def command_substitutions(config: Config) -> dict[str, str]:
    """Return the placeholder values available to launch commands."""
    return {**config.tools.as_dict(), "base_url": config.service.base_url}


def create_supervisor_config(config: Config) -> SupervisorConfig:
    """Create the supervisor settings for the API service.

    Args:
        config: Loaded configuration.

    Returns:
        SupervisorConfig for the service.
    """
    service = config.service
    return SupervisorConfig(
        name=service.name,
        port=service.port,
        log_dir=config.service_log_dir,
        host=service.host,
        max_attempts=service.max_attempts,
        readiness_timeout=service.readiness_timeout,
        poll_interval=service.poll_interval,
        connect_timeout=service.connect_timeout,
        retry_delay=service.retry_delay,
        tail_lines=service.tail_lines,
        shutdown_timeout=service.shutdown_timeout,
    )


def create_service_launch(config: Config) -> LaunchSpec:
    """Create the launch specification for the API service."""
    service = config.service
    return LaunchSpec(
        fallback_command=service.fallback_command,
        artifact=service.artifact,
        artifact_command=service.artifact_command,
        cwd=config.service_workdir,
        env=dict(service.env),
        substitutions=command_substitutions(config),
    )


def create_client_launch(config: Config) -> LaunchSpec:
    """Create the launch specification for the interactive client."""
    client = config.client
    return LaunchSpec(
        fallback_command=client.fallback_command,
        artifact=client.artifact,
        artifact_command=client.artifact_command,
        cwd=config.client_workdir,
        env=dict(client.env),
        substitutions=command_substitutions(config),
    )
