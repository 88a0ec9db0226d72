"""Service and client launch configuration models.

This module provides the Pydantic models describing how the API service and
the interactive client are started.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ServiceSettings(BaseModel):
    """API service configuration section.

    Attributes:
        name: Service name used in log file names and messages.
        host: Host the service listens on.
        port: TCP port the service listens on.
        workdir: Working directory of the service, relative to the current
            directory.
        artifact: Glob (relative to workdir) locating the prebuilt artifact.
        artifact_command: Command that runs the artifact.
        fallback_command: Build-and-run command used without an artifact;
            required so every attempt has a launch path.
        env: Additional environment variables for the service.
        max_attempts: Launch attempt budget.
        readiness_timeout: Seconds to wait for the port on each attempt.
        poll_interval: Seconds between readiness probes.
        connect_timeout: Seconds allowed for a single TCP connect probe.
        retry_delay: Seconds to pause between failed attempts.
        log_dir: Attempt log directory, relative to workdir.
        tail_lines: Log lines shown for a failed attempt.
        shutdown_timeout: Seconds to wait for graceful shutdown before kill.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default="api", min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    host: str = Field(default="127.0.0.1", min_length=1)
    port: int = Field(default=8080, ge=1, le=65535)
    workdir: str = "api"
    artifact: str | None = "target/*.jar"
    artifact_command: tuple[str, ...] = ("{java}", "-jar", "{artifact}")
    fallback_command: tuple[str, ...] = Field(
        default=("{maven}", "spring-boot:run"), min_length=1
    )
    env: dict[str, str] = Field(default_factory=dict)
    max_attempts: int = Field(default=3, ge=1)
    readiness_timeout: float = Field(default=60.0, ge=1)
    poll_interval: float = Field(default=1.0, gt=0)
    connect_timeout: float = Field(default=1.0, gt=0)
    retry_delay: float = Field(default=3.0, ge=0)
    log_dir: str = "logs"
    tail_lines: int = Field(default=50, ge=0)
    shutdown_timeout: float = Field(default=10.0, gt=0)

    @property
    def base_url(self) -> str:
        """Return the HTTP base URL of the service."""
        return f"http://{self.host}:{self.port}"


class ClientSettings(BaseModel):
    """Interactive client configuration section.

    Commands may use the `{base_url}` placeholder for the service URL.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    enabled: bool = True
    workdir: str = "cli"
    artifact: str | None = "target/*.jar"
    artifact_command: tuple[str, ...] = ("{java}", "-jar", "{artifact}", "{base_url}")
    fallback_command: tuple[str, ...] = (
        "{maven}",
        "-q",
        "exec:java",
        "-Dexec.args={base_url}",
    )
    env: dict[str, str] = Field(default_factory=dict)
