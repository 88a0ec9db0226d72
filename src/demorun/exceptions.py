"""demorun exceptions."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class DemorunError(Exception):
    """Base exception for demorun errors."""


class ConfigError(DemorunError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected


# =============================================================================
# Service Exceptions
# =============================================================================


class ServiceError(DemorunError):
    """Base exception for supervised service errors.

    Attributes:
        service_name: Name of the service involved.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        service_name: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and service context.

        Args:
            message: Human-readable error message.
            service_name: Name of the service involved.
            cause: The underlying exception, if any.
        """
        super().__init__(message)
        self.service_name: str = service_name
        self.cause: Exception | None = cause


class ServiceLaunchError(ServiceError):
    """Raised when a service process cannot be spawned.

    Covers both a launch spec with no usable launch path and an OS-level
    failure to start the executable.
    """


class ServiceStopError(ServiceError):
    """Raised when a running service cannot be stopped."""


# =============================================================================
# Seed Exceptions
# =============================================================================


class SeedError(DemorunError):
    """Raised when loading the SQL seed file fails.

    Attributes:
        stderr: Captured standard error of the database client, if any.
    """

    def __init__(self, message: str, *, stderr: str = "") -> None:
        """Initialize with error message and client output.

        Args:
            message: Human-readable error message.
            stderr: Captured standard error of the database client.
        """
        super().__init__(message)
        self.stderr: str = stderr
