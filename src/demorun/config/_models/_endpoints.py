"""Endpoint probe configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from demorun.config._defaults import DEFAULT_ENDPOINT_PATHS


class EndpointSettings(BaseModel):
    """Endpoint probe configuration section.

    Attributes:
        enabled: Whether the endpoints are queried after startup.
        paths: Paths requested with GET, relative to the service base URL.
        timeout: Per-request timeout in seconds.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    enabled: bool = True
    paths: tuple[str, ...] = DEFAULT_ENDPOINT_PATHS
    timeout: float = Field(default=10.0, gt=0)
