"""Configuration models.

This module provides Pydantic models for demorun configuration sections
and the main Config container class.
"""

from demorun.config._models._common import LogFormat, LogLevel
from demorun.config._models._config import CONFIG_FILE_NAME, LOG_FILE_NAME, Config
from demorun.config._models._diagnosis import DiagnosisRuleSettings, DiagnosisSettings
from demorun.config._models._endpoints import EndpointSettings
from demorun.config._models._logging import LoggingConfig
from demorun.config._models._seed import SeedSettings
from demorun.config._models._service import ClientSettings, ServiceSettings
from demorun.config._models._tools import ToolSettings

__all__ = [
    "CONFIG_FILE_NAME",
    "LOG_FILE_NAME",
    "ClientSettings",
    "Config",
    "DiagnosisRuleSettings",
    "DiagnosisSettings",
    "EndpointSettings",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "SeedSettings",
    "ServiceSettings",
    "ToolSettings",
]
