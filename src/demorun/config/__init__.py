"""demorun configuration.

This module provides the public API for demorun configuration management,
including loading, validation, and typed access to configuration values.

Example:
    >>> from demorun.config import Config
    >>> config = Config.load()
    >>> config.service.port
    8080
"""

from demorun.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG, DEFAULT_ENDPOINT_PATHS
from ._load import safe_load_config
from ._loader import (
    ENV_PREFIX,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    CONFIG_FILE_NAME,
    LOG_FILE_NAME,
    ClientSettings,
    Config,
    DiagnosisRuleSettings,
    DiagnosisSettings,
    EndpointSettings,
    LogFormat,
    LoggingConfig,
    LogLevel,
    SeedSettings,
    ServiceSettings,
    ToolSettings,
)
from ._validation import ValidationIssue, issues_from_error, raise_if_validation_errors

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG",
    "DEFAULT_ENDPOINT_PATHS",
    "ENV_PREFIX",
    "LOG_FILE_NAME",
    "ClientSettings",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DiagnosisRuleSettings",
    "DiagnosisSettings",
    "EndpointSettings",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "SeedSettings",
    "ServiceSettings",
    "ToolSettings",
    "ValidationIssue",
    "deep_merge",
    "issues_from_error",
    "parse_env_vars",
    "parse_string_value",
    "raise_if_validation_errors",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]
