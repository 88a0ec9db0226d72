# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing demorun configuration values.
"""

import copy
from pathlib import Path
from typing import Any, ClassVar, Self, TypeVar, overload

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from demorun.config._defaults import DEFAULT_CONFIG
from demorun.config._loader import deep_merge, parse_env_vars, read_toml_file
from demorun.config._models._diagnosis import DiagnosisSettings
from demorun.config._models._endpoints import EndpointSettings
from demorun.config._models._logging import LoggingConfig
from demorun.config._models._seed import SeedSettings
from demorun.config._models._service import ClientSettings, ServiceSettings
from demorun.config._models._tools import ToolSettings
from demorun.config._validation import issues_from_error, raise_if_validation_errors

T = TypeVar("T")

CONFIG_FILE_NAME = "demorun.toml"
LOG_FILE_NAME = "demorun.log"


class Config(BaseModel):
    """Configuration container with typed access.

    Sections are exposed as attributes. Relative paths in the configuration
    are resolved against `root`, which defaults to the current directory.
    Use the factory methods rather than the constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    service: ServiceSettings = ServiceSettings()
    endpoints: EndpointSettings = EndpointSettings()
    client: ClientSettings = ClientSettings()
    seed: SeedSettings = SeedSettings()
    tools: ToolSettings = ToolSettings()
    diagnosis: DiagnosisSettings = DiagnosisSettings()
    logging: LoggingConfig = LoggingConfig()

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _root: Path = PrivateAttr(default_factory=Path.cwd)
    _sources: tuple[Path, ...] = PrivateAttr(default=())

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        root: Path | None = None,
        sources: tuple[Path, ...] = (),
    ) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Args:
            data: Dictionary of configuration values.
            root: Directory relative paths are resolved against.
            sources: Files that contributed to the data.

        Returns:
            Configuration object from the dictionary.

        Raises:
            ConfigValidationError: If a value is invalid.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)

        try:
            config = cls.model_validate(merged)
        except ValidationError as e:
            raise_if_validation_errors(issues_from_error(e))
            raise

        config._data = merged
        config._root = root if root is not None else Path.cwd()
        config._sources = sources
        return config

    @classmethod
    def from_file(cls, path: Path, *, root: Path | None = None) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.
            root: Directory relative paths are resolved against.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        return cls.from_dict(read_toml_file(path), root=root, sources=(path,))

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        root: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Sources are merged in precedence order: defaults, then the config
        file, then DEMORUN_* environment variables, then CLI overrides.

        Args:
            config_path: Explicit config file. If None, `demorun.toml` in
                `root` is used when present.
            root: Directory relative paths are resolved against. Defaults
                to the current directory.
            include_env: Include environment variables as a source.
            cli_overrides: Nested dict of CLI argument overrides.

        Returns:
            Merged configuration object.

        Raises:
            FileNotFoundError: If `config_path` does not exist.
            ConfigLoadError: If the config file cannot be parsed.
            ConfigValidationError: If the merged config fails validation.
        """
        base = root if root is not None else Path.cwd()
        merged: dict[str, Any] = {}
        sources: list[Path] = []

        path = config_path
        if path is None and (base / CONFIG_FILE_NAME).is_file():
            path = base / CONFIG_FILE_NAME

        if path is not None:
            merged = deep_merge(merged, read_toml_file(path))
            sources.append(path)

        if include_env:
            merged = deep_merge(merged, parse_env_vars())

        if cli_overrides:
            merged = deep_merge(merged, cli_overrides)

        return cls.from_dict(merged, root=base, sources=tuple(sources))

    @property
    def root(self) -> Path:
        """Return the directory relative paths are resolved against."""
        return self._root

    @property
    def sources(self) -> tuple[Path, ...]:
        """Return the config files that contributed to this configuration."""
        return self._sources

    def resolve_path(self, value: str | Path, base: Path | None = None) -> Path:
        """Resolve a configured path against `base` (default: root)."""
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return (base if base is not None else self._root) / path

    @property
    def service_workdir(self) -> Path:
        """Return the resolved service working directory."""
        return self.resolve_path(self.service.workdir)

    @property
    def service_log_dir(self) -> Path:
        """Return the resolved attempt log directory."""
        return self.resolve_path(self.service.log_dir, self.service_workdir)

    @property
    def client_workdir(self) -> Path:
        """Return the resolved client working directory."""
        return self.resolve_path(self.client.workdir)

    @property
    def seed_file(self) -> Path:
        """Return the resolved SQL seed file path."""
        return self.resolve_path(self.seed.sql_file)

    @property
    def log_file(self) -> Path:
        """Return the structured log file of demorun itself.

        Defaults to `demorun.log` in the root, outside the attempt log
        directory.
        """
        if self.logging.file:
            return self.resolve_path(self.logging.file)
        return self._root / LOG_FILE_NAME

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> config.get("service.port")
            8080
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self._data

        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the merged configuration data."""
        return copy.deepcopy(self._data)
