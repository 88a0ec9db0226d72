# pyright: reportAny=false
"""Unit tests for demorun exceptions.

These tests verify that exception constructors correctly store context
attributes. We don't test Python built-in behaviors (inheritance, str()).
"""

from pathlib import Path

from demorun.exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    SeedError,
    ServiceLaunchError,
)


class TestConfigLoadError:
    def test_stores_path_context(self) -> None:
        error = ConfigLoadError("Invalid syntax", path=Path("/demo/demorun.toml"))

        assert error.path == Path("/demo/demorun.toml")

    def test_stores_line_and_column_context(self) -> None:
        error = ConfigLoadError(
            "Parse error",
            path=Path("/demo/demorun.toml"),
            line=15,
            column=8,
        )

        assert error.line == 15
        assert error.column == 8

    def test_context_fields_default_to_none(self) -> None:
        error = ConfigLoadError("Simple error")

        assert error.path is None
        assert error.line is None
        assert error.column is None


class TestConfigValidationError:
    def test_stores_validation_context(self) -> None:
        error = ConfigValidationError(
            "Invalid port",
            key="service.port",
            value=0,
            expected=">= 1",
        )

        assert error.key == "service.port"
        assert error.value == 0
        assert error.expected == ">= 1"


class TestServiceLaunchError:
    def test_stores_service_and_cause(self) -> None:
        cause = FileNotFoundError("java")
        error = ServiceLaunchError("Failed to start", service_name="api", cause=cause)

        assert error.service_name == "api"
        assert error.cause is cause

    def test_cause_defaults_to_none(self) -> None:
        error = ServiceLaunchError("No launch path", service_name="api")

        assert error.cause is None


class TestSeedError:
    def test_stores_stderr(self) -> None:
        error = SeedError("Seed load failed", stderr="ERROR 1045 (28000)")

        assert error.stderr == "ERROR 1045 (28000)"

    def test_stderr_defaults_to_empty(self) -> None:
        assert SeedError("Seed load failed").stderr == ""
