# pyright: reportAny=false
"""Unit tests for config validation."""

import pytest
from pydantic import ValidationError

from demorun.config import (
    ServiceSettings,
    ValidationIssue,
    issues_from_error,
    raise_if_validation_errors,
)
from demorun.exceptions import ConfigValidationError


def _validation_error(**values: object) -> ValidationError:
    try:
        _ = ServiceSettings.model_validate(values)
    except ValidationError as e:
        return e
    pytest.fail("expected a validation error")


class TestIssuesFromError:
    def test_range_constraint(self) -> None:
        issues = issues_from_error(_validation_error(port=70000))

        assert len(issues) == 1
        assert issues[0].key == "port"
        assert issues[0].expected == "<= 65535"
        assert issues[0].actual == 70000

    def test_pattern_constraint(self) -> None:
        issues = issues_from_error(_validation_error(name="no spaces"))

        assert issues[0].key == "name"
        assert issues[0].expected is not None
        assert issues[0].expected.startswith("pattern:")

    def test_collects_every_error(self) -> None:
        issues = issues_from_error(_validation_error(port=0, max_attempts=0))

        assert {issue.key for issue in issues} == {"port", "max_attempts"}


class TestRaiseIfValidationErrors:
    def test_no_issues_is_a_no_op(self) -> None:
        raise_if_validation_errors([])

    def test_raises_for_first_issue(self) -> None:
        issues = [
            ValidationIssue(
                key="service.port", message="too small", expected=">= 1", actual=0
            ),
            ValidationIssue(
                key="service.name", message="bad name", expected=None, actual="x y"
            ),
        ]

        with pytest.raises(ConfigValidationError) as exc_info:
            raise_if_validation_errors(issues)

        assert exc_info.value.key == "service.port"
        assert exc_info.value.value == 0
        assert exc_info.value.expected == ">= 1"
        assert str(exc_info.value) == (
            "Invalid configuration value for 'service.port': too small"
        )

    def test_message_used_when_expected_missing(self) -> None:
        issue = ValidationIssue(
            key="service.name", message="bad name", expected=None, actual="x y"
        )

        with pytest.raises(ConfigValidationError) as exc_info:
            raise_if_validation_errors([issue])

        assert exc_info.value.expected == "bad name"
