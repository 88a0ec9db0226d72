# pyright: reportAny=false, reportExplicitAny=false
"""Configuration validation helpers.

Pydantic errors are flattened into ValidationIssue records so that callers
can report them uniformly and the first one can be raised as a
ConfigValidationError.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from demorun.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Represents a configuration validation issue.

    Attributes:
        key: Dotted path to the configuration key (e.g., "service.port").
        message: Human-readable description of the issue.
        expected: Description of expected value or type, if available.
        actual: The actual value that caused the issue.
    """

    key: str
    message: str
    expected: str | None
    actual: Any


def _pydantic_error_to_issue(error: "ErrorDetails") -> ValidationIssue:
    """Convert a Pydantic error dict to a ValidationIssue."""
    key = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "Validation error"))

    ctx = error.get("ctx")
    expected: str | None = None
    if ctx is not None:
        if "expected" in ctx:
            expected = str(ctx["expected"])
        elif "pattern" in ctx:
            expected = f"pattern: {ctx['pattern']}"
        elif "ge" in ctx:
            expected = f">= {ctx['ge']}"
        elif "gt" in ctx:
            expected = f"> {ctx['gt']}"
        elif "le" in ctx:
            expected = f"<= {ctx['le']}"

    return ValidationIssue(
        key=key,
        message=message,
        expected=expected,
        actual=error.get("input"),
    )


def issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    """Flatten a Pydantic ValidationError into issues."""
    return [_pydantic_error_to_issue(err) for err in error.errors()]


def raise_if_validation_errors(issues: list[ValidationIssue]) -> None:
    """Raise ConfigValidationError for the first issue, if any.

    Args:
        issues: Validation issues to check.

    Raises:
        ConfigValidationError: If the list is not empty.
    """
    if not issues:
        return

    issue = issues[0]
    msg = f"Invalid configuration value for '{issue.key}': {issue.message}"
    raise ConfigValidationError(
        msg,
        key=issue.key,
        value=issue.actual,
        expected=issue.expected or issue.message,
    )
