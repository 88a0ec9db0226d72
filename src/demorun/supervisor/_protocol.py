"""Protocol definitions for the supervisor system.

This module defines the interface that decouples the supervisor core from
console or UI implementations:
- Reporter: Protocol for consuming progress messages, log tails,
  diagnoses and payloads
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Literal, Protocol, runtime_checkable

from ._diagnosis import Diagnosis

ReportLevel = Literal["info", "success", "warning", "error"]


@runtime_checkable
class Reporter(Protocol):
    """Protocol for consuming operator-facing output.

    The protocol is async so implementations can write to files or update
    UIs without blocking the supervisor's control loop.
    """

    async def message(self, level: ReportLevel, text: str) -> None:
        """Write a progress message.

        Args:
            level: Severity of the message.
            text: The message text.
        """
        ...

    async def log_tail(self, label: str, path: Path, lines: Sequence[str]) -> None:
        """Write the tail of a captured log file.

        Args:
            label: Short name of the stream ("stdout" or "stderr").
            path: The log file the lines came from.
            lines: The last lines of the file.
        """
        ...

    async def diagnosis(self, diagnosis: Diagnosis) -> None:
        """Write a failure diagnosis.

        Args:
            diagnosis: The diagnosis to display.
        """
        ...

    async def payload(self, title: str, data: object) -> None:
        """Write a structured payload, such as a JSON response body.

        Args:
            title: Heading for the payload.
            data: JSON-compatible data.
        """
        ...
