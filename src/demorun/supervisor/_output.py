"""Reporter implementations for the supervisor system.

This module provides the console implementation of the Reporter protocol
used for operator-facing output.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import ClassVar, final

from rich.console import Console
from rich.style import Style
from rich.text import Text

from ._diagnosis import Diagnosis
from ._protocol import ReportLevel


@final
class ConsoleReporter:
    """Reporter that writes styled output to a rich console.

    Levels are color coded:
    - info: Cyan marker
    - success: Green marker
    - warning: Yellow marker
    - error: Bold red marker
    """

    __slots__ = ("_console", "_level_styles", "_tail_style")

    _MARKERS: ClassVar[dict[ReportLevel, str]] = {
        "info": "[*]",
        "success": "[+]",
        "warning": "[!]",
        "error": "[x]",
    }

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the reporter.

        Args:
            console: Rich Console instance for output. If None, creates a new one.
        """
        self._console = console or Console()
        self._tail_style = Style(dim=True)
        self._level_styles: dict[ReportLevel, Style] = {
            "info": Style(color="cyan"),
            "success": Style(color="green", bold=True),
            "warning": Style(color="yellow"),
            "error": Style(color="red", bold=True),
        }

    @property
    def console(self) -> Console:
        """Return the underlying console."""
        return self._console

    async def message(self, level: ReportLevel, text: str) -> None:
        """Write a progress message with a level marker.

        Args:
            level: Severity of the message.
            text: The message text.
        """
        style = self._level_styles.get(level, Style())

        line = Text()
        _ = line.append(self._MARKERS[level], style=style)
        _ = line.append(" ")
        _ = line.append(text, style=style if level == "error" else Style())

        self._console.print(line)

    async def log_tail(self, label: str, path: Path, lines: Sequence[str]) -> None:
        """Write the tail of a captured log file under a header.

        Args:
            label: Short name of the stream ("stdout" or "stderr").
            path: The log file the lines came from.
            lines: The last lines of the file.
        """
        header = Text()
        _ = header.append(f"--- {label} ", style=Style(color="blue", bold=True))
        _ = header.append(f"({path}, last {len(lines)} lines)", style=Style(dim=True))
        self._console.print(header)

        if not lines:
            self._console.print(Text("<empty>", style=self._tail_style))
            return

        for raw_line in lines:
            self._console.print(Text(raw_line, style=self._tail_style))

    async def diagnosis(self, diagnosis: Diagnosis) -> None:
        """Write a diagnosis as a bulleted list.

        Args:
            diagnosis: The diagnosis to display.
        """
        style = self._level_styles["warning"] if diagnosis.matched else Style(dim=True)
        self._console.print(Text("Diagnosis:", style=Style(bold=True)))
        for message in diagnosis.messages:
            self._console.print(Text(f"  - {message}", style=style))

    async def payload(self, title: str, data: object) -> None:
        """Write a JSON payload under a title.

        Args:
            title: Heading for the payload.
            data: JSON-compatible data.
        """
        self._console.print(Text(title, style=Style(color="blue", bold=True)))
        self._console.print_json(data=data)
