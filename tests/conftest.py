"""Shared test fixtures for demorun tests."""

import socket
from collections.abc import Iterator
from pathlib import Path
from typing import cast

import pytest
from rich.console import Console

from demorun.supervisor import Diagnosis, ReportLevel


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def free_port() -> int:
    """Return a TCP port on localhost that nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(("127.0.0.1", 0))
        return cast("tuple[str, int]", sock.getsockname())[1]


@pytest.fixture
def listening_port() -> Iterator[int]:
    """Yield a TCP port on localhost with an open listener."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen()
        yield cast("tuple[str, int]", sock.getsockname())[1]


class RecordingReporter:
    """Reporter that records every call for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[ReportLevel, str]] = []
        self.tails: list[tuple[str, Path, list[str]]] = []
        self.diagnoses: list[Diagnosis] = []
        self.payloads: list[tuple[str, object]] = []

    async def message(self, level: ReportLevel, text: str) -> None:
        self.messages.append((level, text))

    async def log_tail(self, label: str, path: Path, lines: list[str]) -> None:
        self.tails.append((label, path, list(lines)))

    async def diagnosis(self, diagnosis: Diagnosis) -> None:
        self.diagnoses.append(diagnosis)

    async def payload(self, title: str, data: object) -> None:
        self.payloads.append((title, data))

    def texts(self, level: ReportLevel) -> list[str]:
        return [text for lvl, text in self.messages if lvl == level]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
