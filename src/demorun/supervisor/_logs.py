"""Per-attempt log file helpers."""

from collections import deque
from pathlib import Path


def get_timestamp() -> str:
    """Get current timestamp in ISO 8601 format."""
    import pendulum  # noqa: PLC0415

    return pendulum.now("UTC").to_iso8601_string()


def attempt_log_paths(log_dir: Path, service_name: str, attempt: int) -> tuple[Path, Path]:
    """Return fresh stdout and stderr log paths for a launch attempt.

    Names carry a microsecond timestamp and the attempt number, so no two
    attempts share a file.

    Args:
        log_dir: Directory holding the attempt logs.
        service_name: Name of the service being launched.
        attempt: Attempt number, starting at 1.

    Returns:
        Tuple of (stdout log path, stderr log path).
    """
    import pendulum  # noqa: PLC0415

    stamp = pendulum.now().format("YYYYMMDD-HHmmss-SSSSSS")
    stem = f"{service_name}-{stamp}-attempt{attempt}"
    return log_dir / f"{stem}.out.log", log_dir / f"{stem}.err.log"


def tail_lines(path: Path, max_lines: int) -> list[str]:
    """Return the last lines of a text file.

    Args:
        path: File to read.
        max_lines: Maximum number of lines to return.

    Returns:
        Up to `max_lines` lines without trailing newlines. Missing or
        unreadable files yield an empty list.
    """
    if max_lines <= 0:
        return []
    try:
        with path.open(encoding="utf-8", errors="replace") as f:
            return [line.rstrip("\r\n") for line in deque(f, maxlen=max_lines)]
    except OSError:
        return []
