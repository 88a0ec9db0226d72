"""Heuristic failure diagnosis from captured service logs.

Each DiagnosisRule pairs a set of case-sensitive patterns with an advisory
message. Rules are applied independently, so any subset may match. The
diagnosis never attempts remediation and never raises.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Self

NO_MATCH_MESSAGE = "No recognizable error pattern in the captured logs."


@dataclass(frozen=True, slots=True)
class DiagnosisRule:
    """A named log signature and the advice it produces.

    Attributes:
        name: Stable identifier of the rule.
        patterns: Compiled patterns; any match triggers the rule.
        message: Human-readable diagnosis.
    """

    name: str
    patterns: tuple[re.Pattern[str], ...]
    message: str

    @classmethod
    def from_patterns(cls, name: str, patterns: Iterable[str], message: str) -> Self:
        """Build a rule from regular expression strings.

        Raises:
            re.error: If a pattern is not a valid regular expression.
        """
        return cls(
            name=name,
            patterns=tuple(re.compile(pattern) for pattern in patterns),
            message=message,
        )

    def matches(self, text: str) -> bool:
        """Return True if any pattern occurs in the text."""
        return any(pattern.search(text) for pattern in self.patterns)


PORT_CONFLICT = DiagnosisRule.from_patterns(
    "port_conflict",
    (
        r"Port \d+ (?:was already )?in use",
        re.escape("Address already in use"),
        re.escape("Failed to bind to"),
    ),
    "Port already occupied by another process. Stop it or change the service port.",
)

AUTHENTICATION = DiagnosisRule.from_patterns(
    "authentication",
    (
        re.escape("Access denied for user"),
        re.escape("Access denied"),
        re.escape("permission denied"),
    ),
    "Downstream credential/authentication failure. Check the database user and password.",
)

CONNECTIVITY = DiagnosisRule.from_patterns(
    "connectivity",
    (
        re.escape("Communications link failure"),
        re.escape("Could not open connection to the host"),
    ),
    "Downstream service unreachable. Is the database running?",
)

UNCAUGHT_EXCEPTION = DiagnosisRule.from_patterns(
    "uncaught_exception",
    (
        re.escape('Exception in thread "main"'),
        re.escape("Caused by:"),
    ),
    "Uncaught application exception. Inspect the log tail above.",
)

DEFAULT_RULES: tuple[DiagnosisRule, ...] = (
    PORT_CONFLICT,
    AUTHENTICATION,
    CONNECTIVITY,
    UNCAUGHT_EXCEPTION,
)


@dataclass(frozen=True, slots=True)
class Diagnosis:
    """Result of matching log text against diagnosis rules.

    Attributes:
        findings: Rules that matched, in rule order.
    """

    findings: tuple[DiagnosisRule, ...] = ()

    @property
    def matched(self) -> bool:
        """Return True if at least one rule matched."""
        return bool(self.findings)

    @property
    def names(self) -> frozenset[str]:
        """Return the names of the matching rules."""
        return frozenset(rule.name for rule in self.findings)

    @property
    def messages(self) -> tuple[str, ...]:
        """Return the advisory messages, or the no-match message."""
        if not self.findings:
            return (NO_MATCH_MESSAGE,)
        return tuple(rule.message for rule in self.findings)


def diagnose(text: str, rules: Sequence[DiagnosisRule] = DEFAULT_RULES) -> Diagnosis:
    """Match log text against the given rules.

    Args:
        text: Captured log text.
        rules: Rules to apply.

    Returns:
        The Diagnosis listing every matching rule.
    """
    return Diagnosis(findings=tuple(rule for rule in rules if rule.matches(text)))


def diagnose_files(
    paths: Iterable[Path],
    rules: Sequence[DiagnosisRule] = DEFAULT_RULES,
) -> Diagnosis:
    """Diagnose the combined contents of several log files.

    Missing or unreadable files are treated as empty.

    Args:
        paths: Log files to scan.
        rules: Rules to apply.

    Returns:
        The Diagnosis for the concatenated log text.
    """
    chunks: list[str] = []
    for path in paths:
        try:
            chunks.append(path.read_text(encoding="utf-8", errors="replace"))
        except OSError:
            continue
    return diagnose("\n".join(chunks), rules)
