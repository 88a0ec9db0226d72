"""Supervisor package for bringing a dependent service up.

This package detects whether a network service is reachable and, if it is
not, launches it with a bounded number of attempts, captures each
attempt's output and diagnoses failures from the captured logs.

Key Components:
    - SupervisorConfig: Explicit supervisor settings
    - LaunchSpec: Prebuilt-artifact and fallback launch paths
    - AttemptRecord / AttemptOutcome: Per-attempt bookkeeping
    - StartupResult: Outcome of ensure_running()
    - DiagnosisRule / Diagnosis: Pluggable log diagnosis
    - Reporter: Protocol for operator-facing output
    - ConsoleReporter: Rich console implementation
    - ServiceProcess: Single spawned process with captured output
    - StartupSupervisor: Retry loop and lifecycle owner

Example:
    >>> from demorun.supervisor import LaunchSpec, StartupSupervisor, SupervisorConfig
    >>> config = SupervisorConfig(name="api", port=8080, log_dir=Path("logs"))
    >>> launch = LaunchSpec(fallback_command=("mvn", "spring-boot:run"))
    >>> async with StartupSupervisor(config, launch) as supervisor:
    ...     result = await supervisor.ensure_running()
"""

from ._diagnosis import (
    AUTHENTICATION,
    CONNECTIVITY,
    DEFAULT_RULES,
    NO_MATCH_MESSAGE,
    PORT_CONFLICT,
    UNCAUGHT_EXCEPTION,
    Diagnosis,
    DiagnosisRule,
    diagnose,
    diagnose_files,
)
from ._logs import attempt_log_paths, tail_lines
from ._models import (
    AttemptOutcome,
    AttemptRecord,
    LaunchMethod,
    LaunchSpec,
    StartupResult,
    SupervisorConfig,
    expand_command,
)
from ._output import ConsoleReporter
from ._probe import is_port_open, wait_for_port
from ._protocol import Reporter, ReportLevel
from ._service import ServiceProcess
from ._supervisor import StartupSupervisor

__all__ = [
    "AUTHENTICATION",
    "CONNECTIVITY",
    "DEFAULT_RULES",
    "NO_MATCH_MESSAGE",
    "PORT_CONFLICT",
    "UNCAUGHT_EXCEPTION",
    "AttemptOutcome",
    "AttemptRecord",
    "ConsoleReporter",
    "Diagnosis",
    "DiagnosisRule",
    "LaunchMethod",
    "LaunchSpec",
    "ReportLevel",
    "Reporter",
    "ServiceProcess",
    "StartupResult",
    "StartupSupervisor",
    "SupervisorConfig",
    "attempt_log_paths",
    "diagnose",
    "diagnose_files",
    "expand_command",
    "is_port_open",
    "tail_lines",
    "wait_for_port",
]
