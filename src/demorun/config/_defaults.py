"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

DEFAULT_CONFIG is a plain dict so it can be fed straight into deep_merge,
which never mutates its inputs.
"""

from typing import Any

DEFAULT_ENDPOINT_PATHS: tuple[str, ...] = (
    "/cities/airports",
    "/passengers/aircraft",
    "/aircraft/airports",
    "/passengers/airports",
)

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "service": {
        "name": "api",
        "host": "127.0.0.1",
        "port": 8080,
        "workdir": "api",
        "artifact": "target/*.jar",
        "artifact_command": ["{java}", "-jar", "{artifact}"],
        "fallback_command": ["{maven}", "spring-boot:run"],
        "env": {},
        "max_attempts": 3,
        "readiness_timeout": 60.0,
        "poll_interval": 1.0,
        "connect_timeout": 1.0,
        "retry_delay": 3.0,
        "log_dir": "logs",
        "tail_lines": 50,
        "shutdown_timeout": 10.0,
    },
    "endpoints": {
        "enabled": True,
        "paths": list(DEFAULT_ENDPOINT_PATHS),
        "timeout": 10.0,
    },
    "client": {
        "enabled": True,
        "workdir": "cli",
        "artifact": "target/*.jar",
        "artifact_command": ["{java}", "-jar", "{artifact}", "{base_url}"],
        "fallback_command": ["{maven}", "-q", "exec:java", "-Dexec.args={base_url}"],
        "env": {},
    },
    "seed": {
        "sql_file": "data/seed.sql",
        "host": "127.0.0.1",
        "port": 3306,
        "user": "root",
        "database": None,
        "timeout": 120.0,
    },
    "tools": {
        "java": "java",
        "maven": "mvn",
        "mysql": "mysql",
    },
    "diagnosis": {
        "include_defaults": True,
        "rules": [],
    },
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
}
