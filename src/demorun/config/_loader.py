# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Reading, layering and environment parsing of configuration data."""

import contextlib
import copy
import json
import os
import tomllib
from pathlib import Path
from typing import Any

from demorun.exceptions import ConfigLoadError

ENV_PREFIX = "DEMORUN_"

_BOOLEANS = {"true": True, "false": False}


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse a TOML config file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file {path}: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            # Location attributes only exist on Python 3.14+
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Return `base` with `override` layered on top; inputs are left untouched.

    Tables merge key by key. Any other value, arrays included, replaces
    what was there.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_env_vars(
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect `<prefix><SECTION>__<KEY>` environment variables.

    `DEMORUN_SERVICE__PORT=9090` becomes `{"service": {"port": 9090}}`.
    Keys are lowercased and values are typed with `parse_string_value`.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for name, raw in os.environ.items():
        key = name.removeprefix(prefix)
        if key == name or not key:
            continue
        set_nested_key(result, key.replace("__", ".").lower(), parse_string_value(raw))

    return result


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Type an environment value.

    `true`/`false` (any case) become booleans, digits become an int, a
    dotted number becomes a float and a JSON array or object is decoded.
    Everything else stays a string.

    Examples:
        >>> parse_string_value("8080")
        8080
        >>> parse_string_value('["mvn", "spring-boot:run"]')
        ['mvn', 'spring-boot:run']
    """
    if value.lower() in _BOOLEANS:
        return _BOOLEANS[value.lower()]

    number = float if "." in value else int
    with contextlib.suppress(ValueError):
        return number(value)

    if value[:1] in ("[", "{") and value[-1:] in ("]", "}"):
        with contextlib.suppress(json.JSONDecodeError):
            return json.loads(value)

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Assign `value` at a dotted path, replacing non-table parents.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "service.port", 9090)
        >>> d
        {'service': {'port': 9090}}
    """
    *parents, leaf = key_path.split(".")
    table = d
    for part in parents:
        child = table.get(part)
        if not isinstance(child, dict):
            child = table[part] = {}
        table = child
    table[leaf] = value
