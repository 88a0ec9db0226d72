from pathlib import Path
from typing import Any

from demorun.exceptions import ConfigError

from ._models import Config


def safe_load_config(
    *,
    config_path: Path | None = None,
    root: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> tuple[Config | None, str | None]:
    """Load configuration, converting failures into an error message.

    When config_path is provided, the file must exist (explicit user request).

    Args:
        config_path: Explicit path to config file (--config flag).
        root: Directory relative paths are resolved against.
        cli_overrides: CLI argument overrides to pass to Config.load().

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
        On failure, Config is None and the message describes the problem.
    """
    if config_path is not None and not config_path.is_file():
        return None, f"Config file not found: {config_path}"

    try:
        config = Config.load(
            config_path=config_path,
            root=root,
            cli_overrides=cli_overrides,
        )
    except ConfigError as e:
        return None, str(e)
    except OSError as e:
        return None, f"Failed to load config: {e}"
    else:
        return config, None
