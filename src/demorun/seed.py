"""Optional SQL seed loading through the database client."""

from pathlib import Path

from demorun.config import SeedSettings
from demorun.exceptions import SeedError
from demorun.utils._exec import CommandConfig, run_command

PASSWORD_ENV_VAR = "MYSQL_PWD"


def build_seed_command(mysql: str, settings: SeedSettings) -> list[str]:
    """Build the database client command line.

    The password is deliberately absent; it is passed through the
    environment.

    Args:
        mysql: Database client executable.
        settings: Seed connection settings.

    Returns:
        The argv list.
    """
    argv = [
        mysql,
        "--host",
        settings.host,
        "--port",
        str(settings.port),
        "--user",
        settings.user,
    ]
    if settings.database:
        argv.append(settings.database)
    return argv


def run_seed(
    sql_file: Path,
    settings: SeedSettings,
    *,
    mysql: str = "mysql",
    password: str = "",
) -> None:
    """Pipe the SQL file into the database client.

    Args:
        sql_file: SQL file to load.
        settings: Seed connection settings.
        mysql: Database client executable.
        password: Database password, exported as MYSQL_PWD.

    Raises:
        SeedError: If the file cannot be read, the client cannot be run,
            times out, or exits with a non-zero code.
    """
    try:
        sql = sql_file.read_bytes()
    except OSError as e:
        msg = f"Cannot read seed file {sql_file}: {e}"
        raise SeedError(msg) from e

    env = {PASSWORD_ENV_VAR: password} if password else {}
    result = run_command(
        CommandConfig(
            argv=build_seed_command(mysql, settings),
            env=env,
            stdin=sql,
            timeout=settings.timeout,
        )
    )

    if not result.success:
        msg = f"Seed load failed: {result.error}"
        raise SeedError(msg)

    if result.exit_code != 0:
        msg = f"Seed load failed: {mysql} exited with code {result.exit_code}"
        raise SeedError(msg, stderr=result.stderr)
