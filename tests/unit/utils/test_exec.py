import sys
from pathlib import Path

from demorun.utils._exec import (
    MAX_OUTPUT_BYTES,
    CommandConfig,
    run_command,
    truncate_output,
)


class TestTruncateOutput:
    def test_short_output_unchanged(self) -> None:
        assert truncate_output("hello") == "hello"

    def test_empty(self) -> None:
        assert truncate_output("") == ""

    def test_truncates_with_marker(self) -> None:
        result = truncate_output("x" * 20, max_bytes=10)

        assert result == "x" * 10 + "\n... [output truncated]"

    def test_does_not_split_multibyte_characters(self) -> None:
        result = truncate_output("é" * 10, max_bytes=5)

        assert result.startswith("éé")
        assert "�" not in result


class TestRunCommand:
    def test_captures_output_and_exit_code(self) -> None:
        result = run_command(
            CommandConfig(
                argv=[
                    sys.executable,
                    "-c",
                    "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)",
                ]
            )
        )

        assert result.success
        assert result.exit_code == 3
        assert not result.ok
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"

    def test_pipes_stdin(self) -> None:
        result = run_command(
            CommandConfig(
                argv=[sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"],
                stdin=b"select 1;",
            )
        )

        assert result.ok
        assert result.stdout.strip() == "SELECT 1;"

    def test_passes_environment(self) -> None:
        result = run_command(
            CommandConfig(
                argv=[sys.executable, "-c", "import os; print(os.environ['DEMO_VAR'])"],
                env={"DEMO_VAR": "42"},
            )
        )

        assert result.stdout.strip() == "42"

    def test_uses_cwd(self, tmp_path: Path) -> None:
        result = run_command(
            CommandConfig(
                argv=[sys.executable, "-c", "import os; print(os.getcwd())"],
                cwd=tmp_path,
            )
        )

        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_timeout(self) -> None:
        result = run_command(
            CommandConfig(
                argv=[sys.executable, "-c", "import time; time.sleep(10)"],
                timeout=0.5,
            )
        )

        assert not result.success
        assert result.timed_out
        assert result.error is not None
        assert "timed out" in result.error

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run_command(CommandConfig(argv=[str(tmp_path / "missing")]))

        assert not result.success
        assert result.command_not_found

    def test_empty_argv(self) -> None:
        result = run_command(CommandConfig(argv=[]))

        assert not result.success
        assert result.error == "No command specified"

    def test_large_output_is_truncated(self) -> None:
        result = run_command(
            CommandConfig(
                argv=[sys.executable, "-c", f"print('x' * {MAX_OUTPUT_BYTES * 2})"],
            )
        )

        assert result.stdout.endswith("... [output truncated]")
