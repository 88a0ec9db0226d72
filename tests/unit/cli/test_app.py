from pathlib import Path

import pytest
from cyclopts import App
from pytest_mock import MockerFixture
from rich.console import Console

from demorun.cli import ExitCode, create_app
from demorun.endpoints import EndpointResult
from demorun.utils._logging import create_null_logger


def _invoke(app: App, args: list[str]) -> int:
    try:
        app(args)
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    return 0


@pytest.fixture
def app(console: Console, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> App:
    monkeypatch.chdir(tmp_path)
    return create_app(console=console, error_console=console)


def _result(path: str, *, ok: bool) -> EndpointResult:
    return EndpointResult(
        path=path,
        url=f"http://127.0.0.1:9999{path}",
        ok=ok,
        status_code=200 if ok else 500,
        data=[] if ok else None,
        error=None if ok else "HTTP 500 Internal Server Error",
    )


class TestDiagnoseCommand:
    def test_reports_matching_rule(
        self, app: App, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log = tmp_path / "api-1.err.log"
        _ = log.write_text(
            "***************************\n"
            "APPLICATION FAILED TO START\n"
            "Web server failed to start. Port 8080 was already in use.\n"
        )

        code = _invoke(app, ["diagnose", str(log)])

        assert code == 0
        output = capsys.readouterr().out
        assert "Diagnosis:" in output
        assert "Port already occupied" in output

    def test_reports_no_match(
        self, app: App, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log = tmp_path / "api-1.out.log"
        _ = log.write_text("Starting Application\n")

        code = _invoke(app, ["diagnose", str(log)])

        assert code == 0
        assert "Diagnosis:" in capsys.readouterr().out

    def test_missing_logs_fail(
        self, app: App, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _invoke(app, ["diagnose", str(tmp_path / "missing.log")])

        assert code == ExitCode.FAILURE
        output = capsys.readouterr().out
        assert "Warning:" in output
        assert "No readable log files given" in output

    def test_missing_config_file(
        self, app: App, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log = tmp_path / "api-1.out.log"
        _ = log.write_text("Starting Application\n")

        code = _invoke(
            app, ["diagnose", str(log), "--config", str(tmp_path / "nope.toml")]
        )

        assert code == ExitCode.CONFIG_ERROR
        assert "Config file not found" in capsys.readouterr().out


class TestProbeCommand:
    def test_all_endpoints_ok(self, app: App, mocker: MockerFixture) -> None:
        probe = mocker.patch(
            "demorun.cli._app.probe_endpoints",
            new=mocker.AsyncMock(return_value=[_result("/cities/airports", ok=True)]),
        )

        code = _invoke(app, ["probe", "--base-url", "http://127.0.0.1:9999"])

        assert code == 0
        assert probe.await_args is not None
        assert probe.await_args.args[1] == "http://127.0.0.1:9999"

    def test_failed_endpoint_exits_non_zero(
        self, app: App, mocker: MockerFixture
    ) -> None:
        _ = mocker.patch(
            "demorun.cli._app.probe_endpoints",
            new=mocker.AsyncMock(
                return_value=[
                    _result("/cities/airports", ok=True),
                    _result("/passengers/aircraft", ok=False),
                ]
            ),
        )

        code = _invoke(app, ["probe"])

        assert code == ExitCode.FAILURE

    def test_uses_configured_base_url(
        self, app: App, tmp_path: Path, mocker: MockerFixture
    ) -> None:
        _ = (tmp_path / "demorun.toml").write_text("[service]\nport = 9191\n")
        probe = mocker.patch(
            "demorun.cli._app.probe_endpoints",
            new=mocker.AsyncMock(return_value=[]),
        )

        code = _invoke(app, ["probe"])

        assert code == 0
        assert probe.await_args is not None
        assert probe.await_args.args[1] == "http://127.0.0.1:9191"


class TestRunCommand:
    @pytest.fixture(autouse=True)
    def null_logger(self, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "demorun.cli._app.create_cli_logger", return_value=create_null_logger()
        )

    def test_passes_flags_to_runner(self, app: App, mocker: MockerFixture) -> None:
        run_demo = mocker.patch(
            "demorun.cli._app.run_demo",
            new=mocker.AsyncMock(return_value=ExitCode.SUCCESS),
        )

        code = _invoke(app, ["--load-data", "--no-client"])

        assert code == 0
        assert run_demo.await_args is not None
        assert run_demo.await_args.kwargs["load_data"] is True
        assert run_demo.await_args.kwargs["run_client_step"] is False

    def test_defaults(self, app: App, mocker: MockerFixture) -> None:
        run_demo = mocker.patch(
            "demorun.cli._app.run_demo",
            new=mocker.AsyncMock(return_value=ExitCode.SUCCESS),
        )

        code = _invoke(app, [])

        assert code == 0
        assert run_demo.await_args is not None
        assert run_demo.await_args.kwargs["load_data"] is False
        assert run_demo.await_args.kwargs["run_client_step"] is True

    def test_failure_sets_exit_code(self, app: App, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "demorun.cli._app.run_demo",
            new=mocker.AsyncMock(return_value=ExitCode.FAILURE),
        )

        code = _invoke(app, [])

        assert code == ExitCode.FAILURE

    def test_invalid_config_exits_with_config_error(
        self,
        app: App,
        tmp_path: Path,
        mocker: MockerFixture,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        run_demo = mocker.patch("demorun.cli._app.run_demo", new=mocker.AsyncMock())
        _ = (tmp_path / "demorun.toml").write_text("[service\nport = 1\n")

        code = _invoke(app, [])

        assert code == ExitCode.CONFIG_ERROR
        assert "Failed to parse TOML file" in capsys.readouterr().out
        run_demo.assert_not_awaited()

    def test_verbose_enables_debug_logging(
        self, app: App, mocker: MockerFixture
    ) -> None:
        run_demo = mocker.patch(
            "demorun.cli._app.run_demo",
            new=mocker.AsyncMock(return_value=ExitCode.SUCCESS),
        )

        _ = _invoke(app, ["--verbose"])

        assert run_demo.await_args is not None
        config = run_demo.await_args.args[0]
        assert config.logging.level.value == "debug"
