import subprocess

from pytest_mock import MockerFixture

from demorun.utils._detect import ToolStatus, detect_tooling, find_tool


def _completed(
    mocker: MockerFixture, *, returncode: int = 0, stdout: str = "", stderr: str = ""
) -> object:
    result = mocker.MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


class TestFindTool:
    def test_missing_tool(self, mocker: MockerFixture) -> None:
        mocker.patch("shutil.which", return_value=None)
        mock_run = mocker.patch("subprocess.run")

        status = find_tool("mysql", "mysql")

        assert status == ToolStatus(name="mysql", executable="mysql")
        assert not status.available
        mock_run.assert_not_called()

    def test_reads_first_stdout_line(self, mocker: MockerFixture) -> None:
        mocker.patch("shutil.which", return_value="/usr/bin/mvn")
        mocker.patch(
            "subprocess.run",
            return_value=_completed(mocker, stdout="\nApache Maven 3.9.6\nMaven home: x\n"),
        )

        status = find_tool("maven", "mvn")

        assert status.available
        assert status.path == "/usr/bin/mvn"
        assert status.version == "Apache Maven 3.9.6"

    def test_java_version_from_stderr(self, mocker: MockerFixture) -> None:
        mocker.patch("shutil.which", return_value="/usr/bin/java")
        mock_run = mocker.patch(
            "subprocess.run",
            return_value=_completed(mocker, stderr='openjdk version "21.0.2"\n'),
        )

        status = find_tool("java", "java")

        assert status.version == 'openjdk version "21.0.2"'
        assert mock_run.call_args.args[0] == ["/usr/bin/java", "-version"]

    def test_custom_version_args(self, mocker: MockerFixture) -> None:
        mocker.patch("shutil.which", return_value="/bin/tool")
        mock_run = mocker.patch("subprocess.run", return_value=_completed(mocker))

        _ = find_tool("tool", "tool", version_args=["-V"])

        assert mock_run.call_args.args[0] == ["/bin/tool", "-V"]

    def test_failing_version_command_is_still_available(
        self, mocker: MockerFixture
    ) -> None:
        mocker.patch("shutil.which", return_value="/usr/bin/mysql")
        mocker.patch(
            "subprocess.run", return_value=_completed(mocker, returncode=2, stdout="x")
        )

        status = find_tool("mysql", "mysql")

        assert status.available
        assert status.version is None

    def test_timeout_is_still_available(self, mocker: MockerFixture) -> None:
        mocker.patch("shutil.which", return_value="/usr/bin/mvn")
        mocker.patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="mvn", timeout=5)
        )

        status = find_tool("maven", "mvn")

        assert status.available
        assert status.version is None

    def test_retries_blocking_io_error(self, mocker: MockerFixture) -> None:
        mocker.patch("shutil.which", return_value="/usr/bin/mvn")
        mocker.patch("time.sleep")
        mock_run = mocker.patch(
            "subprocess.run",
            side_effect=[BlockingIOError(), _completed(mocker, stdout="Maven 3\n")],
        )

        status = find_tool("maven", "mvn")

        assert status.version == "Maven 3"
        assert mock_run.call_count == 2

    def test_exhausted_retries_are_tolerated(self, mocker: MockerFixture) -> None:
        mocker.patch("shutil.which", return_value="/usr/bin/mvn")
        mocker.patch("time.sleep")
        mocker.patch("subprocess.run", side_effect=BlockingIOError())

        status = find_tool("maven", "mvn")

        assert status.available
        assert status.version is None


class TestDetectTooling:
    def test_checks_every_tool_in_order(self, mocker: MockerFixture) -> None:
        mocker.patch(
            "shutil.which",
            side_effect=lambda name: None if name == "mysql" else f"/usr/bin/{name}",
        )
        mocker.patch("subprocess.run", return_value=_completed(mocker, stdout="v1\n"))

        result = detect_tooling({"java": "java", "maven": "mvn", "mysql": "mysql"})

        assert list(result) == ["java", "maven", "mysql"]
        assert result["maven"].path == "/usr/bin/mvn"
        assert result["java"].version == "v1"
        assert not result["mysql"].available
