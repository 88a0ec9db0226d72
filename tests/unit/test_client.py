import sys
from pathlib import Path

import pytest

from demorun.client import run_client
from demorun.exceptions import ServiceLaunchError

pytestmark = pytest.mark.anyio


class TestRunClient:
    async def test_returns_exit_code(self) -> None:
        code = await run_client([sys.executable, "-c", "import sys; sys.exit(3)"])

        assert code == 3

    async def test_passes_env_and_cwd(self, tmp_path: Path) -> None:
        script = (
            "import os, pathlib, sys; "
            "ok = os.environ.get('DEMO_BASE_URL') == 'http://x' "
            f"and pathlib.Path.cwd() == pathlib.Path({str(tmp_path.resolve())!r}); "
            "sys.exit(0 if ok else 4)"
        )

        code = await run_client(
            [sys.executable, "-c", script],
            cwd=tmp_path,
            env={"DEMO_BASE_URL": "http://x"},
        )

        assert code == 0

    async def test_missing_executable(self, tmp_path: Path) -> None:
        with pytest.raises(ServiceLaunchError) as exc_info:
            _ = await run_client([str(tmp_path / "no-client")], name="cli")

        assert exc_info.value.service_name == "cli"
        assert isinstance(exc_info.value.cause, OSError)
