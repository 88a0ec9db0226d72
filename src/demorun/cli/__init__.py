"""The demorun command-line interface."""

from ._app import app, create_app, main
from ._runner import run_demo
from ._shared import ExitCode

__all__ = ["ExitCode", "app", "create_app", "main", "run_demo"]
