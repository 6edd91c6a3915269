# taskmill:header:start
#
#   project      : TaskMill
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""CLI test helpers for running TaskMill in a controlled working directory.

`run_cli()` invokes the Click group with `CliRunner`. The `isolation` fixture
moves the working directory to a temporary project that holds an importable
``cli_sample_tasks`` module, so settings discovery never reaches the
repository's own ``pyproject.toml``.
"""

from __future__ import annotations

import sys
from textwrap import dedent
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner, Result

from taskmill.cli.exit_codes import ExitCode
from taskmill.cli.main import cli
from taskmill.config import logging

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

SAMPLE_MODULE = "cli_sample_tasks"

SAMPLE_TASKS: str = dedent(
    '''
    from taskmill import Task, Workflow, optional, required


    class Greet(Task):
        """Greets someone."""

        name = required(type="string", presence=True, description="Who to greet")
        times = optional(type="integer", default=1)
        returns = ("greeting",)

        def work(self):
            if self.name == "nobody":
                self.skip("nobody to greet")
            self.context.greeting = " ".join([f"Hello, {self.name}"] * self.times)


    class Explode(Task):
        def work(self):
            raise RuntimeError("kaboom")


    class Welcome(Workflow):
        tasks = (Greet,)


    NOT_A_TASK = 42
    '''
)


def run_cli(argv: Sequence[str], *, input_text: str | None = None) -> Result:
    """Invoke the CLI and restore test logging afterwards.

    Args:
        argv (Sequence[str]): CLI argument vector, e.g. ``["run", "mod:Task"]``.
        input_text (str | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` of the invocation.
    """
    runner = CliRunner()
    try:
        return runner.invoke(cli, list(argv), input=input_text, catch_exceptions=False)
    finally:
        # the CLI reconfigures the root logger against the runner's streams
        logging.setup_logging(level=logging.TRACE_LEVEL)


def assert_exit(result: Result, code: ExitCode) -> None:
    """Assert the exit code, showing the output on mismatch."""
    assert result.exit_code == code, result.output


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run a CLI test from a temporary project holding the sample task module.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory and sys.path.

    Yields:
        Path: The temporary project directory.
    """
    project: Path = tmp_path / "proj"
    project.mkdir()
    (project / f"{SAMPLE_MODULE}.py").write_text(SAMPLE_TASKS, encoding="utf-8")
    monkeypatch.chdir(project)
    monkeypatch.syspath_prepend(str(project))
    sys.modules.pop(SAMPLE_MODULE, None)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    yield project
    sys.modules.pop(SAMPLE_MODULE, None)
