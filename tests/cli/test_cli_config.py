# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_cli_config.py
#   file_relpath : tests/cli/test_cli_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Tests for `taskmill config dump` and `taskmill config defaults`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import tomlkit

from taskmill.cli.exit_codes import ExitCode
from taskmill.config import DEFAULT_SETTINGS
from tests.cli.conftest import assert_exit, run_cli

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = [pytest.mark.cli, pytest.mark.usefixtures("isolation")]


def test_config_defaults_is_valid_toml() -> None:
    result = run_cli(["config", "defaults"])
    assert_exit(result, ExitCode.SUCCESS)
    table = tomlkit.parse(result.stdout).unwrap()["taskmill"]
    assert table == DEFAULT_SETTINGS.to_toml_table()


def test_config_defaults_pyproject_flavor() -> None:
    result = run_cli(["config", "defaults", "--pyproject"])
    assert_exit(result, ExitCode.SUCCESS)
    document = tomlkit.parse(result.stdout).unwrap()
    assert document["tool"]["taskmill"]["task_breakpoints"] == ["failed"]


def test_config_dump_merges_discovered_file(isolation: Path) -> None:
    (isolation / "taskmill.toml").write_text(
        '[taskmill]\nworkflow_breakpoints = ["failed", "skipped"]\nlog_results = false\n',
        encoding="utf-8",
    )
    result = run_cli(["config", "dump"])
    assert_exit(result, ExitCode.SUCCESS)
    table = tomlkit.parse(result.stdout).unwrap()["taskmill"]
    assert sorted(table["workflow_breakpoints"]) == ["failed", "skipped"]
    assert table["log_results"] is False
    assert table["task_breakpoints"] == ["failed"]


def test_config_dump_explicit_file(isolation: Path) -> None:
    config = isolation / "custom.toml"
    config.write_text("backtrace = true\n", encoding="utf-8")
    result = run_cli(["config", "dump", "--config", str(config)])
    assert_exit(result, ExitCode.SUCCESS)
    assert tomlkit.parse(result.stdout).unwrap()["taskmill"]["backtrace"] is True


def test_config_dump_rejects_unknown_settings(isolation: Path) -> None:
    config = isolation / "custom.toml"
    config.write_text("retries = 3\n", encoding="utf-8")
    result = run_cli(["config", "dump", "--config", str(config)])
    assert_exit(result, ExitCode.CONFIG_ERROR)
    assert "unknown setting" in result.output
