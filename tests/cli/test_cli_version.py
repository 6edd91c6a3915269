# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_cli_version.py
#   file_relpath : tests/cli/test_cli_version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Tests for the informational commands: `version`, `describe` and the bare group."""

from __future__ import annotations

import json

import pytest

from taskmill.cli.exit_codes import ExitCode
from taskmill.constants import TASKMILL_VERSION
from tests.cli.conftest import SAMPLE_MODULE, assert_exit, run_cli

pytestmark = [pytest.mark.cli, pytest.mark.usefixtures("isolation")]


def test_version_text() -> None:
    result = run_cli(["version"])
    assert_exit(result, ExitCode.SUCCESS)
    assert result.output.strip() == TASKMILL_VERSION


def test_version_json() -> None:
    result = run_cli(["version", "--output-format", "json"])
    assert_exit(result, ExitCode.SUCCESS)
    assert json.loads(result.stdout) == {"version": TASKMILL_VERSION}


def test_group_without_subcommand_prints_help() -> None:
    result = run_cli([])
    assert_exit(result, ExitCode.SUCCESS)
    assert "Hint:" in result.output
    assert "run" in result.output
    assert "describe" in result.output


def test_unknown_output_format_is_a_click_usage_error() -> None:
    result = run_cli(["version", "--output-format", "yaml"])
    assert result.exit_code == 2
    assert "Must be one of: text, json" in result.output


def test_describe_text_lists_attributes_and_settings() -> None:
    result = run_cli(["describe", f"{SAMPLE_MODULE}:Greet"])
    assert_exit(result, ExitCode.SUCCESS)
    lines = result.output.splitlines()
    assert lines[0] == "Greet"
    assert "  name (required; string)" in lines
    assert "    Who to greet" in lines
    assert "  times (optional; integer)" in lines
    assert "returns: greeting" in lines
    assert "  task_breakpoints = ['failed']" in lines


def test_describe_json() -> None:
    result = run_cli(["describe", f"{SAMPLE_MODULE}:Greet", "--output-format", "json"])
    assert_exit(result, ExitCode.SUCCESS)
    description = json.loads(result.stdout)
    assert description["task"] == "Greet"
    assert [attr["accessor"] for attr in description["attributes"]] == ["name", "times"]
    assert description["attributes"][1]["default"] == "1"
    assert description["settings"]["nonhalting_state"] == "interrupted"


def test_describe_rejects_non_task_target() -> None:
    result = run_cli(["describe", f"{SAMPLE_MODULE}:NOT_A_TASK"])
    assert_exit(result, ExitCode.USAGE_ERROR)
