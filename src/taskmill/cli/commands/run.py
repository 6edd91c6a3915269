# taskmill:header:start
#
#   project      : TaskMill
#   file         : run.py
#   file_relpath : src/taskmill/cli/commands/run.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""TaskMill `run` command.

Imports a task class, executes it with the given input and prints the
outcome record. The exit code reflects the result status (see `ExitCode`).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from taskmill.cli.errors import TaskmillUsageError
from taskmill.cli.exit_codes import ExitCode
from taskmill.cli.options import (
    CONTEXT_SETTINGS,
    OutputFormat,
    config_file_option,
    output_format_option,
)
from taskmill.cli.utils import import_target, load_settings, parse_assignments, parse_json_input
from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.exceptions import DeclarationError
from taskmill.faults import Fault

if TYPE_CHECKING:
    from pathlib import Path

    from taskmill.cli.console import ConsoleLike
    from taskmill.result import Result
    from taskmill.task import Task

logger: TaskmillLogger = get_logger(__name__)


@click.command(
    name="run",
    help="Execute a task (TARGET is 'package.module:TaskClass') and print its result.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("target")
@click.option(
    "-s",
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Context value (repeatable). Values are strings; attribute types convert them.",
)
@click.option(
    "--json-input",
    "json_input",
    default=None,
    metavar="JSON",
    help="Context values as a JSON object (merged before --set values).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Raise on breakpoint statuses and uncontrolled errors instead of returning.",
)
@output_format_option
@config_file_option
def run_command(
    *,
    target: str,
    assignments: tuple[str, ...],
    json_input: str | None,
    strict: bool,
    output_format: OutputFormat | None,
    config_path: Path | None,
) -> None:
    """Execute a task and print its result.

    Args:
        target (str): ``package.module:TaskClass``.
        assignments (tuple[str, ...]): ``key=value`` context values.
        json_input (str | None): Context values as a JSON object.
        strict (bool): Use the strict invocation mode.
        output_format (OutputFormat | None): ``text`` (default) or ``json``.
        config_path (Path | None): Explicit settings file.

    Raises:
        TaskmillUsageError: On a bad target, bad input, or a declaration error.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    fmt: OutputFormat = output_format or OutputFormat.TEXT

    load_settings(config_path)
    task_type: type[Task] = import_target(target)
    data: dict[str, Any] = {**parse_json_input(json_input), **parse_assignments(assignments)}

    try:
        result: Result = task_type.execute_strict(data) if strict else task_type.execute(data)
    except Fault as fault:
        result = fault.result
    except DeclarationError as exc:
        raise TaskmillUsageError(f"{task_type.__qualname__}: {exc}") from exc
    except Exception as exc:  # uncontrolled error escaping a strict run
        console.error(f"{task_type.__qualname__}: [{type(exc).__name__}] {exc}")
        ctx.exit(ExitCode.SOFTWARE_ERROR)

    if fmt is OutputFormat.JSON:
        console.print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        console.print(result.render(color=ctx.obj.get("color_enabled", False)))
        errors: Any = result.metadata.get("errors")
        if isinstance(errors, dict):
            for key, messages in errors.get("messages", {}).items():
                for message in messages:
                    console.print(f"  {key}: {message}")

    ctx.exit(ExitCode.for_status(result.status))
