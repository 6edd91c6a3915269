# taskmill:header:start
#
#   project      : TaskMill
#   file         : describe.py
#   file_relpath : src/taskmill/cli/commands/describe.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""TaskMill `describe` command.

Prints the declared attributes, expected returns and effective settings of a
task class.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from taskmill.cli.options import CONTEXT_SETTINGS, OutputFormat, output_format_option
from taskmill.cli.utils import import_target

if TYPE_CHECKING:
    from taskmill.cli.console import ConsoleLike
    from taskmill.task import Task


def _describe_lines(attributes: list[dict[str, Any]], indent: int = 1) -> list[str]:
    lines: list[str] = []
    for attr in attributes:
        flag: str = "required" if attr["required"] is True else "optional"
        if attr["required"] == "conditional":
            flag = "conditional"
        types: str = ", ".join(attr["types"]) or "any"
        lines.append(f"{'  ' * indent}{attr['accessor']} ({flag}; {types})")
        if attr["description"]:
            lines.append(f"{'  ' * (indent + 1)}{attr['description']}")
        lines.extend(_describe_lines(attr["children"], indent + 1))
    return lines


@click.command(
    name="describe",
    help="Show the attributes, returns and settings of a task (TARGET is 'package.module:TaskClass').",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("target")
@output_format_option
def describe_command(*, target: str, output_format: OutputFormat | None) -> None:
    """Describe a task class.

    Args:
        target (str): ``package.module:TaskClass``.
        output_format (OutputFormat | None): ``text`` (default) or ``json``.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    task_type: type[Task] = import_target(target)
    description: dict[str, Any] = task_type.describe()

    if (output_format or OutputFormat.TEXT) is OutputFormat.JSON:
        console.print(json.dumps(description, indent=2))
        return

    console.print(console.styled(description["task"], bold=True))
    console.print("attributes:")
    for line in _describe_lines(description["attributes"]) or ["  (none)"]:
        console.print(line)
    console.print(f"returns: {', '.join(description['returns']) or '(none)'}")
    console.print("settings:")
    for key, value in description["settings"].items():
        console.print(f"  {key} = {value!r}")
