# taskmill:header:start
#
#   project      : TaskMill
#   file         : version.py
#   file_relpath : src/taskmill/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""TaskMill `version` command.

Prints the current TaskMill version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from taskmill.cli.options import CONTEXT_SETTINGS, OutputFormat, output_format_option
from taskmill.constants import TASKMILL_VERSION

if TYPE_CHECKING:
    from taskmill.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of TaskMill.",
    context_settings=CONTEXT_SETTINGS,
)
@output_format_option
def version_command(*, output_format: OutputFormat | None = None) -> None:
    """Show the current version of TaskMill.

    Args:
        output_format (OutputFormat | None): ``text`` (default) or ``json``.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    if output_format is OutputFormat.JSON:
        console.print(json.dumps({"version": TASKMILL_VERSION}))
    else:
        console.print(console.styled(TASKMILL_VERSION, bold=True))
