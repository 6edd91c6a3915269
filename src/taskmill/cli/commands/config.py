# taskmill:header:start
#
#   project      : TaskMill
#   file         : config.py
#   file_relpath : src/taskmill/cli/commands/config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""TaskMill `config` command group.

  * ``taskmill config dump``: show the effective process-wide settings.
  * ``taskmill config defaults``: show the built-in default settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from taskmill.cli.options import CONTEXT_SETTINGS, config_file_option
from taskmill.cli.utils import load_settings
from taskmill.config import DEFAULT_SETTINGS, Settings
from taskmill.config.io import settings_to_toml

if TYPE_CHECKING:
    from pathlib import Path

    from taskmill.cli.console import ConsoleLike


@click.group(
    name="config",
    help="Inspect TaskMill settings.",
    context_settings=CONTEXT_SETTINGS,
)
def config_command() -> None:
    """Group for settings-related subcommands (``dump``, ``defaults``)."""
    # No-op: behavior is provided by subcommands only.


@config_command.command(
    name="dump",
    help="Display the effective settings (defaults plus the settings file) as TOML.",
)
@config_file_option
@click.option(
    "--pyproject",
    is_flag=True,
    help="Render under [tool.taskmill] for inclusion in pyproject.toml.",
)
def config_dump_command(*, config_path: Path | None, pyproject: bool) -> None:
    """Print the effective settings as TOML.

    Args:
        config_path (Path | None): Explicit settings file; discovered when None.
        pyproject (bool): Nest under ``[tool.taskmill]``.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    settings: Settings = load_settings(config_path)
    console.print(settings_to_toml(settings, tool_table=pyproject), nl=False)


@config_command.command(
    name="defaults",
    help="Display the built-in default settings as TOML.",
)
@click.option(
    "--pyproject",
    is_flag=True,
    help="Render under [tool.taskmill] for inclusion in pyproject.toml.",
)
def config_defaults_command(*, pyproject: bool) -> None:
    """Print the built-in default settings as TOML.

    Args:
        pyproject (bool): Nest under ``[tool.taskmill]``.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    console.print(settings_to_toml(DEFAULT_SETTINGS, tool_table=pyproject), nl=False)
