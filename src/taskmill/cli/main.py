# taskmill:header:start
#
#   project      : TaskMill
#   file         : main.py
#   file_relpath : src/taskmill/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Click entry point for the ``taskmill`` command.

Group-level options are initialized once and placed into ``ctx.obj``
(``console``, ``color_enabled``, ``log_level``); subcommands read them from
there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from taskmill.cli.commands.config import config_command
from taskmill.cli.commands.describe import describe_command
from taskmill.cli.commands.run import run_command
from taskmill.cli.commands.version import version_command
from taskmill.cli.console import ClickConsole
from taskmill.cli.options import CONTEXT_SETTINGS, ColorMode, common_color_options, resolve_color_mode
from taskmill.config.logging import TaskmillLogger, get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from taskmill.cli.console import ConsoleLike

logger: TaskmillLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (logging and color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    # Internal logging is configured via env only
    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective_mode: ColorMode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color: bool = resolve_color_mode(cli_mode=effective_mode, output_format=None)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    help="TaskMill CLI",
)
@common_color_options
@click.pass_context
def cli(ctx: click.Context, color_mode: ColorMode | None, no_color: bool) -> None:
    """Entry point for the TaskMill CLI."""
    init_common_state(ctx, color_mode=color_mode, no_color=no_color)
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'taskmill run package.module:TaskClass -s key=value' to run a task.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(run_command)

cli.add_command(describe_command)

cli.add_command(config_command)

cli.add_command(version_command)

if __name__ == "__main__":
    cli()
