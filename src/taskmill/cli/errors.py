# taskmill:header:start
#
#   project      : TaskMill
#   file         : errors.py
#   file_relpath : src/taskmill/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Exceptions for the TaskMill CLI.

Raise these from commands to exit with a standardized message and exit code.
When a project console is available in the Click context, messages are
written through it.
"""

from __future__ import annotations

from typing import IO, Any

import click

from taskmill.cli.exit_codes import ExitCode


class TaskmillCliError(click.ClickException):
    """Base class for all TaskMill CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:
        """Return the plain error message text (color is applied in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        console: Any = ctx.obj.get("console") if ctx is not None and isinstance(ctx.obj, dict) else None
        if console is None:
            super().show(file)
            return
        console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))


class TaskmillUsageError(TaskmillCliError):
    """Invalid target, input or flags."""

    exit_code = ExitCode.USAGE_ERROR


class TaskmillConfigError(TaskmillCliError):
    """Missing, invalid or malformed configuration."""

    exit_code = ExitCode.CONFIG_ERROR
