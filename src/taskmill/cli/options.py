# taskmill:header:start
#
#   project      : TaskMill
#   file         : options.py
#   file_relpath : src/taskmill/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Common CLI options and parameter types.

This module centralizes reusable options (color, output format, config file)
and their resolution logic, so commands and groups can stay thin.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Generic, NoReturn, ParamSpec, TypeVar

import click

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec("P")
R = TypeVar("R")
E = TypeVar("E", bound=Enum)

#: Click context settings shared by the group and its commands.
CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class ColorMode(str, Enum):
    """User intent for colorized terminal output.

    Attributes:
        AUTO: Enable color only when stdout is a TTY.
        ALWAYS: Force-enable color.
        NEVER: Disable color entirely.
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class OutputFormat(str, Enum):
    """Output format for command results.

    Attributes:
        TEXT: Human-friendly text; may include ANSI color.
        JSON: A single JSON document (never colored).
    """

    TEXT = "text"
    JSON = "json"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    output_format: OutputFormat | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
        1. Machine formats (JSON) are never colored.
        2. ``--color=always`` / ``--color=never``.
        3. ``FORCE_COLOR`` (set and not ``"0"``) enables, ``NO_COLOR`` disables.
        4. Otherwise, color is enabled when stdout is a TTY.

    Args:
        cli_mode (ColorMode | None): Parsed ``--color`` value; None when absent.
        output_format (OutputFormat | None): Requested output format.
        stdout_isatty (bool | None): Override for TTY detection.

    Returns:
        bool: True if ANSI color should be enabled.
    """
    if output_format is OutputFormat.JSON:
        return False
    if cli_mode is ColorMode.ALWAYS:
        return True
    if cli_mode is ColorMode.NEVER:
        return False

    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False

    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, OSError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


class EnumChoiceParam(click.ParamType, Generic[E]):
    """A Click parameter type converting a string to a member of an Enum."""

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls: type[E] = enum_cls
        self.name: str = enum_cls.__name__.lower()
        self.choices: list[str] = [str(member.value) for member in enum_cls]

    def _fail_noreturn(self, message: str, param: click.Parameter | None, ctx: click.Context | None) -> NoReturn:
        raise click.BadParameter(message, param=param, ctx=ctx)

    def convert(self, value: object, param: click.Parameter | None, ctx: click.Context | None) -> E:
        """Convert a string (case-insensitive) to a member of the Enum."""
        if isinstance(value, self.enum_cls):
            return value
        lookup: dict[str, E] = {str(member.value).lower(): member for member in self.enum_cls}
        key: str = str(value).lower()
        if key in lookup:
            return lookup[key]
        self._fail_noreturn(f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}", param, ctx)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` and ``--no-color`` options to a command.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with color options added.
    """
    f = click.option(
        "--color",
        "color_mode",
        type=EnumChoiceParam(ColorMode),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def output_format_option(f: Callable[P, R]) -> Callable[P, R]:
    """Add the ``--output-format`` option to a command."""
    return click.option(
        "--output-format",
        "output_format",
        type=EnumChoiceParam(OutputFormat),
        default=None,
        help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
    )(f)


def config_file_option(f: Callable[P, R]) -> Callable[P, R]:
    """Add the ``--config`` option (an explicit TOML settings file) to a command."""
    return click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Settings file (taskmill.toml or pyproject.toml). Discovered when omitted.",
    )(f)
