# taskmill:header:start
#
#   project      : TaskMill
#   file         : utils.py
#   file_relpath : src/taskmill/cli/utils.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Helpers shared by CLI commands: target import, input parsing, settings loading."""

from __future__ import annotations

import importlib
import json
from typing import TYPE_CHECKING, Any

from taskmill.cli.errors import TaskmillConfigError, TaskmillUsageError
from taskmill.config import load_configuration
from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.exceptions import ConfigurationError
from taskmill.task import Task

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from taskmill.config import Settings

logger: TaskmillLogger = get_logger(__name__)


def import_target(target: str) -> type[Task]:
    """Import a task class from ``package.module:ClassName``.

    Args:
        target (str): Module path and (possibly dotted) attribute path.

    Returns:
        type[Task]: The task class.

    Raises:
        TaskmillUsageError: If the target is malformed, cannot be imported, or
            is not a `Task` subclass.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise TaskmillUsageError(f"target must look like 'package.module:TaskClass', got {target!r}")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise TaskmillUsageError(f"cannot import module {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise TaskmillUsageError(f"{module_name!r} has no attribute {attr_path!r}") from None
    if not (isinstance(obj, type) and issubclass(obj, Task)):
        raise TaskmillUsageError(f"{target!r} is not a Task subclass")
    logger.debug("imported task %s", obj.__qualname__)
    return obj


def parse_assignments(values: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` pairs (values stay strings; attribute types convert them).

    Raises:
        TaskmillUsageError: On a pair without ``=`` or with an empty key.
    """
    data: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise TaskmillUsageError(f"expected key=value, got {item!r}")
        data[key.strip()] = value
    return data


def parse_json_input(text: str | None) -> dict[str, Any]:
    """Parse a JSON object given with ``--json-input``.

    Raises:
        TaskmillUsageError: If the text is not a JSON object.
    """
    if not text:
        return {}
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TaskmillUsageError(f"--json-input is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise TaskmillUsageError("--json-input must be a JSON object")
    return data


def load_settings(path: Path | None) -> Settings:
    """Load the explicit or discovered settings file into the process-wide settings.

    Raises:
        TaskmillConfigError: On malformed configuration.
    """
    try:
        return load_configuration(path)
    except ConfigurationError as exc:
        raise TaskmillConfigError(str(exc)) from exc
