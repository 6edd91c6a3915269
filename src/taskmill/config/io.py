# taskmill:header:start
#
#   project      : TaskMill
#   file         : io.py
#   file_relpath : src/taskmill/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Load and render TOML configuration.

Sources:
    * ``taskmill.toml``: settings at the document root, or under a
      ``[taskmill]`` table.
    * ``pyproject.toml``: settings under ``[tool.taskmill]``.

Parsing and rendering use `tomlkit`; parsed documents are unwrapped to plain
`dict` structures before they reach `MutableSettings.from_mapping()`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from taskmill.config.logging import get_logger
from taskmill.config.settings import MutableSettings
from taskmill.constants import (
    DEFAULT_TOML_CONFIG_NAME,
    ENV_CONFIG_PATH,
    PYPROJECT_TOML_NAME,
    TOML_TOOL_TABLE,
)
from taskmill.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from taskmill.config.logging import TaskmillLogger
    from taskmill.config.settings import Settings

TomlTable = dict[str, Any]

logger: TaskmillLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file.

    Args:
        path (Path): Path to a TOML document.

    Returns:
        TomlTable: The parsed content as plain Python values.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        raise ConfigurationError(f"cannot read {path}: {e}") from e
    except TomlkitParseError as e:
        raise ConfigurationError(f"cannot parse {path}: {e}") from e
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def extract_settings_table(path: Path, data: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """Return the TaskMill table of a parsed document, or None when absent."""
    if path.name == PYPROJECT_TOML_NAME:
        tool: Any = data.get("tool")
        table: Any = tool.get(TOML_TOOL_TABLE) if isinstance(tool, dict) else None
        return table if isinstance(table, dict) else None
    nested: Any = data.get(TOML_TOOL_TABLE)
    if isinstance(nested, dict):
        return nested
    return data


def load_settings_file(path: Path) -> MutableSettings:
    """Load settings from a ``taskmill.toml`` or ``pyproject.toml`` file.

    Args:
        path (Path): Configuration file.

    Returns:
        MutableSettings: The explicitly configured values (empty if the file
        holds no TaskMill table).
    """
    data: TomlTable = load_toml_dict(path)
    table: Mapping[str, Any] | None = extract_settings_table(path, data)
    if table is None:
        logger.debug("no [tool.%s] table in %s", TOML_TOOL_TABLE, path)
        return MutableSettings()
    logger.debug("loading settings from %s", path)
    return MutableSettings.from_mapping(table, source=str(path))


def _has_tool_table(path: Path) -> bool:
    try:
        return extract_settings_table(path, load_toml_dict(path)) is not None
    except ConfigurationError as exc:
        logger.warning("ignoring %s: %s", path, exc)
        return False


def discover_config(start: Path | None = None) -> Path | None:
    """Find the configuration file that applies to `start`.

    ``TASKMILL_CONFIG`` wins when set. Otherwise the directories from `start`
    (default: the current directory) up to the filesystem root are searched;
    in each, ``taskmill.toml`` takes precedence over a ``pyproject.toml`` with
    a ``[tool.taskmill]`` table.

    Args:
        start (Path | None): Directory to start from.

    Returns:
        Path | None: The configuration file, or None.
    """
    env_path: str | None = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path)

    here: Path = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate: Path = directory / DEFAULT_TOML_CONFIG_NAME
        if candidate.is_file():
            return candidate
        pyproject: Path = directory / PYPROJECT_TOML_NAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def settings_to_toml(settings: Settings, *, tool_table: bool = False) -> str:
    """Render settings as TOML.

    Args:
        settings (Settings): Settings to render.
        tool_table (bool): Nest under ``[tool.taskmill]`` for pasting into
            ``pyproject.toml``.

    Returns:
        str: The TOML document.
    """
    doc: tomlkit.TOMLDocument = tomlkit.document()
    doc.add(tomlkit.comment("TaskMill settings"))
    body = tomlkit.table()
    for key, value in settings.to_toml_table().items():
        body.add(key, value)
    if tool_table:
        tool = tomlkit.table(is_super_table=True)
        tool.add(TOML_TOOL_TABLE, body)
        doc.add("tool", tool)
    else:
        doc.add(TOML_TOOL_TABLE, body)
    return tomlkit.dumps(doc)
