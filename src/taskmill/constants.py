# taskmill:header:start
#
#   project      : TaskMill
#   file         : constants.py
#   file_relpath : src/taskmill/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""TaskMill Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

TASKMILL_VERSION: str = get_version("taskmill")

DEFAULT_TOML_CONFIG_NAME: str = "taskmill.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
TOML_TOOL_TABLE: str = "taskmill"

ENV_LOG_LEVEL: str = "TASKMILL_LOG_LEVEL"
ENV_CONFIG_PATH: str = "TASKMILL_CONFIG"
