# taskmill:header:start
#
#   project      : TaskMill
#   file         : __init__.py
#   file_relpath : src/taskmill/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Configuration layer: settings model, TOML I/O and logging setup.

Layers, lowest to highest precedence:

1. Built-in defaults (`DEFAULT_SETTINGS`).
2. The process-wide overlay (`configure()`, `load_configuration()`).
3. Per-task-type overlays given as class keywords, merged along inheritance.
4. Per-group and per-member breakpoint overrides inside workflows.
"""

from __future__ import annotations

from taskmill.config.settings import (
    DEFAULT_SETTINGS,
    MutableSettings,
    Settings,
    configure,
    get_settings,
    load_configuration,
    reset_configuration,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "MutableSettings",
    "Settings",
    "configure",
    "get_settings",
    "load_configuration",
    "reset_configuration",
]
