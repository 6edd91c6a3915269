# taskmill:header:start
#
#   project      : TaskMill
#   file         : status.py
#   file_relpath : src/taskmill/status.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Lifecycle states and outcome statuses.

State and status are orthogonal axes of an outcome record:

- `State`: ``initialized -> executing -> {complete | interrupted}``.
- `Status`: ``success -> {skipped | failed}``, one-directional.
"""

from __future__ import annotations

from typing import Final

from yachalk import chalk

from taskmill.core.enum_mixins import ColoredStrEnum


class State(ColoredStrEnum):
    """Where an invocation is in its lifecycle."""

    INITIALIZED = ("initialized", chalk.gray)
    EXECUTING = ("executing", chalk.blue)
    COMPLETE = ("complete", chalk.green)
    INTERRUPTED = ("interrupted", chalk.red)


class Status(ColoredStrEnum):
    """How an invocation ended (or is ending)."""

    SUCCESS = ("success", chalk.green)
    SKIPPED = ("skipped", chalk.yellow)
    FAILED = ("failed", chalk.red_bright)


FINAL_STATES: Final[frozenset[State]] = frozenset({State.COMPLETE, State.INTERRUPTED})
HALT_STATUSES: Final[frozenset[Status]] = frozenset({Status.SKIPPED, Status.FAILED})
