# taskmill:header:start
#
#   project      : TaskMill
#   file         : exit_codes.py
#   file_relpath : src/taskmill/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Exit codes for the TaskMill CLI.

TaskMill aligns with the BSD `sysexits` convention where practical, so that
other tooling can interpret failures consistently. Codes below 64 describe the
outcome of the task that was run: ``taskmill run`` exits with `FAILURE` for a
failed result and `SKIPPED` for a skipped one. ``SKIPPED = 3`` stays clear of
Click's own usage error code (2).
"""

from __future__ import annotations

from enum import IntEnum

from taskmill.status import Status


class ExitCode(IntEnum):
    """Standardized exit codes for the TaskMill CLI.

    Attributes:
        SUCCESS: The task ran and its result is successful.
        FAILURE: The task ran and its result is failed.
        SKIPPED: The task ran and its result is skipped.
        USAGE_ERROR: Invalid target, input or flags. Mirrors BSD ``EX_USAGE (64)``.
        SOFTWARE_ERROR: An uncontrolled error escaped a strict run. Mirrors BSD
            ``EX_SOFTWARE (70)``.
        CONFIG_ERROR: Missing, invalid or malformed configuration. Mirrors BSD
            ``EX_CONFIG (78)``.
    """

    SUCCESS = 0
    FAILURE = 1
    SKIPPED = 3

    # sysexits-aligned values
    USAGE_ERROR = 64  # EX_USAGE
    SOFTWARE_ERROR = 70  # EX_SOFTWARE
    CONFIG_ERROR = 78  # EX_CONFIG

    @classmethod
    def for_status(cls, status: Status) -> ExitCode:
        """Map a result status to the exit code of ``taskmill run``."""
        if status is Status.FAILED:
            return cls.FAILURE
        if status is Status.SKIPPED:
            return cls.SKIPPED
        return cls.SUCCESS
