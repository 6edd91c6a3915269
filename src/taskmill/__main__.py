# taskmill:header:start
#
#   project      : TaskMill
#   file         : __main__.py
#   file_relpath : src/taskmill/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Module entry point for running TaskMill via ``python -m taskmill``.

Delegates to `taskmill.cli.main.cli`, the same entry point as the
``taskmill`` console script.

Examples:
    Run a task from the command line::

        python -m taskmill run billing.tasks:ChargeCard -s amount=12
"""

from __future__ import annotations

from taskmill.cli.main import cli

if __name__ == "__main__":
    cli()
