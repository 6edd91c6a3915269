# taskmill:header:start
#
#   project      : TaskMill
#   file         : __init__.py
#   file_relpath : src/taskmill/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Click command line interface for TaskMill.

The entry point is `taskmill.cli.main.cli` (installed as the ``taskmill``
console script). Commands write user-facing output through the console stored
in ``ctx.obj["console"]``; diagnostics go through logging.
"""
