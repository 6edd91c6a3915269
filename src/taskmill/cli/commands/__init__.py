# taskmill:header:start
#
#   project      : TaskMill
#   file         : __init__.py
#   file_relpath : src/taskmill/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Subcommands of the ``taskmill`` CLI."""
