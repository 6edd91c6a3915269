# taskmill:header:start
#
#   project      : TaskMill
#   file         : __init__.py
#   file_relpath : src/taskmill/validators/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Validation rules for resolved attribute values.

`VALIDATORS` is the global root registry holding the built-in rules. Every
task class overlays it (see `Task.validators()`).

A validator has the shape ``(value, options) -> None`` and raises
`taskmill.exceptions.ValidationError` when `value` breaks the rule. The
options mapping is the rule's own options (``{"min": 3, "message": ...}``);
`allow_nil` and the ``if``/``unless`` guards are handled by the resolver
before the validator is called.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from taskmill.registry import LayeredRegistry
from taskmill.validators.builtins import BUILTIN_VALIDATORS, normalize_rule_options

Validator = Callable[[Any, Mapping[str, Any]], None]

VALIDATORS: LayeredRegistry[Validator] = LayeredRegistry("validator", BUILTIN_VALIDATORS)

__all__ = ["VALIDATORS", "Validator", "normalize_rule_options"]
