# taskmill:header:start
#
#   project      : TaskMill
#   file         : __init__.py
#   file_relpath : src/taskmill/coercions/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Type converters for declared attribute types.

`COERCIONS` is the global root registry holding the built-in converters.
Every task class overlays it (see `Task.coercions()`), so registrations can be
global or per task type.

A converter has the shape ``(value, options) -> converted`` and raises
`taskmill.exceptions.CoercionError` when it cannot convert `value`.

Example:
    ```python
    from decimal import Decimal
    from taskmill.coercions import COERCIONS

    def money(value, options):
        return Decimal(str(value)).quantize(Decimal("0.01"))

    COERCIONS.register("money", money)
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from taskmill.coercions.builtins import BUILTIN_COERCIONS
from taskmill.registry import LayeredRegistry

Coercer = Callable[[Any, Mapping[str, Any]], Any]

COERCIONS: LayeredRegistry[Coercer] = LayeredRegistry("coercion", BUILTIN_COERCIONS)

__all__ = ["COERCIONS", "Coercer"]
