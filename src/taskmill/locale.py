# taskmill:header:start
#
#   project      : TaskMill
#   file         : locale.py
#   file_relpath : src/taskmill/locale.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""English message catalog for validation, coercion and fault messages.

Messages are addressed by dotted keys and interpolated with `str.format`.
Applications with their own i18n layer plug it in with `set_translator()`; a
translator returning None falls back to this catalog.

Example:
    ```python
    translate("validators.length.min", min=3)  # 'length must be at least 3'
    ```
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final, Optional

from taskmill.config.logging import TaskmillLogger, get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: TaskmillLogger = get_logger(__name__)

MESSAGES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "attributes.required": "is required",
        "attributes.undefined": "delegates to undefined method {method}",
        "coercions.into_a": "could not coerce into a {type}",
        "coercions.into_an": "could not coerce into an {type}",
        "coercions.into_any": "could not coerce into one of: {types}",
        "faults.invalid": "Invalid",
        "faults.unspecified": "Unspecified",
        "returns.missing": "must be set in the context",
        "types.array": "array",
        "types.big_decimal": "big decimal",
        "types.boolean": "boolean",
        "types.complex": "complex",
        "types.date": "date",
        "types.datetime": "datetime",
        "types.float": "float",
        "types.hash": "hash",
        "types.integer": "integer",
        "types.rational": "rational",
        "types.string": "string",
        "types.time": "time",
        "validators.absence": "must be empty",
        "validators.custom": "is not valid",
        "validators.exclusion.of": "must not be one of: {values}",
        "validators.exclusion.within": "must not be within {min} and {max}",
        "validators.format": "is an invalid format",
        "validators.inclusion.of": "must be one of: {values}",
        "validators.inclusion.within": "must be within {min} and {max}",
        "validators.length.is": "length must be {is}",
        "validators.length.is_not": "length must not be {is_not}",
        "validators.length.max": "length must be at most {max}",
        "validators.length.min": "length must be at least {min}",
        "validators.length.not_within": "length must not be within {min} and {max}",
        "validators.length.within": "length must be within {min} and {max}",
        "validators.numeric.is": "must be {is}",
        "validators.numeric.is_not": "must not be {is_not}",
        "validators.numeric.max": "must be at most {max}",
        "validators.numeric.min": "must be at least {min}",
        "validators.numeric.not_within": "must not be within {min} and {max}",
        "validators.numeric.within": "must be within {min} and {max}",
        "validators.presence": "cannot be empty",
    }
)

Translator = Callable[..., Optional[str]]

_lock = threading.Lock()
_translator: Translator | None = None


def set_translator(translator: Translator | None) -> None:
    """Install (or remove, with None) an external translator.

    The translator is called as ``translator(key, **params)`` and may return
    None to fall back to the built-in catalog.
    """
    global _translator
    with _lock:
        _translator = translator


def translate(key: str, **params: Any) -> str:
    """Look up and interpolate the message for `key`.

    Args:
        key (str): Dotted catalog key, e.g. ``"attributes.required"``.
        **params (Any): Values interpolated into the message template.

    Returns:
        str: The rendered message, or ``"Translation missing: <key>"``.
    """
    translator: Translator | None = _translator
    if translator is not None:
        rendered: str | None = translator(key, **params)
        if rendered is not None:
            return rendered

    template: str | None = MESSAGES.get(key)
    if template is None:
        logger.debug("no catalog entry for %r", key)
        return f"Translation missing: {key}"
    return format_message(template, **params)


def format_message(template: str, **params: Any) -> str:
    """Interpolate a user-provided or catalog template, leaving it intact on bad keys."""
    try:
        return template.format(**params)
    except (KeyError, IndexError, ValueError):
        logger.debug("could not interpolate %r with %r", template, params)
        return template


def type_label(type_name: str) -> str:
    """Human label for a converter key (``"big_decimal"`` -> ``"big decimal"``)."""
    label: str | None = MESSAGES.get(f"types.{type_name}")
    if _translator is not None:
        rendered: str | None = _translator(f"types.{type_name}")
        if rendered is not None:
            return rendered
    return label if label is not None else type_name.replace("_", " ")
