# taskmill:header:start
#
#   project      : TaskMill
#   file         : builtins.py
#   file_relpath : src/taskmill/validators/builtins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Built-in validators.

Every rule accepts a ``message`` option, and rules with several branches also
accept a per-branch override (``min_message``, ``within_message``,
``of_message``, ...). Custom messages are `str.format` templates receiving
the same fields as the catalog messages (``{min}``, ``{max}``, ``{values}``,
``{is}``, ``{is_not}``).

Ranges may be given as a `range` (``range(1, 11)`` covers 1 to 10) or as a
``(min, max)`` pair with both ends included.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Final

from taskmill.exceptions import DeclarationError, ValidationError
from taskmill.locale import format_message, translate

Bounds = tuple[Any, Any]

#: Stand-in measure for values without a length.
UNMEASURABLE: Final[object] = object()


def normalize_rule_options(name: str, raw: object) -> dict[str, Any] | None:
    """Expand rule shorthands into an options mapping.

    Args:
        name (str): Validator name.
        raw (object): Declared value: ``True``, a mapping, or a rule-specific
            shorthand (a sequence or range for inclusion/exclusion, a pattern
            for format, a callable for custom).

    Returns:
        dict[str, Any] | None: The options, or None when the rule is disabled
        (``False`` or ``None``).
    """
    if raw is None or raw is False:
        return None
    if raw is True:
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    if name in ("inclusion", "exclusion") and isinstance(raw, (Sequence, range, set, frozenset)):
        return {"in": raw}
    if name == "format" and isinstance(raw, (str, re.Pattern)):
        return {"with": raw}
    if name == "custom" and callable(raw):
        return {"validator": raw}
    if name in ("length", "numeric") and isinstance(raw, range):
        return {"within": raw}
    return {"value": raw}


def _bounds(raw: object, rule: str) -> Bounds:
    if isinstance(raw, range):
        if raw.step != 1 or len(raw) == 0:
            raise DeclarationError(f"{rule}: range must be non-empty with step 1, got {raw!r}")
        return raw.start, raw.stop - 1
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        return raw[0], raw[1]
    raise DeclarationError(f"{rule}: expected a range or a (min, max) pair, got {raw!r}")


def _fail(options: Mapping[str, Any], keys: Sequence[str], catalog_key: str, **params: Any) -> None:
    for key in (*keys, "message"):
        template: Any = options.get(key)
        if template:
            raise ValidationError(format_message(str(template), **params))
    raise ValidationError(translate(catalog_key, **params))


def _is_present(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if hasattr(value, "__len__"):
        return len(value) > 0
    return value is not None


def validate_presence(value: Any, options: Mapping[str, Any]) -> None:
    if not _is_present(value):
        _fail(options, (), "validators.presence")


def validate_absence(value: Any, options: Mapping[str, Any]) -> None:
    if _is_present(value):
        _fail(options, (), "validators.absence")


def validate_format(value: Any, options: Mapping[str, Any]) -> None:
    with_pattern: Any = options.get("with")
    without_pattern: Any = options.get("without")
    if with_pattern is None and without_pattern is None:
        raise DeclarationError("format: expected a 'with' or 'without' pattern")

    valid: bool = isinstance(value, str)
    if valid and with_pattern is not None:
        valid = re.search(with_pattern, value) is not None
    if valid and without_pattern is not None:
        valid = re.search(without_pattern, value) is None
    if not valid:
        _fail(options, (), "validators.format")


def _membership(options: Mapping[str, Any], rule: str) -> tuple[Bounds | None, Any]:
    values: Any = options.get("in", options.get("within"))
    if values is None:
        raise DeclarationError(f"{rule}: expected 'in' or 'within'")
    if isinstance(values, range) or ("within" in options and "in" not in options):
        return _bounds(values, rule), None
    return None, values


def _render_values(values: Any) -> str:
    return ", ".join(repr(v) for v in values)


def validate_inclusion(value: Any, options: Mapping[str, Any]) -> None:
    bounds, values = _membership(options, "inclusion")
    if bounds is not None:
        low, high = bounds
        if not _between(value, low, high):
            _fail(options, ("within_message", "in_message"), "validators.inclusion.within", min=low, max=high)
    elif value not in values:
        _fail(options, ("of_message",), "validators.inclusion.of", values=_render_values(values))


def validate_exclusion(value: Any, options: Mapping[str, Any]) -> None:
    bounds, values = _membership(options, "exclusion")
    if bounds is not None:
        low, high = bounds
        if _between(value, low, high):
            _fail(options, ("within_message", "in_message"), "validators.exclusion.within", min=low, max=high)
    elif value in values:
        _fail(options, ("of_message",), "validators.exclusion.of", values=_render_values(values))


def _between(value: Any, low: Any, high: Any) -> bool:
    try:
        return bool(low <= value <= high)
    except TypeError:
        return False


def _check_measure(measured: Any, options: Mapping[str, Any], rule: str) -> None:
    """Shared branch logic for `length` and `numeric`.

    A measure that cannot be compared with the bounds (`UNMEASURABLE`, or a
    type the bounds do not order with) fails the selected branch.
    """
    prefix: str = f"validators.{rule}"
    holds: Callable[[], bool]
    message_keys: tuple[str, ...]
    params: dict[str, Any]
    if "within" in options or "in" in options:
        low, high = _bounds(options.get("within", options.get("in")), rule)
        holds = lambda: low <= measured <= high  # noqa: E731
        message_keys, key, params = ("within_message", "in_message"), "within", {"min": low, "max": high}
    elif "not_within" in options or "not_in" in options:
        low, high = _bounds(options.get("not_within", options.get("not_in")), rule)
        holds = lambda: not low <= measured <= high  # noqa: E731
        message_keys, key, params = ("not_within_message", "not_in_message"), "not_within", {"min": low, "max": high}
    elif "min" in options and "max" in options:
        low, high = options["min"], options["max"]
        holds = lambda: low <= measured <= high  # noqa: E731
        message_keys, key, params = ("within_message",), "within", {"min": low, "max": high}
    elif "min" in options:
        holds = lambda: measured >= options["min"]  # noqa: E731
        message_keys, key, params = ("min_message",), "min", {"min": options["min"]}
    elif "max" in options:
        holds = lambda: measured <= options["max"]  # noqa: E731
        message_keys, key, params = ("max_message",), "max", {"max": options["max"]}
    elif "is" in options:
        holds = lambda: measured == options["is"]  # noqa: E731
        message_keys, key, params = ("is_message",), "is", {"is": options["is"]}
    elif "is_not" in options:
        holds = lambda: measured != options["is_not"]  # noqa: E731
        message_keys, key, params = ("is_not_message",), "is_not", {"is_not": options["is_not"]}
    else:
        raise DeclarationError(f"{rule}: no known options given")

    if measured is UNMEASURABLE or not _compares(holds):
        _fail(options, message_keys, f"{prefix}.{key}", **params)


def _compares(check: Callable[[], bool]) -> bool:
    try:
        return bool(check())
    except TypeError:
        return False


def validate_length(value: Any, options: Mapping[str, Any]) -> None:
    try:
        measured: Any = len(value)
    except TypeError:
        measured = UNMEASURABLE
    _check_measure(measured, options, "length")


def validate_numeric(value: Any, options: Mapping[str, Any]) -> None:
    _check_measure(value, options, "numeric")


def validate_custom(value: Any, options: Mapping[str, Any]) -> None:
    validator: Callable[[Any, Mapping[str, Any]], Any] | None = options.get("validator")
    if validator is None:
        raise DeclarationError("custom: expected a 'validator' callable")
    if not validator(value, options):
        _fail(options, (), "validators.custom")


BUILTIN_VALIDATORS: Final[Mapping[str, Callable[[Any, Mapping[str, Any]], None]]] = {
    "absence": validate_absence,
    "custom": validate_custom,
    "exclusion": validate_exclusion,
    "format": validate_format,
    "inclusion": validate_inclusion,
    "length": validate_length,
    "numeric": validate_numeric,
    "presence": validate_presence,
}
