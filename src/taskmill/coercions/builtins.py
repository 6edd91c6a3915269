# taskmill:header:start
#
#   project      : TaskMill
#   file         : builtins.py
#   file_relpath : src/taskmill/coercions/builtins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Built-in converters.

Each converter is pure: it returns a new value (or the input itself when it
already has the target type) and raises `CoercionError` with the catalog
message for its type otherwise.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Context as DecimalContext
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Final

from taskmill.exceptions import CoercionError
from taskmill.locale import translate, type_label

if TYPE_CHECKING:
    from collections.abc import Callable

TRUTHY: Final[re.Pattern[str]] = re.compile(r"^(true|t|yes|y|1)$", re.IGNORECASE)
FALSEY: Final[re.Pattern[str]] = re.compile(r"^(false|f|no|n|0)$", re.IGNORECASE)

DEFAULT_DECIMAL_PRECISION: Final[int] = 14


def coercion_error(type_name: str) -> CoercionError:
    """Build the error for a failed conversion into `type_name`."""
    label: str = type_label(type_name)
    key: str = "coercions.into_an" if label[:1].lower() in "aeiou" else "coercions.into_a"
    return CoercionError(translate(key, type=label))


def to_array(value: Any, options: Mapping[str, Any]) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    if isinstance(value, str) and value.lstrip().startswith("["):
        try:
            decoded: Any = json.loads(value)
        except ValueError:
            raise coercion_error("array") from None
        if isinstance(decoded, list):
            return decoded
        raise coercion_error("array")
    return [value]


def to_big_decimal(value: Any, options: Mapping[str, Any]) -> Decimal:
    precision: int = int(options.get("precision") or DEFAULT_DECIMAL_PRECISION)
    if isinstance(value, float):
        value = repr(value)
    try:
        return DecimalContext(prec=precision).create_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise coercion_error("big_decimal") from None


def to_boolean(value: Any, options: Mapping[str, Any]) -> bool:
    if isinstance(value, bool):
        return value
    text: str = str(value).strip()
    if TRUTHY.match(text):
        return True
    if FALSEY.match(text):
        return False
    raise coercion_error("boolean")


def to_complex(value: Any, options: Mapping[str, Any]) -> complex:
    if isinstance(value, str):
        value = value.replace(" ", "")
    try:
        return complex(value)
    except (TypeError, ValueError):
        raise coercion_error("complex") from None


def to_date(value: Any, options: Mapping[str, Any]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        fmt: str | None = options.get("date_format")
        if fmt:
            return datetime.strptime(value, fmt).date()
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise coercion_error("date") from None


def to_datetime(value: Any, options: Mapping[str, Any]) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    try:
        fmt: str | None = options.get("date_format")
        if fmt:
            return datetime.strptime(value, fmt)
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise coercion_error("datetime") from None


def to_float(value: Any, options: Mapping[str, Any]) -> float:
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        raise coercion_error("float") from None


def to_hash(value: Any, options: Mapping[str, Any]) -> dict[Any, Any]:
    if isinstance(value, dict):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    try:
        if isinstance(value, str):
            if not value.lstrip().startswith("{"):
                raise coercion_error("hash")
            decoded: Any = json.loads(value)
            if isinstance(decoded, dict):
                return decoded
            raise coercion_error("hash")
        if isinstance(value, (list, tuple)):
            if not all(isinstance(pair, (list, tuple)) and len(pair) == 2 for pair in value):
                raise coercion_error("hash")
            return dict(value)
    except (TypeError, ValueError):
        raise coercion_error("hash") from None
    raise coercion_error("hash")


def to_integer(value: Any, options: Mapping[str, Any]) -> int:
    if isinstance(value, bool):
        raise coercion_error("integer")
    if isinstance(value, int):
        return value
    try:
        if isinstance(value, str):
            return int(value.strip(), 0) if value.strip().lower().startswith("0x") else int(value)
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise coercion_error("integer") from None


def to_rational(value: Any, options: Mapping[str, Any]) -> Fraction:
    try:
        return Fraction(value)
    except (TypeError, ValueError, ZeroDivisionError, OverflowError):
        raise coercion_error("rational") from None


def to_string(value: Any, options: Mapping[str, Any]) -> str:
    return value if isinstance(value, str) else str(value)


def to_time(value: Any, options: Mapping[str, Any]) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    try:
        fmt: str | None = options.get("time_format")
        if fmt:
            return datetime.strptime(value, fmt).time()
        return time.fromisoformat(value)
    except (TypeError, ValueError):
        raise coercion_error("time") from None


BUILTIN_COERCIONS: Final[Mapping[str, Callable[[Any, Mapping[str, Any]], Any]]] = {
    "array": to_array,
    "big_decimal": to_big_decimal,
    "boolean": to_boolean,
    "complex": to_complex,
    "date": to_date,
    "datetime": to_datetime,
    "float": to_float,
    "hash": to_hash,
    "integer": to_integer,
    "rational": to_rational,
    "string": to_string,
    "time": to_time,
}
