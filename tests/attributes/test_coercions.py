# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_coercions.py
#   file_relpath : tests/attributes/test_coercions.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Built-in type converters and the layered registry holding them."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from fractions import Fraction
from typing import Any

import pytest

from taskmill import Status, Task, optional, required
from taskmill.coercions import COERCIONS
from taskmill.coercions.builtins import (
    to_array,
    to_big_decimal,
    to_boolean,
    to_complex,
    to_date,
    to_float,
    to_hash,
    to_integer,
    to_time,
)
from taskmill.exceptions import CoercionError
from taskmill.registry import LayeredRegistry


@pytest.mark.parametrize(
    ("type_name", "raw", "expected"),
    [
        ("integer", "42", 42),
        ("integer", " 7 ", 7),
        ("integer", "0x1A", 26),
        ("integer", 3.9, 3),
        ("float", "2.5", 2.5),
        ("string", 12, "12"),
        ("boolean", "Yes", True),
        ("boolean", "0", False),
        ("rational", "3/4", Fraction(3, 4)),
        ("complex", "1 + 2j", complex(1, 2)),
        ("array", "[1, 2]", [1, 2]),
        ("array", (1, 2), [1, 2]),
        ("array", "solo", ["solo"]),
        ("hash", '{"a": 1}', {"a": 1}),
        ("hash", [("a", 1)], {"a": 1}),
        ("date", "2024-02-29", date(2024, 2, 29)),
        ("datetime", date(2024, 1, 2), datetime(2024, 1, 2)),
        ("time", "13:45", time(13, 45)),
    ],
)
def test_builtin_converters(type_name: str, raw: Any, expected: Any) -> None:
    coercer = COERCIONS.get(type_name)
    assert coercer is not None
    assert coercer(raw, {}) == expected


@pytest.mark.parametrize(
    ("type_name", "raw", "message"),
    [
        ("integer", "30x", "could not coerce into an integer"),
        ("integer", True, "could not coerce into an integer"),
        ("float", "abc", "could not coerce into a float"),
        ("boolean", "maybe", "could not coerce into a boolean"),
        ("hash", "not json", "could not coerce into a hash"),
        ("array", "[1,", "could not coerce into an array"),
        ("date", "yesterday", "could not coerce into a date"),
        ("big_decimal", "x", "could not coerce into a big decimal"),
    ],
)
def test_converter_failures_name_the_type(type_name: str, raw: Any, message: str) -> None:
    coercer = COERCIONS.get(type_name)
    assert coercer is not None
    with pytest.raises(CoercionError) as excinfo:
        coercer(raw, {})
    assert str(excinfo.value) == message


def test_converter_options() -> None:
    assert to_date("02/03/2024", {"date_format": "%d/%m/%Y"}) == date(2024, 3, 2)
    assert to_time("1:05 PM", {"time_format": "%I:%M %p"}) == time(13, 5)
    assert to_big_decimal("1.23456", {"precision": 3}) == Decimal("1.23")
    assert to_big_decimal(0.1, {}) == Decimal("0.1")


def test_array_and_hash_return_existing_containers_as_is() -> None:
    items: list[int] = [1]
    table: dict[str, int] = {"a": 1}
    assert to_array(items, {}) is items
    assert to_hash(table, {}) is table
    assert to_array(None, {}) == []


def test_boolean_and_integer_pass_through_native_values() -> None:
    assert to_boolean(False, {}) is False
    assert to_integer(5, {}) == 5


def test_layered_registry_overlay_and_removal() -> None:
    root: LayeredRegistry[Any] = LayeredRegistry("coercion", {"Text": str})
    layer: LayeredRegistry[Any] = root.overlay()

    assert "text" in layer
    layer.register("number", int)
    assert layer.names() == ("number", "text")
    assert "number" not in root

    assert layer.unregister("text") is True
    assert "text" not in layer
    assert "text" in root
    assert layer.unregister("missing") is False

    layer.register("text", repr)
    assert layer.get("TEXT") is repr


NON_FINITE: list[Any] = [float("inf"), float("-inf"), float("nan"), Decimal("Infinity"), Decimal("NaN")]


@pytest.mark.parametrize("raw", NON_FINITE)
@pytest.mark.parametrize("type_name", ["integer", "rational"])
def test_non_finite_numbers_fail_exact_types(type_name: str, raw: Any) -> None:
    coercer = COERCIONS.get(type_name)
    assert coercer is not None
    with pytest.raises(CoercionError):
        coercer(raw, {})


@pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_floats_pass_inexact_types(raw: Any) -> None:
    assert isinstance(to_float(raw, {}), float)
    assert isinstance(to_big_decimal(raw, {}), Decimal)
    assert isinstance(to_complex(raw, {}), complex)


def test_non_finite_rational_falls_back_to_next_type() -> None:
    class Measure(Task):
        ratio = required(types=("rational", "string"))
        other = optional(type="integer")

        def work(self) -> None:
            self.context.ratio = self.ratio

    result = Measure.execute(ratio=float("inf"), other="x")
    assert result.status is Status.FAILED
    assert result.reason == "Invalid"
    assert result.metadata["errors"]["messages"] == {"other": ["could not coerce into an integer"]}

    converted = Measure.execute(ratio=float("inf"))
    assert converted.status is Status.SUCCESS
    assert converted.context.ratio == "inf"


@pytest.mark.parametrize("raw", [["ab"], [("a", 1, 2)], [1, 2], ("k",)])
def test_hash_rejects_sequences_of_non_pairs(raw: Any) -> None:
    with pytest.raises(CoercionError) as excinfo:
        to_hash(raw, {})
    assert str(excinfo.value) == "could not coerce into a hash"
    assert to_hash([("a", 1), ["b", 2]], {}) == {"a": 1, "b": 2}
