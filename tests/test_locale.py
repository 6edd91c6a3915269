# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_locale.py
#   file_relpath : tests/test_locale.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Tests for the message catalog and the pluggable translator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from taskmill import Task, required
from taskmill.locale import format_message, set_translator, translate, type_label

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def french() -> Iterator[None]:
    """Install a partial translator for the duration of a test."""

    def translator(key: str, **params: Any) -> str | None:
        if key == "attributes.required":
            return "est obligatoire"
        if key == "types.integer":
            return "entier"
        return None

    set_translator(translator)
    yield
    set_translator(None)


def test_catalog_interpolation() -> None:
    assert translate("attributes.required") == "is required"
    assert translate("validators.length.min", min=3) == "length must be at least 3"
    assert translate("attributes.undefined", method="lookup") == "delegates to undefined method lookup"


def test_missing_catalog_entry() -> None:
    assert translate("nope.nothing") == "Translation missing: nope.nothing"


def test_format_message_keeps_template_on_bad_placeholders() -> None:
    assert format_message("at least {min}", max=3) == "at least {min}"
    assert format_message("{0} items") == "{0} items"


def test_type_labels() -> None:
    assert type_label("big_decimal") == "big decimal"
    assert type_label("money") == "money"


@pytest.mark.usefixtures("french")
def test_translator_overrides_and_falls_back() -> None:
    assert translate("attributes.required") == "est obligatoire"
    assert translate("faults.invalid") == "Invalid"
    assert type_label("integer") == "entier"


@pytest.mark.usefixtures("french")
def test_translated_messages_reach_results() -> None:
    class Register(Task):
        email = required()

        def work(self) -> None:
            pass

    result = Register.execute()
    assert result.metadata["errors"]["messages"] == {"email": ["est obligatoire"]}
