# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_context.py
#   file_relpath : tests/execution/test_context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Tests for `Context`: key folding, attribute access, helpers and read-only mode."""

from __future__ import annotations

from enum import Enum

import pytest

from taskmill import Context, Task
from taskmill.exceptions import ContextReadOnlyError


class Channel(str, Enum):
    EMAIL = "Email"


def test_keys_fold_case_and_enum_members() -> None:
    ctx = Context({"User_ID": 7})
    ctx[Channel.EMAIL] = "a@b.c"
    assert ctx["user_id"] == 7
    assert ctx.USER_ID == 7
    assert ctx["email"] == "a@b.c"
    assert list(ctx) == ["user_id", "email"]


def test_attribute_access_and_deletion() -> None:
    ctx = Context()
    ctx.total = 10
    assert ctx["total"] == 10
    del ctx.total
    assert "total" not in ctx
    with pytest.raises(AttributeError, match="no key 'total'"):
        _ = ctx.total
    with pytest.raises(AttributeError):
        del ctx.total


def test_equality_with_mappings() -> None:
    assert Context(A=1) == {"a": 1}
    assert Context(a=1) == Context(A=1)
    assert Context(a=1) != {"a": 2}


def test_build_reuses_instances_by_reference() -> None:
    """Tasks and results expose their context; build() shares it instead of copying."""

    class Noop(Task):
        def work(self) -> None:
            pass

    shared = Context(step=1)
    assert Context.build(shared) is shared
    task = Noop(shared)
    assert Context.build(task) is shared
    assert Context.build(task.result) is shared
    assert Context.build({"x": 1}) == {"x": 1}
    assert len(Context.build()) == 0
    with pytest.raises(TypeError, match="cannot build a context from int"):
        Context.build(3)


def test_fetch_merge_delete() -> None:
    ctx = Context(a=1)
    assert ctx.fetch("A") == 1
    assert ctx.fetch("missing", None) is None
    with pytest.raises(KeyError):
        ctx.fetch("missing")
    assert ctx.merge({"B": 2}, c=3) is ctx
    assert ctx.to_dict() == {"a": 1, "b": 2, "c": 3}
    assert ctx.delete("B") == 2
    assert ctx.delete("b", "gone") == "gone"


def test_dig_walks_mappings_sequences_and_attributes() -> None:
    class Line:
        sku = "A1"

    ctx = Context(order={"lines": [{"qty": 2}, Line()]})
    assert ctx.dig("order", "lines", 0, "qty") == 2
    assert ctx.dig("order", "lines", -1, "sku") == "A1"
    assert ctx.dig("order", "lines", 5, "qty") is None
    assert ctx.dig("order", "missing", "deeper") is None
    assert ctx.dig("absent") is None


def test_copy_is_independent() -> None:
    ctx = Context(a=1)
    clone = ctx.copy()
    clone.a = 2
    assert ctx.a == 1


def test_read_only_blocks_writes_and_is_reentrant() -> None:
    ctx = Context(a=1)
    with ctx.read_only():
        with ctx.read_only():
            assert ctx.is_read_only
        assert ctx.is_read_only
        assert ctx.a == 1
        with pytest.raises(ContextReadOnlyError, match="context is read-only"):
            ctx.b = 2
        with pytest.raises(ContextReadOnlyError):
            del ctx["a"]
    assert not ctx.is_read_only
    ctx.b = 2
    assert ctx.b == 2


def test_context_is_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(Context())
