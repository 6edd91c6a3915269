# taskmill:header:start
#
#   project      : TaskMill
#   file         : context.py
#   file_relpath : src/taskmill/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Shared, key-normalized value store threaded through task invocations.

A `Context` is created from the caller's input when a task is invoked and is
passed by reference to every task that task delegates to, so writes made by
one task are visible to the others. Keys are folded to one canonical name:
enum members use their value, every other key is converted with `str()`,
stripped and case-folded (``"User_ID"``, ``" user_id"`` and an enum whose
value is ``"user_id"`` all address the same entry).

Example:
    ```python
    ctx = Context.build({"User_ID": 7})
    ctx.user_id          # 7
    ctx["user_id"] = 8
    ctx.total = 12.5     # attribute-style writes land in the store
    ```
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from enum import Enum
from typing import Any, Final

from taskmill.exceptions import ContextReadOnlyError

_MISSING: Final[object] = object()


def normalize_key(key: object) -> str:
    """Fold a key to its canonical context name.

    Args:
        key (object): A string, enum member or any object with a meaningful `str()`.

    Returns:
        str: The canonical key.
    """
    if isinstance(key, Enum):
        key = key.value
    return str(key).strip().casefold()


class Context(MutableMapping[str, Any]):
    """Mutable mapping with normalized keys and attribute-style access."""

    __slots__ = ("_lock", "_read_only", "_table")

    _table: dict[str, Any]
    _read_only: int
    _lock: threading.RLock

    def __init__(self, data: Mapping[Any, Any] | None = None, /, **kwargs: Any) -> None:
        object.__setattr__(self, "_table", {})
        object.__setattr__(self, "_read_only", 0)
        object.__setattr__(self, "_lock", threading.RLock())
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)

    @classmethod
    def build(cls, value: object = None, /) -> Context:
        """Return a context for `value`, reusing an existing instance by reference.

        Args:
            value (object): None, a `Context`, a mapping, or an object exposing a
                `context` attribute (a task or a result).

        Returns:
            Context: The same instance when `value` already is one, else a new one.

        Raises:
            TypeError: If `value` cannot be turned into a context.
        """
        if value is None:
            return cls()
        if isinstance(value, Context):
            return value
        inner: object = getattr(value, "context", None)
        if isinstance(inner, Context):
            return inner
        if isinstance(value, Mapping):
            return cls(value)
        raise TypeError(f"cannot build a context from {type(value).__name__}")

    # --- mapping protocol ---

    def __getitem__(self, key: object) -> Any:
        return self._table[normalize_key(key)]

    def __setitem__(self, key: object, value: Any) -> None:
        self._check_writable(key)
        self._table[normalize_key(key)] = value

    def __delitem__(self, key: object) -> None:
        self._check_writable(key)
        del self._table[normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        return normalize_key(key) in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Context):
            return self._table == other._table
        if isinstance(other, Mapping):
            return self._table == {normalize_key(k): v for k, v in other.items()}
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._table!r})"

    # --- attribute-style access ---

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._table[normalize_key(name)]
        except KeyError:
            raise AttributeError(f"context has no key {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self[name]
        except KeyError:
            raise AttributeError(f"context has no key {name!r}") from None

    # --- helpers ---

    def fetch(self, key: object, default: Any = _MISSING) -> Any:
        """Return the value for `key`, or `default`; raise KeyError if neither exists."""
        try:
            return self[key]
        except KeyError:
            if default is _MISSING:
                raise
            return default

    def merge(self, data: Mapping[Any, Any] | None = None, /, **kwargs: Any) -> Context:
        """Update in place and return self for chaining."""
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)
        return self

    def delete(self, key: object, default: Any = None) -> Any:
        """Remove `key` and return its value, or `default` when absent."""
        return self.pop(normalize_key(key), default)

    def dig(self, key: object, *path: object) -> Any:
        """Walk nested mappings and sequences, returning None on the first miss.

        Example:
            ```python
            Context(order={"lines": [{"sku": "A1"}]}).dig("order", "lines", 0, "sku")
            # 'A1'
            ```
        """
        node: Any = self.get(normalize_key(key))
        for step in path:
            if node is None:
                return None
            if isinstance(node, Mapping):
                node = node.get(step)
            elif isinstance(step, int) and isinstance(node, (list, tuple)):
                node = node[step] if -len(node) <= step < len(node) else None
            else:
                node = getattr(node, str(step), None)
        return node

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the stored entries."""
        return dict(self._table)

    def copy(self) -> Context:
        """Return a shallow copy (a new, independent store)."""
        return type(self)(self._table)

    @property
    def is_read_only(self) -> bool:
        """Whether writes are currently rejected."""
        return self._read_only > 0

    @contextmanager
    def read_only(self) -> Iterator[Context]:
        """Reject writes for the duration of the block (re-entrant).

        Yields:
            Context: This context.
        """
        with self._lock:
            object.__setattr__(self, "_read_only", self._read_only + 1)
        try:
            yield self
        finally:
            with self._lock:
                object.__setattr__(self, "_read_only", self._read_only - 1)

    def _check_writable(self, key: object) -> None:
        if self._read_only:
            raise ContextReadOnlyError(f"cannot write {key!r}: context is read-only")
