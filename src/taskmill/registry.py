# taskmill:header:start
#
#   project      : TaskMill
#   file         : registry.py
#   file_relpath : src/taskmill/registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Layered name -> entry registries for converters and validators.

A registry is either a *root* holding the global built-in entries, or an
*overlay* bound to a parent registry (one per task class). Lookups read a
**composed** view (parent view + local overrides - local removals), so an
entry registered globally after a task class was defined is still visible to
it, while per-task registrations never leak to siblings or parents.

Notes:
    * Public views (`as_mapping()`, `names()`, `get()`) come from the composed
      view and are exposed as `MappingProxyType`.
    * `register()` / `unregister()` only touch the local layer.
    * Names are normalized with `norm_token()` (``"Big-Decimal"`` ->
      ``"big_decimal"``).
"""

from __future__ import annotations

from threading import RLock
from types import MappingProxyType
from typing import TYPE_CHECKING, Generic, TypeVar

from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.core.enum_mixins import norm_token

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger: TaskmillLogger = get_logger(__name__)

T = TypeVar("T")


class LayeredRegistry(Generic[T]):
    """Registry composed from a parent layer and local overrides/removals.

    Args:
        kind (str): Human-readable kind used in log messages ("coercion", ...).
        entries (Mapping[str, T] | None): Initial local entries.
        parent (LayeredRegistry[T] | None): Layer this registry overlays.
    """

    def __init__(
        self,
        kind: str,
        entries: Mapping[str, T] | None = None,
        *,
        parent: LayeredRegistry[T] | None = None,
    ) -> None:
        self.kind: str = kind
        self.parent: LayeredRegistry[T] | None = parent
        self._lock = RLock()
        self._overrides: dict[str, T] = {}
        self._removals: set[str] = set()
        for name, entry in (entries or {}).items():
            self._overrides[norm_token(name)] = entry

    def overlay(self) -> LayeredRegistry[T]:
        """Return a new, empty layer on top of this registry."""
        return type(self)(self.kind, parent=self)

    def _compose(self) -> dict[str, T]:
        """Compose parent view with local overrides/removals."""
        base: dict[str, T] = self.parent._compose() if self.parent is not None else {}
        with self._lock:
            base.update(self._overrides)
            for name in self._removals:
                base.pop(name, None)
        return base

    def names(self) -> tuple[str, ...]:
        """Return all composed entry names (sorted)."""
        return tuple(sorted(self._compose()))

    def get(self, name: str) -> T | None:
        """Return an entry by name, or None."""
        return self._compose().get(norm_token(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and norm_token(name) in self._compose()

    def __iter__(self) -> Iterator[str]:
        return iter(self._compose())

    def __len__(self) -> int:
        return len(self._compose())

    def as_mapping(self) -> Mapping[str, T]:
        """Return a read-only mapping of the composed entries.

        Returns:
            Mapping[str, T]: Name -> entry mapping (a `MappingProxyType`).
        """
        return MappingProxyType(self._compose())

    def register(self, name: str, entry: T) -> None:
        """Register (or replace) an entry in this layer.

        Args:
            name (str): Entry name.
            entry (T): The entry (a converter or validator callable).
        """
        key: str = norm_token(name)
        with self._lock:
            self._removals.discard(key)
            self._overrides[key] = entry
        logger.debug("registered %s %r", self.kind, key)

    def unregister(self, name: str) -> bool:
        """Remove an entry from the composed view of this layer.

        Args:
            name (str): Entry name.

        Returns:
            bool: True if an entry was visible and is now removed, else False.
        """
        key: str = norm_token(name)
        with self._lock:
            existed: bool = key in self._overrides
            self._overrides.pop(key, None)
            if self.parent is not None and key in self.parent:
                self._removals.add(key)
                existed = True
        if existed:
            logger.debug("unregistered %s %r", self.kind, key)
        return existed

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, names={list(self.names())!r})"
