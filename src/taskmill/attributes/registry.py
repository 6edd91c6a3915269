# taskmill:header:start
#
#   project      : TaskMill
#   file         : registry.py
#   file_relpath : src/taskmill/attributes/registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Ordered, per-task-type registry of attribute declarations.

Declaration order is significant: an attribute may use an earlier one as its
source, so the resolver walks the registry in registration order. Subclasses
start from a copy of their parent's registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from taskmill.exceptions import DeclarationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from taskmill.attributes.attribute import Attribute


class AttributeRegistry:
    """Top-level attribute declarations of one task type, in order."""

    def __init__(self, attributes: Iterable[Attribute] = ()) -> None:
        self._attributes: list[Attribute] = []
        self.register(*attributes)

    def copy(self) -> AttributeRegistry:
        """Return a registry with the same declarations (for subclasses)."""
        clone = AttributeRegistry()
        clone._attributes = list(self._attributes)
        return clone

    def register(self, *attributes: Attribute) -> None:
        """Append top-level declarations.

        Raises:
            DeclarationError: If an accessor name is already taken, or a nested
                attribute is registered at the top level.
        """
        taken: set[str] = set(self.accessors())
        for attr in attributes:
            if attr.parent is not None:
                raise DeclarationError(f"{attr!r} is nested; register its parent instead")
            for node in attr.walk():
                accessor: str = node.accessor_name
                if accessor in taken:
                    raise DeclarationError(f"attribute accessor {accessor!r} is declared twice")
                taken.add(accessor)
            self._attributes.append(attr)

    def deregister(self, *names: str) -> list[Attribute]:
        """Remove top-level declarations whose name or any nested accessor matches.

        Returns:
            list[Attribute]: The removed declarations.
        """
        wanted: set[str] = set(names)
        removed: list[Attribute] = [
            attr
            for attr in self._attributes
            if attr.name in wanted or any(node.accessor_name in wanted for node in attr.walk())
        ]
        self._attributes = [attr for attr in self._attributes if attr not in removed]
        return removed

    def accessors(self) -> list[str]:
        """Accessor names of every declaration, nested ones included."""
        return [node.accessor_name for attr in self._attributes for node in attr.walk()]

    def walk(self) -> Iterator[Attribute]:
        """Yield every declaration depth-first, in declaration order."""
        for attr in self._attributes:
            yield from attr.walk()

    def __iter__(self) -> Iterator[Attribute]:
        return iter(list(self._attributes))

    def __len__(self) -> int:
        return len(self._attributes)

    def __contains__(self, name: object) -> bool:
        return any(attr.name == name for attr in self._attributes)

    def __repr__(self) -> str:
        return f"AttributeRegistry({[a.name for a in self._attributes]!r})"
