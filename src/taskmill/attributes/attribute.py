# taskmill:header:start
#
#   project      : TaskMill
#   file         : attribute.py
#   file_relpath : src/taskmill/attributes/attribute.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Attribute declarations.

An `Attribute` is declared in a task class body and doubles as the read-only
descriptor through which the task's `work()` reads the resolved value:

```python
class CreateUser(Task):
    email = required(type="string", format=r"@")
    age = optional(type="integer", numeric={"min": 18})
    address = optional(
        type="hash",
        children=[required("city"), optional("zip", type="string")],
    )
    names = required("first_name", "last_name", type="string")

    def work(self) -> None:
        self.context.user = {"email": self.email, "city": self.city}
```

A declaration with several names yields an `AttributeSet`; each member is
bound under its own accessor and the holder name (``names`` above) is removed
from the class. Children are bound as accessors too (``self.city``).

Options beyond the ones named in `Attribute.__init__` are kept in
`Attribute.options`: keys that name a registered validator become validation
rules, every other key is passed to the type converters (``date_format``,
``precision``).
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Final

from taskmill.callables import CallableRef, evaluate_condition, invoke_callable
from taskmill.exceptions import DeclarationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

CONTEXT_SOURCE: Final[str] = "context"


class _Missing:
    """Sentinel type for "no value"; distinct from an explicit None."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final[_Missing] = _Missing()

_MUTABLE_LITERALS: Final[tuple[type, ...]] = (list, dict, set)


class Attribute:
    """Declared task input, and the descriptor exposing its resolved value.

    Args:
        name (str | None): Input name. When None, the class attribute name the
            declaration is assigned to is used.
        required (bool | object): Whether the input must be present; may be a
            callable reference evaluated per invocation.
        source (object): Where the value comes from. None or ``"context"``
            reads the task's context; another string names an attribute or
            routine of the task whose result is the container; a callable is
            invoked with the task and returns the container.
        type (str | None): Converter name. Shorthand for a single `types` entry.
        types (Sequence[str]): Converter names tried in order.
        default (object): Value used when the input is absent; a callable (or a
            string naming a routine of the task) is invoked against the task.
        transform (object): Applied to the converted value.
        prefix (bool | str | None): Accessor prefix; True gives ``"<source>_"``.
        suffix (bool | str | None): Accessor suffix; True gives ``"_<source>"``.
        as_ (str | None): Explicit accessor name.
        if_ (object): Guard making the requirement conditional.
        unless (object): Guard making the requirement conditional.
        children (Iterable[Attribute]): Nested declarations.
        description (str | None): Free text for introspection.
        **options (Any): Validation rules and converter options.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        required: bool | object = False,
        source: object = None,
        type: str | None = None,  # noqa: A002
        types: Sequence[str] = (),
        default: object = MISSING,
        transform: object = None,
        prefix: bool | str | None = None,
        suffix: bool | str | None = None,
        as_: str | None = None,
        if_: object = None,
        unless: object = None,
        children: Iterable[Attribute] = (),
        description: str | None = None,
        **options: Any,
    ) -> None:
        if type is not None and types:
            raise DeclarationError("use either 'type' or 'types', not both")
        if isinstance(types, str):
            types = (types,)
        if transform is not None and not (isinstance(transform, str) or callable(transform)):
            raise DeclarationError(f"transform must be a method name or a callable, got {transform!r}")
        self.name: str | None = name
        self.required: bool | object = required
        self.source: object = source
        self.types: tuple[str, ...] = (type,) if type is not None else tuple(types)
        self.default: object = default
        self.transform: object = transform
        self.prefix: bool | str | None = prefix
        self.suffix: bool | str | None = suffix
        self.as_: str | None = as_
        self.if_: object = if_
        self.unless: object = unless
        self.description: str | None = description
        self.options: dict[str, Any] = options
        self.parent: Attribute | None = None
        self.owner: type | None = None
        self.children: tuple[Attribute, ...] = tuple(children)
        for child in self.children:
            if not isinstance(child, Attribute):
                raise DeclarationError(f"children must be attributes, got {child!r}")
            if child.name is None:
                raise DeclarationError("nested attributes must be declared with a name")
            if child.source is not None:
                raise DeclarationError(f"nested attribute {child.name!r} cannot declare its own source")
            child.parent = self

    # --- naming ---

    @property
    def source_name(self) -> str:
        """Name of the source, used for ``prefix=True`` / ``suffix=True``."""
        if self.parent is not None:
            return self.parent.accessor_name
        if self.source is None:
            return CONTEXT_SOURCE
        if isinstance(self.source, str):
            return self.source
        raise DeclarationError(
            f"attribute {self.name!r}: prefix/suffix=True needs a named source, got {self.source!r}"
        )

    @property
    def accessor_name(self) -> str:
        """Name the resolved value is bound under on the task instance."""
        if self.name is None:
            raise DeclarationError("attribute has no name yet")
        if self.as_:
            return self.as_
        prefix: str = f"{self.source_name}_" if self.prefix is True else (self.prefix or "")
        suffix: str = f"_{self.source_name}" if self.suffix is True else (self.suffix or "")
        return f"{prefix}{self.name}{suffix}"

    @property
    def path(self) -> str:
        """Dotted key used in error messages (``"address.city"``)."""
        if self.parent is None:
            return self.accessor_name
        return f"{self.parent.path}.{self.accessor_name}"

    # --- per-invocation evaluation ---

    def is_required(self, task: object) -> bool:
        """Evaluate the requirement flag and its guards against `task`."""
        required: bool
        if isinstance(self.required, bool):
            required = self.required
        else:
            required = bool(invoke_callable(self.required, task))
        return required and evaluate_condition(task, if_=self.if_, unless=self.unless)

    def default_for(self, task: object) -> Any:
        """Return the default value for one invocation, or `MISSING`."""
        default: object = self.default
        if default is MISSING:
            return MISSING
        if isinstance(default, str):
            member: object = getattr(task, default, None)
            return member() if callable(member) else default
        if CallableRef.of(default) is not None:
            return invoke_callable(default, task)
        if isinstance(default, _MUTABLE_LITERALS):
            return copy.copy(default)
        return default

    def walk(self) -> Iterator[Attribute]:
        """Yield this attribute and all nested attributes, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    # --- descriptor protocol ---

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is None:
            self.name = name

    def __get__(self, instance: object, owner: type | None = None) -> Any:
        if instance is None:
            return self
        values: dict[str, Any] = instance.__dict__.get("_attribute_values", {})
        try:
            return values[self.accessor_name]
        except KeyError:
            raise AttributeError(
                f"attribute {self.accessor_name!r} of {type(instance).__name__} is not resolved"
            ) from None

    def __set__(self, instance: object, value: Any) -> None:
        raise AttributeError(f"attribute {self.accessor_name!r} is read-only")

    # --- introspection ---

    def to_dict(self) -> dict[str, Any]:
        """Describe the declaration (for CLI output and debugging)."""
        return {
            "name": self.name,
            "accessor": self.accessor_name,
            "required": self.required if isinstance(self.required, bool) else "conditional",
            "types": list(self.types),
            "default": None if self.default is MISSING else repr(self.default),
            "options": sorted(self.options),
            "description": self.description,
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        flag: str = "required" if self.required is True else "optional"
        return f"<Attribute {self.name!r} {flag} types={list(self.types)}>"


class AttributeSet(tuple):  # type: ignore[type-arg]
    """Several attributes declared with one call; expanded when the class is built."""

    __slots__ = ()


def attribute(*names: str, **options: Any) -> Any:
    """Declare one or more attributes.

    Args:
        *names (str): Zero names (take the class attribute name), one name, or
            several names sharing the same options.
        **options (Any): See `Attribute`.

    Returns:
        Any: An `Attribute`, or an `AttributeSet` when several names are given.

    Raises:
        DeclarationError: If ``as_`` is combined with several names.
    """
    if len(names) <= 1:
        return Attribute(names[0] if names else None, **options)
    if options.get("as_"):
        raise DeclarationError("'as_' cannot be used when declaring several attributes")
    children: tuple[Attribute, ...] = tuple(options.pop("children", ()))
    declared: list[Attribute] = []
    for name in names:
        # every member needs its own nested declarations
        fresh_children = [copy.deepcopy(child) for child in children]
        declared.append(Attribute(name, children=fresh_children, **options))
    return AttributeSet(declared)


def required(*names: str, **options: Any) -> Any:
    """Declare required attributes (see `attribute`)."""
    options.setdefault("required", True)
    return attribute(*names, **options)


def optional(*names: str, **options: Any) -> Any:
    """Declare optional attributes (see `attribute`)."""
    options["required"] = False
    return attribute(*names, **options)
