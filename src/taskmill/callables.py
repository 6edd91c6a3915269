# taskmill:header:start
#
#   project      : TaskMill
#   file         : callables.py
#   file_relpath : src/taskmill/callables.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Single dispatcher for the callable references used in declarations.

Sources, defaults, transforms, conditions, callbacks and required-flags may
each be given as:

- a `str` naming a routine on the receiver (``NAMED_METHOD``);
- a function, lambda or bound method (``INLINE_FUNCTION``);
- any other object implementing ``__call__`` (``INVOCABLE_OBJECT``).

Inline functions and invocable objects are called with the receiver as their
first argument; named routines are looked up on the receiver and called with
the remaining arguments only.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any

from taskmill.exceptions import UndefinedSourceError


class CallableKind(Enum):
    """Kinds of callable references."""

    NAMED_METHOD = "named_method"
    INLINE_FUNCTION = "inline_function"
    INVOCABLE_OBJECT = "invocable_object"


@dataclass(frozen=True)
class CallableRef:
    """Tagged callable reference."""

    kind: CallableKind
    target: Any

    @classmethod
    def of(cls, value: object) -> CallableRef | None:
        """Classify `value`, returning None when it is not callable at all.

        Classes are not treated as callables: a class given as a default or
        source is a literal value.
        """
        if isinstance(value, CallableRef):
            return value
        if isinstance(value, str):
            return cls(CallableKind.NAMED_METHOD, value)
        if inspect.isclass(value):
            return None
        if inspect.isfunction(value) or inspect.ismethod(value) or inspect.isbuiltin(value):
            return cls(CallableKind.INLINE_FUNCTION, value)
        if callable(value):
            return cls(CallableKind.INVOCABLE_OBJECT, value)
        return None

    @classmethod
    def named(cls, name: str) -> CallableRef:
        """Reference to the routine `name` on the receiver."""
        return cls(CallableKind.NAMED_METHOD, name)

    @property
    def label(self) -> str:
        """Short description for logs."""
        if self.kind is CallableKind.NAMED_METHOD:
            return str(self.target)
        return getattr(self.target, "__qualname__", type(self.target).__qualname__)


def invoke_callable(ref: CallableRef | object, receiver: object, *args: Any) -> Any:
    """Invoke a callable reference against `receiver`.

    Args:
        ref (CallableRef | object): A `CallableRef`, or a raw value classified
            with `CallableRef.of()`.
        receiver (object): The object the reference is resolved against
            (usually a task instance).
        *args (Any): Extra positional arguments.

    Returns:
        Any: The callable's return value. A named attribute that is not callable
        is returned as is.

    Raises:
        UndefinedSourceError: If a named routine does not exist on `receiver`.
        TypeError: If `ref` is not callable.
    """
    resolved: CallableRef | None = CallableRef.of(ref)
    if resolved is None:
        raise TypeError(f"{ref!r} is not a callable reference")

    if resolved.kind is CallableKind.NAMED_METHOD:
        try:
            member: Any = getattr(receiver, resolved.target)
        except AttributeError:
            raise UndefinedSourceError(resolved.target) from None
        return member(*args) if callable(member) else member

    return resolved.target(receiver, *args)


def evaluate_condition(
    receiver: object,
    *args: Any,
    if_: object = None,
    unless: object = None,
) -> bool:
    """Evaluate an ``if``/``unless`` guard pair.

    Each side may be None (no guard), a boolean, or a callable reference.

    Args:
        receiver (object): Object the guards are evaluated against.
        *args (Any): Extra positional arguments passed to callable guards.
        if_ (object): Guard that must be truthy.
        unless (object): Guard that must be falsy.

    Returns:
        bool: True when both guards allow.
    """
    if if_ is not None and not _truthy(if_, receiver, args):
        return False
    return not (unless is not None and _truthy(unless, receiver, args))


def _truthy(guard: object, receiver: object, args: tuple[Any, ...]) -> bool:
    if isinstance(guard, bool):
        return guard
    return bool(invoke_callable(guard, receiver, *args))
