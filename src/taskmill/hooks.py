# taskmill:header:start
#
#   project      : TaskMill
#   file         : hooks.py
#   file_relpath : src/taskmill/hooks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Callback and middleware registries attached to task types.

Callbacks run at fixed interception points of an invocation. Middlewares wrap
the whole invocation and must return the `Result` they get from
``call_next``:

```python
def timing(task, call_next):
    started = time.perf_counter()
    result = call_next(task)
    logger.info("%s took %.3fs", task, time.perf_counter() - started)
    return result

class Charge(Task):
    def work(self) -> None: ...

Charge.register("middleware", timing)
Charge.register("callback", "on_failed", "notify_billing", unless="is_test")
```

Each task type owns a copy of its parent's registries, so registrations on a
subclass never reach the parent.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from taskmill.callables import CallableRef, evaluate_condition, invoke_callable
from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.core.enum_mixins import norm_token
from taskmill.exceptions import DeclarationError, UnknownCallbackError
from taskmill.status import State, Status

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from taskmill.result import Result
    from taskmill.task import Task

logger: TaskmillLogger = get_logger(__name__)

CALLBACK_KINDS: Final[tuple[str, ...]] = (
    "before_validation",
    "after_validation",
    "before_execution",
    "after_execution",
    *(f"on_{state.value}" for state in (State.COMPLETE, State.INTERRUPTED)),
    "on_executed",
    *(f"on_{status.value}" for status in Status),
    "on_good",
    "on_bad",
)


def check_callback_kind(kind: str) -> str:
    """Return the normalized kind, raising `UnknownCallbackError` when unknown."""
    normalized: str = norm_token(kind)
    if normalized not in CALLBACK_KINDS:
        raise UnknownCallbackError(kind)
    return normalized


@dataclass(frozen=True)
class Callback:
    """One registered callback with its guards."""

    target: object
    if_: object = None
    unless: object = None

    def __call__(self, task: Task) -> None:
        if evaluate_condition(task, if_=self.if_, unless=self.unless):
            invoke_callable(self.target, task)


class CallbackRegistry:
    """Callbacks of one task type, grouped by kind in registration order."""

    def __init__(self, entries: dict[str, list[Callback]] | None = None) -> None:
        self._entries: dict[str, list[Callback]] = entries or {}

    def copy(self) -> CallbackRegistry:
        return CallbackRegistry({kind: list(callbacks) for kind, callbacks in self._entries.items()})

    def register(self, kind: str, *targets: object, if_: object = None, unless: object = None) -> None:
        """Register callables for `kind`.

        Args:
            kind (str): One of `CALLBACK_KINDS`.
            *targets (object): Routine names, functions or invocable objects.
            if_ (object): Guard that must hold for the callbacks to run.
            unless (object): Guard that must not hold for the callbacks to run.

        Raises:
            UnknownCallbackError: If `kind` is unknown.
            DeclarationError: If a target is not a callable reference.
        """
        normalized: str = check_callback_kind(kind)
        for target in targets:
            if CallableRef.of(target) is None:
                raise DeclarationError(f"callback {normalized!r}: {target!r} is not callable")
            self._entries.setdefault(normalized, []).append(Callback(target, if_=if_, unless=unless))
        logger.debug("registered %d %s callback(s)", len(targets), normalized)

    def deregister(self, kind: str, target: object = None) -> bool:
        """Remove every callback of `kind`, or only those registered for `target`."""
        normalized: str = check_callback_kind(kind)
        callbacks: list[Callback] = self._entries.get(normalized, [])
        kept: list[Callback] = [] if target is None else [cb for cb in callbacks if cb.target != target]
        self._entries[normalized] = kept
        return len(kept) != len(callbacks)

    def get(self, kind: str) -> tuple[Callback, ...]:
        return tuple(self._entries.get(check_callback_kind(kind), ()))

    def run(self, kind: str, task: Task) -> None:
        """Run the callbacks registered for `kind` against `task`."""
        callbacks: tuple[Callback, ...] = self.get(kind)
        if callbacks:
            logger.trace("%s: running %d %s callback(s)", type(task).__name__, len(callbacks), kind)
        for callback in callbacks:
            callback(task)

    def __len__(self) -> int:
        return sum(len(callbacks) for callbacks in self._entries.values())


@dataclass(frozen=True)
class Middleware:
    """One registered middleware and the options it is built with."""

    target: Any
    options: dict[str, Any] = field(default_factory=dict)

    def build(self) -> Callable[[Task, Callable[[Task], Result]], Result]:
        """Instantiate class middlewares with their options; bind options to functions."""
        if inspect.isclass(self.target):
            return self.target(**self.options)
        if not self.options:
            return self.target
        options: dict[str, Any] = self.options
        target: Any = self.target
        return lambda task, call_next: target(task, call_next, **options)


class MiddlewareRegistry:
    """Ordered middlewares of one task type; the first registered is outermost."""

    def __init__(self, entries: list[Middleware] | None = None) -> None:
        self._entries: list[Middleware] = entries or []

    def copy(self) -> MiddlewareRegistry:
        return MiddlewareRegistry(list(self._entries))

    def register(self, target: object, **options: Any) -> None:
        """Append a middleware.

        Args:
            target (object): A callable ``(task, call_next) -> Result``, or a
                class whose instances are such callables.
            **options (Any): Constructor keywords for classes, extra keywords
                for functions.

        Raises:
            DeclarationError: If `target` is not callable.
        """
        if not callable(target):
            raise DeclarationError(f"middleware {target!r} is not callable")
        self._entries.append(Middleware(target, dict(options)))
        logger.debug("registered middleware %r", target)

    def deregister(self, target: object) -> bool:
        """Remove every registration of `target`."""
        before: int = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.target is not target]
        return len(self._entries) != before

    def wrap(self, call: Callable[[Task], Result]) -> Callable[[Task], Result]:
        """Wrap `call` in the registered middlewares, outermost first."""
        wrapped: Callable[[Task], Result] = call
        for entry in reversed(self._entries):
            wrapped = _bind(entry.build(), wrapped)
        return wrapped

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(list(self._entries))


def _bind(
    middleware: Callable[[Task, Callable[[Task], Result]], Result],
    call_next: Callable[[Task], Result],
) -> Callable[[Task], Result]:
    def call(task: Task) -> Result:
        return middleware(task, call_next)

    return call
