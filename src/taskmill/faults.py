# taskmill:header:start
#
#   project      : TaskMill
#   file         : faults.py
#   file_relpath : src/taskmill/faults.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Typed interruptions carrying the result that triggered them.

`SkippedFault` and `FailedFault` are raised by strict invocations and used
internally to unwind a halted `work()` routine. Every fault exposes the same
data a tolerant caller would get: `result`, `task`, `context` and `chain`.

Matchers narrow faults by origin for `isinstance` checks:

```python
try:
    ProcessOrder.execute_strict(order_id=7)
except FailedFault as fault:
    if isinstance(fault, FailedFault.for_tasks(ChargeCard)):
        notify_billing(fault.result)
    elif isinstance(fault, Fault.matching(lambda r: r.metadata.get("retryable"))):
        schedule_retry(fault.context)
    else:
        raise
```

Matchers are not real superclasses of raised faults, so they work with
`isinstance` but not directly in an ``except`` clause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from taskmill.exceptions import InvalidTransitionError, TaskmillError
from taskmill.locale import translate
from taskmill.status import Status

if TYPE_CHECKING:
    from collections.abc import Callable

    from taskmill.chain import Chain
    from taskmill.context import Context
    from taskmill.result import Result
    from taskmill.task import Task


class _FaultMatcherMeta(type):
    """Metaclass giving matcher classes a predicate-based `isinstance`."""

    _fault_base: type[Fault]
    _fault_predicate: Callable[[Fault], bool]

    def __instancecheck__(cls, instance: object) -> bool:
        return isinstance(instance, cls._fault_base) and bool(cls._fault_predicate(instance))


class Fault(TaskmillError):
    """Base interruption; raised for a skipped or failed result."""

    def __init__(self, result: Result) -> None:
        super().__init__(result.reason or translate("faults.unspecified"))
        self.result: Result = result

    @property
    def task(self) -> Task:
        return self.result.task

    @property
    def context(self) -> Context:
        return self.result.context

    @property
    def chain(self) -> Chain | None:
        return self.result.chain

    @classmethod
    def build(cls, result: Result) -> Fault:
        """Return the fault matching the result's status.

        Raises:
            InvalidTransitionError: If the result is successful.
        """
        if result.status is Status.SKIPPED:
            return SkippedFault(result)
        if result.status is Status.FAILED:
            return FailedFault(result)
        raise InvalidTransitionError("a successful result cannot be raised as a fault")

    @classmethod
    def for_tasks(cls, *task_types: type[Task]) -> type[Fault]:
        """Matcher for faults raised by instances of `task_types`."""
        names: str = ", ".join(t.__name__ for t in task_types)
        return cls._matcher(lambda fault: isinstance(fault.task, task_types), f"for_tasks({names})")

    @classmethod
    def matching(cls, predicate: Callable[[Result], Any]) -> type[Fault]:
        """Matcher for faults whose result satisfies `predicate`."""
        return cls._matcher(lambda fault: predicate(fault.result), "matching(...)")

    @classmethod
    def _matcher(cls, predicate: Callable[[Fault], Any], label: str) -> type[Fault]:
        return _FaultMatcherMeta(
            f"{cls.__name__}.{label}",
            (cls,),
            {"_fault_base": cls, "_fault_predicate": staticmethod(predicate), "__module__": cls.__module__},
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.result!r})"


class SkippedFault(Fault):
    """Raised for a skipped result."""


class FailedFault(Fault):
    """Raised for a failed result."""
