# taskmill:header:start
#
#   project      : TaskMill
#   file         : workflow.py
#   file_relpath : src/taskmill/workflow.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Workflows: tasks whose routine runs an ordered list of member tasks.

Members share the workflow's context, so later members see what earlier ones
wrote. After each member the workflow compares the member's status with the
effective breakpoints (the member's own, else its group's, else the
``workflow_breakpoints`` setting) and, on a match, throws the member's result
and stops.

```python
class PlaceOrder(Workflow):
    tasks = (ValidateCart, ReserveStock)

PlaceOrder.process(ChargeCard, member(SendReceipt, unless="is_gift"))
PlaceOrder.process(
    NotifyWarehouse,
    NotifyAnalytics,
    strategy="parallel",
    breakpoints=(),
)
```

The parallel strategy runs a group's members on worker threads. The context
is read-only while they run, so every value they need must already be there.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from taskmill.callables import evaluate_condition
from taskmill.chain import Chain
from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.config.settings import parse_breakpoints
from taskmill.exceptions import DeclarationError
from taskmill.task import Task

if TYPE_CHECKING:
    from collections.abc import Iterable

    from taskmill.result import Result
    from taskmill.status import Status

logger: TaskmillLogger = get_logger(__name__)


class Strategy(str, Enum):
    """How the members of a group are run."""

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


def _breakpoints(raw: object) -> frozenset[Status] | None:
    return None if raw is None else parse_breakpoints(raw, key="breakpoints")


@dataclass(frozen=True)
class Member:
    """A member task with its own guards and breakpoints."""

    task_type: type[Task]
    if_: object = None
    unless: object = None
    breakpoints: frozenset[Status] | None = None

    def should_run(self, workflow: Workflow) -> bool:
        return evaluate_condition(workflow, if_=self.if_, unless=self.unless)


def member(
    task_type: type[Task],
    *,
    if_: object = None,
    unless: object = None,
    breakpoints: object = None,
) -> Member:
    """Declare a workflow member with guards or breakpoints of its own.

    Raises:
        DeclarationError: If `task_type` is not a `Task` subclass.
    """
    if not (isinstance(task_type, type) and issubclass(task_type, Task)):
        raise DeclarationError(f"workflow members must be Task subclasses, got {task_type!r}")
    return Member(task_type, if_=if_, unless=unless, breakpoints=_breakpoints(breakpoints))


@dataclass(frozen=True)
class Group:
    """Members declared together, sharing guards, breakpoints and a strategy."""

    members: tuple[Member, ...]
    if_: object = None
    unless: object = None
    breakpoints: frozenset[Status] | None = None
    strategy: Strategy = Strategy.SEQUENTIAL
    max_workers: int | None = None

    @classmethod
    def build(
        cls,
        entries: Iterable[object],
        *,
        if_: object = None,
        unless: object = None,
        breakpoints: object = None,
        strategy: Strategy | str = Strategy.SEQUENTIAL,
        max_workers: int | None = None,
    ) -> Group:
        members: list[Member] = [
            entry if isinstance(entry, Member) else member(entry)  # type: ignore[arg-type]
            for entry in entries
        ]
        if not members:
            raise DeclarationError("a workflow group needs at least one member")
        try:
            parsed: Strategy = Strategy(strategy)
        except ValueError:
            raise DeclarationError(f"unknown workflow strategy {strategy!r}") from None
        return cls(
            tuple(members),
            if_=if_,
            unless=unless,
            breakpoints=_breakpoints(breakpoints),
            strategy=parsed,
            max_workers=max_workers,
        )


class Workflow(Task):
    """A task whose routine runs its declared groups of members in order.

    Subclasses declare members with the ``tasks`` class attribute and/or
    `process()`; they must not override `work()`.
    """

    tasks: ClassVar[tuple[Any, ...]] = ()
    _groups: ClassVar[tuple[Group, ...]] = ()

    def __init_subclass__(cls, **settings: Any) -> None:
        super().__init_subclass__(**settings)
        if "work" in vars(cls):
            raise DeclarationError(f"{cls.__qualname__}: a workflow runs its members and cannot override work()")
        groups: tuple[Group, ...] = cls._groups
        own_tasks: object = vars(cls).get("tasks")
        if own_tasks:
            groups = (*groups, Group.build(own_tasks))  # type: ignore[arg-type]
        cls._groups = groups

    @classmethod
    def process(
        cls,
        *members: type[Task] | Member,
        if_: object = None,
        unless: object = None,
        breakpoints: object = None,
        strategy: Strategy | str = Strategy.SEQUENTIAL,
        max_workers: int | None = None,
    ) -> None:
        """Append a group of members.

        Args:
            *members (type[Task] | Member): Task types, or `member()` declarations.
            if_ (object): Guard evaluated against the workflow before the group.
            unless (object): Guard evaluated against the workflow before the group.
            breakpoints (object): Statuses that stop the workflow for this group.
            strategy (Strategy | str): ``sequential`` (default) or ``parallel``.
            max_workers (int | None): Thread pool size for the parallel strategy.
        """
        group: Group = Group.build(
            members,
            if_=if_,
            unless=unless,
            breakpoints=breakpoints,
            strategy=strategy,
            max_workers=max_workers,
        )
        cls._groups = (*cls._groups, group)
        logger.debug(
            "%s: added %s group %s",
            cls.__qualname__,
            group.strategy.value,
            [m.task_type.__name__ for m in group.members],
        )

    @classmethod
    def groups(cls) -> tuple[Group, ...]:
        return cls._groups

    def work(self) -> None:
        default: frozenset[Status] = type(self).settings().workflow_breakpoints
        for group in type(self)._groups:
            if not evaluate_condition(self, if_=group.if_, unless=group.unless):
                logger.debug("%s: group guard not satisfied, skipping", type(self).__name__)
                continue
            breakpoints: frozenset[Status] = group.breakpoints if group.breakpoints is not None else default
            if group.strategy is Strategy.PARALLEL:
                self._run_parallel(group, breakpoints)
            else:
                self._run_sequential(group, breakpoints)

    # --- strategies ---

    def _run_sequential(self, group: Group, breakpoints: frozenset[Status]) -> None:
        for entry in group.members:
            if not entry.should_run(self):
                logger.debug("%s: skipping member %s", type(self).__name__, entry.task_type.__name__)
                continue
            result: Result = entry.task_type(self.context).run()
            self._check_breakpoint(entry, result, breakpoints)

    def _run_parallel(self, group: Group, breakpoints: frozenset[Status]) -> None:
        entries: list[Member] = [entry for entry in group.members if entry.should_run(self)]
        if not entries:
            return
        chain: Chain | None = Chain.current()
        with self.context.read_only(), ThreadPoolExecutor(max_workers=group.max_workers) as pool:
            futures = [pool.submit(self._run_joined, chain, entry) for entry in entries]
            results: list[Result] = [future.result() for future in futures]
        for entry, result in zip(entries, results):
            self._check_breakpoint(entry, result, breakpoints)

    def _run_joined(self, chain: Chain | None, entry: Member) -> Result:
        with Chain.joined(chain):
            return entry.task_type(self.context).run()

    def _check_breakpoint(self, entry: Member, result: Result, breakpoints: frozenset[Status]) -> None:
        effective: frozenset[Status] = entry.breakpoints if entry.breakpoints is not None else breakpoints
        if result.status in effective:
            logger.debug(
                "%s: member %s stopped the workflow (%s)",
                type(self).__name__,
                entry.task_type.__name__,
                result.status,
            )
            self.throw(result)
