# taskmill:header:start
#
#   project      : TaskMill
#   file         : result.py
#   file_relpath : src/taskmill/result.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Outcome record of one task invocation.

A `Result` starts ``initialized``/``success``, moves to ``executing`` when the
invocation starts, and ends ``complete`` or ``interrupted``. The status only
ever moves away from ``success``: to ``skipped`` or to ``failed``, never back
and never between the two. Once finalized the record is frozen.

Branching on a result:

```python
result = CreateUser.execute(email="a@b.c")

state, status = result                       # iteration yields state, status
match result:
    case Result(State.COMPLETE, Status.SUCCESS):
        ...
    case Result(_, Status.FAILED):
        log.warning(result.reason)

result.on("failed", alert).on("good", record)  # fluent hooks
```

Failure provenance: a result that fails on its own points `caused_failure`
at itself. A result that re-throws another failed result keeps the original
origin in `caused_failure` and the result it re-threw in `threw_failure`.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.core.enum_mixins import norm_token
from taskmill.exceptions import ImmutableError, InvalidTransitionError
from taskmill.faults import Fault
from taskmill.locale import translate
from taskmill.status import FINAL_STATES, State, Status

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from taskmill.chain import Chain
    from taskmill.context import Context
    from taskmill.task import Task

logger: TaskmillLogger = get_logger(__name__)


class Result:
    """State, status, reason and metadata of one invocation."""

    __match_args__ = ("state", "status")

    def __init__(self, task: Task) -> None:
        self._task: Task = task
        self._state: State = State.INITIALIZED
        self._status: Status = Status.SUCCESS
        self._reason: str | None = None
        self._metadata: dict[str, Any] = {}
        self._cause: BaseException | None = None
        self._caused_failure: Result | None = None
        self._threw_failure: Result | None = None
        self._halted: bool = False
        self._chain: Chain | None = None
        self._index: int | None = None
        self._frozen: bool = False

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_frozen", False):
            raise ImmutableError(f"cannot modify {name!r}: result is frozen")
        object.__setattr__(self, name, value)

    # --- accessors ---

    @property
    def task(self) -> Task:
        return self._task

    @property
    def context(self) -> Context:
        return self._task.context

    @property
    def chain(self) -> Chain | None:
        return self._chain

    @property
    def index(self) -> int | None:
        """Position in the chain (None until the invocation starts)."""
        return self._index

    @property
    def state(self) -> State:
        return self._state

    @property
    def status(self) -> Status:
        return self._status

    @property
    def reason(self) -> str | None:
        return self._reason

    @property
    def metadata(self) -> Mapping[str, Any]:
        """Read-only view of the metadata attached when halting."""
        return MappingProxyType(self._metadata)

    @property
    def cause(self) -> BaseException | None:
        """Exception behind the current status, if any."""
        return self._cause

    @property
    def outcome(self) -> str:
        """The state while initialized or for thrown failures, else the status."""
        if self.is_initialized or self.is_thrown_failure:
            return self._state.value
        return self._status.value

    @property
    def caused_failure(self) -> Result | None:
        """The result that originated the failure (None unless failed)."""
        return self._caused_failure if self.is_failed else None

    @property
    def threw_failure(self) -> Result | None:
        """The result this one re-threw (None unless failed by a throw)."""
        return self._threw_failure if self.is_failed else None

    @property
    def thrown_failure(self) -> Result | None:
        """The result this one received its failure from (None unless a thrown failure)."""
        return self._threw_failure if self.is_thrown_failure else None

    # --- predicates ---

    @property
    def is_initialized(self) -> bool:
        return self._state is State.INITIALIZED

    @property
    def is_executing(self) -> bool:
        return self._state is State.EXECUTING

    @property
    def is_complete(self) -> bool:
        return self._state is State.COMPLETE

    @property
    def is_interrupted(self) -> bool:
        return self._state is State.INTERRUPTED

    @property
    def is_executed(self) -> bool:
        return self._state in FINAL_STATES

    @property
    def is_success(self) -> bool:
        return self._status is Status.SUCCESS

    @property
    def is_skipped(self) -> bool:
        return self._status is Status.SKIPPED

    @property
    def is_failed(self) -> bool:
        return self._status is Status.FAILED

    @property
    def is_good(self) -> bool:
        """Not failed (success or skipped)."""
        return not self.is_failed

    @property
    def is_bad(self) -> bool:
        """Not successful (skipped or failed)."""
        return not self.is_success

    @property
    def is_caused_failure(self) -> bool:
        """This invocation originated its failure."""
        return self.is_failed and self._caused_failure is self

    @property
    def is_threw_failure(self) -> bool:
        """This invocation re-threw another invocation's failure."""
        return self.is_failed and self._threw_failure is not None

    @property
    def is_thrown_failure(self) -> bool:
        """This invocation received its failure from elsewhere."""
        return self.is_failed and not self.is_caused_failure

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # --- lifecycle transitions (driven by the executor) ---

    def mark_executing(self) -> None:
        if self._state is State.EXECUTING:
            return
        if self._state is not State.INITIALIZED:
            raise InvalidTransitionError(f"cannot move to executing from {self._state}")
        self._state = State.EXECUTING
        logger.trace("%s: initialized -> executing", self._label())

    def mark_complete(self) -> None:
        if self._state is State.COMPLETE:
            return
        if self._state is not State.EXECUTING:
            raise InvalidTransitionError(f"cannot move to complete from {self._state}")
        self._state = State.COMPLETE
        logger.trace("%s: executing -> complete", self._label())

    def mark_interrupted(self) -> None:
        if self._state is State.INTERRUPTED:
            return
        if self._state is State.COMPLETE:
            raise InvalidTransitionError("cannot move to interrupted from complete")
        previous: State = self._state
        self._state = State.INTERRUPTED
        logger.trace("%s: %s -> interrupted", self._label(), previous)

    def mark_executed(self, nonhalting_state: State = State.INTERRUPTED) -> None:
        """Move to the final state matching the status.

        Args:
            nonhalting_state (State): Final state for a skip/fail recorded with
                ``halt=False`` (the routine then returned normally).
        """
        if self.is_executed:
            return
        if self.is_initialized:
            self.mark_executing()
        if self.is_success:
            self.mark_complete()
        elif self._halted or nonhalting_state is State.INTERRUPTED:
            self.mark_interrupted()
        else:
            self.mark_complete()

    # --- halts ---

    def skip(
        self,
        reason: str | None = None,
        *,
        halt: bool = True,
        cause: BaseException | None = None,
        **metadata: Any,
    ) -> None:
        """Mark the result skipped and, unless ``halt=False``, stop the routine.

        Raises:
            SkippedFault: When halting.
            InvalidTransitionError: If the result already failed.
        """
        self._set_status(Status.SKIPPED, reason, cause, metadata, halt=halt)

    def fail(
        self,
        reason: str | None = None,
        *,
        halt: bool = True,
        cause: BaseException | None = None,
        **metadata: Any,
    ) -> None:
        """Mark the result failed and, unless ``halt=False``, stop the routine.

        Raises:
            FailedFault: When halting.
            InvalidTransitionError: If the result was already skipped.
        """
        self._set_status(Status.FAILED, reason, cause, metadata, halt=halt)

    def throw(
        self,
        other: Result,
        *,
        halt: bool = True,
        cause: BaseException | None = None,
        **metadata: Any,
    ) -> None:
        """Take over the status, reason and metadata of another result.

        A successful `other` is a no-op. For a failed `other`, the failure origin
        is forwarded (``other.caused_failure`` or `other` itself) and `other` is
        recorded as `threw_failure`.

        Args:
            other (Result): The result to propagate.
            halt (bool): Stop the routine after propagating.
            cause (BaseException | None): Overrides the cause taken from `other`.
            **metadata (Any): Merged over `other`'s metadata.

        Raises:
            TypeError: If `other` is not a `Result`.
        """
        if not isinstance(other, Result):
            raise TypeError(f"can only throw a Result, got {type(other).__name__}")
        if other.is_success:
            return
        if other.is_failed and self.is_success:
            self._caused_failure = other._caused_failure or other
            self._threw_failure = other
        self._set_status(
            other.status,
            other.reason,
            cause if cause is not None else other.cause,
            {**other.metadata, **metadata},
            halt=halt,
        )

    def halt(self) -> None:
        """Raise the fault for a skipped or failed result; no-op on success."""
        if self.is_success:
            return
        self._halted = True
        raise Fault.build(self)

    def _set_status(
        self,
        status: Status,
        reason: str | None,
        cause: BaseException | None,
        metadata: Mapping[str, Any],
        *,
        halt: bool,
    ) -> None:
        if self._status is status:
            if halt:
                self.halt()
            return
        if not self.is_success:
            raise InvalidTransitionError(f"cannot move to {status} from {self._status}")
        if self.is_executed:
            raise InvalidTransitionError(f"cannot change the status of a {self._state} result")

        self._status = status
        self._reason = reason or translate("faults.unspecified")
        self._metadata = dict(metadata)
        self._cause = cause
        if status is Status.FAILED and self._caused_failure is None:
            self._caused_failure = self
        logger.debug("%s: success -> %s (%s)", self._label(), status, self._reason)

        if halt:
            self.halt()

    # --- chain and freezing ---

    def _attach(self, chain: Chain, index: int) -> None:
        self._chain = chain
        self._index = index

    def freeze(self) -> None:
        """Make the record immutable."""
        object.__setattr__(self, "_frozen", True)

    # --- hooks and serialization ---

    def on(self, predicate: str, callback: Callable[[Result], Any]) -> Result:
        """Call `callback` with this result when `predicate` holds.

        Args:
            predicate (str): A state, a status, or one of ``executed``, ``good``,
                ``bad``, ``caused_failure``, ``threw_failure``, ``thrown_failure``.
            callback (Callable[[Result], Any]): Called with this result.

        Returns:
            Result: This result, for chaining.

        Raises:
            ValueError: On an unknown predicate name.
        """
        attr: str = f"is_{norm_token(predicate)}"
        if not isinstance(getattr(type(self), attr, None), property):
            raise ValueError(f"unknown result predicate {predicate!r}")
        if getattr(self, attr):
            callback(self)
        return self

    def __iter__(self) -> Iterator[Any]:
        yield self._state
        yield self._status

    def _label(self) -> str:
        return f"{type(self._task).__name__}[{self._index}]"

    def _summary(self) -> dict[str, Any]:
        return {
            "task": type(self._task).__qualname__,
            "id": self._task.id,
            "index": self._index,
            "state": self._state.value,
            "status": self._status.value,
            "reason": self._reason,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and JSON output."""
        payload: dict[str, Any] = {
            "task": type(self._task).__qualname__,
            "id": self._task.id,
            "index": self._index,
            "chain_id": self._chain.id if self._chain is not None else None,
            "state": self._state.value,
            "status": self._status.value,
            "outcome": self.outcome,
            "reason": self._reason,
            "metadata": dict(self._metadata),
        }
        if self._cause is not None:
            payload["cause"] = f"{type(self._cause).__name__}: {self._cause}"
        caused: Result | None = self.caused_failure
        if caused is not None and caused is not self:
            payload["caused_failure"] = caused._summary()
        threw: Result | None = self.threw_failure
        if threw is not None:
            payload["threw_failure"] = threw._summary()
        return payload

    def render(self, *, color: bool = True) -> str:
        """One-line summary for terminals."""
        parts: list[str] = [
            f"{type(self._task).__name__}:",
            self._state.render(color=color),
            self._status.render(color=color),
        ]
        if self._reason:
            parts.append(f"- {self._reason}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"<Result {type(self._task).__name__} index={self._index} "
            f"state={self._state.value} status={self._status.value}>"
        )
