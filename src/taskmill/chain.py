# taskmill:header:start
#
#   project      : TaskMill
#   file         : chain.py
#   file_relpath : src/taskmill/chain.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Thread-scoped trace of the results produced while handling one request.

The first invocation on a thread creates the chain; every invocation that
starts on the same thread while it is alive (nested tasks, workflow members)
appends its result. The chain reports the state and status of its first,
outermost result. The executor clears the thread's chain when the outermost
invocation finishes.

Two threads never share a chain unless one explicitly joins the other's
(`Chain.joined()`), which is what the parallel workflow strategy does for its
worker threads.
"""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from taskmill.config.logging import TaskmillLogger, get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

    from taskmill.result import Result
    from taskmill.status import State, Status

logger: TaskmillLogger = get_logger(__name__)

_local = threading.local()


class Chain:
    """Append-only sequence of results with a unique id."""

    def __init__(self, chain_id: str | None = None) -> None:
        self.id: str = chain_id or str(uuid.uuid4())
        self._results: list[Result] = []
        self._lock = threading.Lock()

    # --- thread-local access ---

    @classmethod
    def current(cls) -> Chain | None:
        """Return this thread's chain, or None."""
        return getattr(_local, "chain", None)

    @classmethod
    def set_current(cls, chain: Chain | None) -> None:
        """Install `chain` as this thread's chain (None removes it)."""
        _local.chain = chain

    @classmethod
    def clear(cls) -> None:
        """Forget this thread's chain."""
        _local.chain = None

    @classmethod
    def build(cls, result: Result) -> Chain:
        """Append `result` to this thread's chain, creating the chain if needed.

        Args:
            result (Result): The result of an invocation that is starting.

        Returns:
            Chain: The chain the result was appended to.
        """
        chain: Chain | None = cls.current()
        if chain is None:
            chain = cls()
            cls.set_current(chain)
            logger.trace("started chain %s", chain.id)
        chain.append(result)
        return chain

    @classmethod
    @contextmanager
    def joined(cls, chain: Chain | None) -> Iterator[Chain | None]:
        """Use `chain` as this thread's chain for the duration of the block.

        Yields:
            Chain | None: The joined chain.
        """
        previous: Chain | None = cls.current()
        cls.set_current(chain)
        try:
            yield chain
        finally:
            cls.set_current(previous)

    # --- sequence ---

    def append(self, result: Result) -> int:
        """Append `result`, bind it to this chain and return its index."""
        with self._lock:
            index: int = len(self._results)
            self._results.append(result)
        result._attach(self, index)
        return index

    @property
    def results(self) -> tuple[Result, ...]:
        """Snapshot of the results, in append order."""
        with self._lock:
            return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[Result]:
        return iter(self.results)

    def __getitem__(self, index: int) -> Result:
        return self.results[index]

    @property
    def first(self) -> Result | None:
        """The outermost result."""
        results = self.results
        return results[0] if results else None

    @property
    def last(self) -> Result | None:
        results = self.results
        return results[-1] if results else None

    @property
    def state(self) -> State | None:
        """State of the outermost result."""
        first = self.first
        return first.state if first is not None else None

    @property
    def status(self) -> Status | None:
        """Status of the outermost result."""
        first = self.first
        return first.status if first is not None else None

    @property
    def outcome(self) -> str | None:
        first = self.first
        return first.outcome if first is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the chain and its results."""
        return {
            "id": self.id,
            "state": self.state.value if self.state is not None else None,
            "status": self.status.value if self.status is not None else None,
            "outcome": self.outcome,
            "results": [r.to_dict() for r in self.results],
        }

    def __repr__(self) -> str:
        return f"<Chain {self.id} results={len(self._results)} status={self.status}>"
