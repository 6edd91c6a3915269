# taskmill:header:start
#
#   project      : TaskMill
#   file         : executor.py
#   file_relpath : src/taskmill/executor.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Drive one task instance through its lifecycle.

Steps of one invocation:

1. Reject instances that already ran, then append the result to the thread's
   `Chain`.
2. Inside the task type's middlewares: run ``before_validation`` callbacks,
   move to ``executing``, resolve attributes (aggregate failures end the
   invocation as failed with reason ``Invalid``), run ``before_execution``
   callbacks, call `work()` and check the declared ``returns``.
3. Capture interruptions: the task's own fault ends the routine; a fault
   raised by another invocation is re-thrown with provenance; any other error
   becomes a failure whose ``cause`` is the original exception.
4. Finalize the state, run the state/status callbacks, log the result, freeze
   it, and clear the chain when this was the outermost invocation.

Declaration errors are never captured. In strict mode an uncontrolled error
propagates unchanged once the result is finalized, and a breakpoint status
raises the result's fault.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from taskmill.attributes.resolver import AttributeResolver
from taskmill.chain import Chain
from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.errors import ErrorSet
from taskmill.exceptions import DeclarationError, ExecutionError
from taskmill.faults import Fault
from taskmill.locale import translate

if TYPE_CHECKING:
    from taskmill.config.settings import Settings
    from taskmill.hooks import CallbackRegistry
    from taskmill.result import Result
    from taskmill.task import Task

logger: TaskmillLogger = get_logger(__name__)


class Executor:
    """Runs one task instance.

    Args:
        task (Task): The instance to run.
    """

    def __init__(self, task: Task) -> None:
        self.task: Task = task
        self.result: Result = task.result
        self.settings: Settings = type(task).settings()
        self._fault: Fault | None = None
        self._uncontrolled: Exception | None = None

    def execute(self, *, strict: bool = False) -> Result:
        """Run the task and return its finalized result.

        Args:
            strict (bool): Raise instead of returning on a breakpoint status or
                an uncontrolled error.

        Returns:
            Result: The finalized result.

        Raises:
            ExecutionError: If the instance already ran.
            DeclarationError: On programmer errors surfacing at run time.
            Fault: In strict mode, when the status is a task breakpoint.
        """
        if not self.result.is_initialized:
            raise ExecutionError(f"{type(self.task).__name__} instance {self.task.id} already ran")

        Chain.build(self.result)
        outermost: bool = self.result.index == 0
        try:
            type(self.task).middlewares().wrap(self._perform)(self.task)
            self._finalize()
        finally:
            if outermost:
                Chain.clear()

        if strict:
            self._raise_if_breakpoint()
        return self.result

    # --- steps ---

    def _perform(self, task: Task) -> Result:
        result: Result = task.result
        callbacks: CallbackRegistry = type(task).callbacks()
        try:
            callbacks.run("before_validation", task)
            result.mark_executing()
            self._resolve_attributes()
            callbacks.run("after_validation", task)
            callbacks.run("before_execution", task)
            task.work()
            self._verify_returns()
            callbacks.run("after_execution", task)
        except DeclarationError:
            raise
        except Fault as exc:
            self._fault = exc
            if exc.result is not result:
                if result.is_success:
                    result.throw(exc.result, halt=False, cause=exc)
                result.mark_interrupted()
        except Exception as exc:
            self._uncontrolled = exc
            if result.is_success:
                result.fail(f"[{type(exc).__name__}] {exc}", halt=False, cause=exc)
            result.mark_interrupted()
            self._log_uncontrolled(exc)

        result.mark_executed(self.settings.nonhalting_state)
        self._run_post_callbacks(task, callbacks)
        return result

    def _resolve_attributes(self) -> None:
        errors: ErrorSet = AttributeResolver(self.task).resolve_all(type(self.task).attribute_registry())
        if errors:
            self.result.fail(translate("faults.invalid"), errors=errors.to_payload())

    def _verify_returns(self) -> None:
        if not self.result.is_success:
            return
        missing: ErrorSet = ErrorSet()
        for name in type(self.task).returns:
            if name not in self.task.context:
                missing.add(name, translate("returns.missing"))
        if missing:
            self.result.fail(translate("faults.invalid"), errors=missing.to_payload())

    def _run_post_callbacks(self, task: Task, callbacks: CallbackRegistry) -> None:
        result: Result = task.result
        callbacks.run(f"on_{result.state.value}", task)
        if result.is_executed:
            callbacks.run("on_executed", task)
        callbacks.run(f"on_{result.status.value}", task)
        if result.is_good:
            callbacks.run("on_good", task)
        if result.is_bad:
            callbacks.run("on_bad", task)

    def _finalize(self) -> None:
        # a middleware may return without calling the routine
        self.result.mark_executed(self.settings.nonhalting_state)
        if self.settings.log_results:
            logger.info("%s", self.result.to_dict())
        if self.settings.freeze_results:
            self.task.freeze()

    def _log_uncontrolled(self, exc: Exception) -> None:
        name: str = type(self.task).__name__
        logger.warning("%s: uncontrolled %s: %s", name, type(exc).__name__, exc)
        if self.settings.backtrace:
            logger.error("%s: traceback of %s", name, type(exc).__name__, exc_info=exc)

    def _raise_if_breakpoint(self) -> None:
        if self._uncontrolled is not None:
            raise self._uncontrolled
        if self.result.status not in self.settings.task_breakpoints:
            return
        fault: Fault | None = self._fault
        if fault is not None and fault.result is self.result:
            raise fault
        raise Fault.build(self.result) from fault
