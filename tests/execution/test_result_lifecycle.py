# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_result_lifecycle.py
#   file_relpath : tests/execution/test_result_lifecycle.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Result state machine: transitions, monotonic status, freezing and branching."""

from __future__ import annotations

from typing import Any

import pytest

from taskmill import Result, State, Status, Task, configure
from taskmill.exceptions import ExecutionError, ImmutableError, InvalidTransitionError
from taskmill.faults import FailedFault, SkippedFault


class Noop(Task):
    def work(self) -> None:
        pass


class SoftFail(Task):
    def work(self) -> None:
        self.fail("soft", halt=False)
        self.context.after_fail = True


def test_new_result_is_initialized_success() -> None:
    result: Result = Noop().result

    assert (result.state, result.status) == (State.INITIALIZED, Status.SUCCESS)
    assert result.is_initialized and result.is_success and result.is_good
    assert result.index is None and result.chain is None
    assert result.outcome == "initialized"


def test_successful_run_completes_and_freezes() -> None:
    result = Noop.execute()

    assert result.is_complete and result.is_executed and result.is_success
    assert result.outcome == "success"
    assert result.is_frozen and result.task.is_frozen
    with pytest.raises(ImmutableError):
        result._reason = "changed"  # pylint: disable=protected-access
    with pytest.raises(ImmutableError):
        result.task.extra = 1  # type: ignore[attr-defined]


def test_freeze_can_be_disabled() -> None:
    configure(freeze_results=False)
    result = Noop.execute()
    assert not result.is_frozen


def test_instances_are_single_use() -> None:
    task = Noop()
    task.run()
    with pytest.raises(ExecutionError):
        task.run()


def test_status_never_returns_to_success_or_crosses_over() -> None:
    result: Result = Noop().result
    result.mark_executing()
    with pytest.raises(SkippedFault):
        result.skip("first")

    assert result.is_skipped
    with pytest.raises(InvalidTransitionError):
        result.fail("second", halt=False)
    assert result.is_skipped and result.reason == "first"

    # repeating the current status keeps the original record
    result.skip("again", halt=False)
    assert result.reason == "first"


def test_status_cannot_change_once_executed() -> None:
    configure(freeze_results=False)
    result = Noop.execute()
    with pytest.raises(InvalidTransitionError):
        result.fail("too late", halt=False)


def test_reason_defaults_to_unspecified() -> None:
    result: Result = Noop().result
    with pytest.raises(FailedFault) as excinfo:
        result.fail()
    assert result.reason == "Unspecified"
    assert excinfo.value.result is result
    assert str(excinfo.value) == "Unspecified"


def test_invalid_state_transitions_are_rejected() -> None:
    result: Result = Noop().result
    with pytest.raises(InvalidTransitionError):
        result.mark_complete()
    result.mark_executing()
    result.mark_complete()
    with pytest.raises(InvalidTransitionError):
        result.mark_interrupted()


def test_nonhalting_failure_defaults_to_interrupted() -> None:
    result = SoftFail.execute()

    assert result.context.after_fail is True
    assert (result.state, result.status) == (State.INTERRUPTED, Status.FAILED)


def test_nonhalting_failure_can_complete() -> None:
    class SoftFailComplete(SoftFail, nonhalting_state="complete"):
        pass

    result = SoftFailComplete.execute()

    assert result.context.after_fail is True
    assert (result.state, result.status) == (State.COMPLETE, Status.FAILED)


def test_halting_failure_is_interrupted_even_when_nonhalting_completes() -> None:
    configure(nonhalting_state="complete")

    class HardFail(Task):
        def work(self) -> None:
            self.fail("hard")

    assert HardFail.execute().state is State.INTERRUPTED


def test_iteration_and_pattern_matching() -> None:
    result = Noop.execute()
    state, status = result
    assert (state, status) == (State.COMPLETE, Status.SUCCESS)

    match result:
        case Result(State.COMPLETE, Status.SUCCESS):
            matched = "ok"
        case _:
            matched = "other"
    assert matched == "ok"


def test_on_runs_callbacks_for_matching_predicates() -> None:
    seen: list[str] = []
    result = SoftFail.execute()

    returned = (
        result.on("failed", lambda r: seen.append("failed"))
        .on("bad", lambda r: seen.append("bad"))
        .on("success", lambda r: seen.append("success"))
        .on("interrupted", lambda r: seen.append("interrupted"))
        .on("caused_failure", lambda r: seen.append("caused"))
    )

    assert returned is result
    assert seen == ["failed", "bad", "interrupted", "caused"]
    with pytest.raises(ValueError):
        result.on("unknown", lambda r: None)


def test_to_dict_and_render() -> None:
    result = SoftFail.execute()
    payload: dict[str, Any] = result.to_dict()

    assert payload["task"] == "SoftFail"
    assert payload["state"] == "interrupted"
    assert payload["status"] == "failed"
    assert payload["reason"] == "soft"
    assert payload["index"] == 0
    assert payload["chain_id"] == result.chain.id  # type: ignore[union-attr]
    assert result.render(color=False) == "SoftFail: interrupted failed - soft"
