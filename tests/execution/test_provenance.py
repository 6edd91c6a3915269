# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_provenance.py
#   file_relpath : tests/execution/test_provenance.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Failure provenance across re-thrown results."""

from __future__ import annotations

import pytest

from taskmill import FailedFault, Result, Task
from tests.conftest import mark_integration


class Authorize(Task):
    def work(self) -> None:
        self.fail("card declined", gateway="acme")


class Capture(Task):
    def work(self) -> None:
        self.throw(Authorize.execute(self.context), step="capture")


class Checkout(Task):
    def work(self) -> None:
        self.throw(Capture.execute(self.context))


@mark_integration
def test_origin_is_forwarded_transitively() -> None:
    z: Result = Checkout.execute()
    y: Result | None = z.threw_failure
    assert y is not None
    x: Result | None = y.threw_failure
    assert x is not None

    assert isinstance(x.task, Authorize)
    assert isinstance(y.task, Capture)
    assert z.caused_failure is x
    assert y.caused_failure is x
    assert x.caused_failure is x

    assert x.is_caused_failure and not x.is_thrown_failure
    assert y.is_threw_failure and y.is_thrown_failure
    assert z.is_thrown_failure and not z.is_caused_failure


def test_thrown_failure_points_at_the_result_received() -> None:
    z: Result = Checkout.execute()
    y: Result | None = z.thrown_failure
    assert y is not None and isinstance(y.task, Capture)
    x: Result | None = y.thrown_failure
    assert x is not None and isinstance(x.task, Authorize)

    assert x.thrown_failure is None
    assert Authorize.execute().thrown_failure is None


def test_throw_copies_status_reason_and_metadata() -> None:
    z: Result = Checkout.execute()

    assert z.is_failed and z.is_interrupted
    assert z.reason == "card declined"
    assert dict(z.metadata) == {"gateway": "acme", "step": "capture"}
    assert z.outcome == "interrupted"


def test_throwing_a_success_is_a_noop() -> None:
    class Fine(Task):
        def work(self) -> None:
            pass

    class Wrapper(Task):
        def work(self) -> None:
            self.throw(Fine.execute())
            self.context.continued = True

    result = Wrapper.execute()
    assert result.is_success
    assert result.context.continued is True


def test_throwing_a_skip_skips() -> None:
    class Skipper(Task):
        def work(self) -> None:
            self.skip("later")

    class Wrapper(Task):
        def work(self) -> None:
            self.throw(Skipper.execute())

    result = Wrapper.execute()
    assert result.is_skipped
    assert result.reason == "later"
    assert result.threw_failure is None


def test_throw_requires_a_result() -> None:
    with pytest.raises(TypeError):
        Authorize().throw("nope")  # type: ignore[arg-type]


@mark_integration
def test_strict_fault_escaping_work_is_thrown_with_provenance() -> None:
    class StrictCapture(Task):
        def work(self) -> None:
            Authorize.execute_strict(self.context)

    result = StrictCapture.execute()

    assert result.is_failed and result.is_interrupted
    assert isinstance(result.cause, FailedFault)
    assert result.threw_failure is result.cause.result
    assert isinstance(result.caused_failure.task, Authorize)  # type: ignore[union-attr]


def test_provenance_appears_in_serialized_result() -> None:
    payload = Checkout.execute().to_dict()

    assert payload["caused_failure"]["task"] == "Authorize"
    assert payload["threw_failure"]["task"] == "Capture"
