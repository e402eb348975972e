import threading

import pytest

from codecoach_core.utils.fanout import run_all


def test_returns_results_in_call_order():
    assert run_all([lambda: 1, lambda: 2, lambda: 3]) == [1, 2, 3]


def test_empty_batch():
    assert run_all([]) == []


def test_calls_run_concurrently():
    barrier = threading.Barrier(3, timeout=5)

    def call():
        # Deadlocks (and times out) unless all three run at the same time.
        barrier.wait()
        return True

    assert run_all([call, call, call]) == [True, True, True]


def test_first_failure_is_raised():
    def fail():
        raise ValueError("nope")

    with pytest.raises(ValueError, match="nope"):
        run_all([lambda: 1, fail])


def test_completed_calls_are_not_rolled_back():
    done = []

    def ok():
        done.append("ok")

    def fail():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        run_all([ok, fail], max_workers=1)
    assert done == ["ok"]
