"""Tests for cancellation tokens and worker groups."""
import threading
import time

import pytest

from redis_sweep_tool.keyspace.core.cancellation import CancellationToken
from redis_sweep_tool.keyspace.core.concurrency import AtomicCounter, ErrorGroup
from redis_sweep_tool.keyspace.exceptions import OperationCancelledError


def test_cancel_cascades_to_children():
    root = CancellationToken()
    child = root.child()
    grandchild = child.child()

    root.cancel()

    assert child.cancelled
    assert grandchild.cancelled


def test_child_cancel_does_not_reach_parent():
    root = CancellationToken()
    child = root.child()

    child.cancel()

    assert not root.cancelled


def test_child_of_cancelled_token_starts_cancelled():
    root = CancellationToken()
    root.cancel()

    assert root.child().cancelled


def test_sleep_returns_after_timeout():
    start = time.monotonic()
    CancellationToken().sleep(0.05)

    assert time.monotonic() - start >= 0.05


def test_sleep_raises_when_cancelled():
    token = CancellationToken()
    threading.Timer(0.05, token.cancel).start()

    with pytest.raises(OperationCancelledError):
        token.sleep(5)


def test_atomic_counter_under_contention():
    counter = AtomicCounter()

    def bump():
        for _ in range(1000):
            counter.add(1)

    threads = [threading.Thread(target=bump) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert counter.value == 8000


def test_error_group_runs_all_callables():
    results = []
    group = ErrorGroup(CancellationToken(), max_workers=3)
    for n in range(3):
        group.go(lambda n, token: results.append(n), n)

    group.wait()

    assert sorted(results) == [0, 1, 2]


def test_error_group_reports_first_error_and_cancels_rest():
    group = ErrorGroup(CancellationToken(), max_workers=3)
    stopped = []

    def slow(token):
        while not token.wait(0.01):
            pass
        stopped.append(True)
        token.raise_if_cancelled()

    def failing(token):
        time.sleep(0.05)
        raise ValueError("first")

    group.go(slow)
    group.go(failing)
    group.go(slow)

    with pytest.raises(ValueError, match="first"):
        group.wait()
    assert stopped == [True, True]


def test_error_group_follows_parent_cancellation():
    parent = CancellationToken()
    group = ErrorGroup(parent, max_workers=1)
    group.go(lambda token: token.sleep(5))
    threading.Timer(0.05, parent.cancel).start()

    with pytest.raises(OperationCancelledError):
        group.wait()
