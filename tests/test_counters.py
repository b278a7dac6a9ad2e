from __future__ import annotations

import threading

import pytest

from rundebug.core.counters import UINT64_MASK, AtomicCounter


def test_counter_starts_at_zero_and_counts() -> None:
    counter = AtomicCounter()
    assert counter.load() == 0
    for _ in range(3):
        counter.add()
    assert counter.load() == 3


def test_concurrent_increments_are_not_lost() -> None:
    counter = AtomicCounter()
    threads = 8
    per_thread = 2000
    barrier = threading.Barrier(threads)

    def worker() -> None:
        barrier.wait()
        for _ in range(per_thread):
            counter.add()

    pool = [threading.Thread(target=worker) for _ in range(threads)]
    for thread in pool:
        thread.start()
    for thread in pool:
        thread.join()

    assert counter.load() == threads * per_thread


def test_counter_wraps_as_uint64() -> None:
    counter = AtomicCounter()
    counter.add(UINT64_MASK)
    assert counter.add() == 0


def test_counter_rejects_negative_delta() -> None:
    with pytest.raises(ValueError):
        AtomicCounter().add(-1)
