from __future__ import annotations

import threading

__all__ = ["AtomicCounter", "UINT64_MASK"]

UINT64_MASK = (1 << 64) - 1


class AtomicCounter:
    """Unsigned 64-bit counter that is safe to bump from many threads."""

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def add(self, delta: int = 1) -> int:
        if delta < 0:
            raise ValueError("counter is monotonic; delta must be non-negative")
        with self._lock:
            self._value = (self._value + delta) & UINT64_MASK
            return self._value

    def load(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.load()})"
