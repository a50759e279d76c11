"""Per-order mutual exclusion.

Every state-changing use case runs inside ``locks.hold(order_number)``.
Operations on the same order are serialized; operations on different
orders never wait on each other.  The locks are re-entrant so a
settlement can issue the invoice without releasing its order.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class OrderLockRegistry:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}
        self._holders: dict[str, int] = {}

    @contextmanager
    def hold(self, order_number: str) -> Iterator[None]:
        lock = self._acquire_entry(order_number)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            self._release_entry(order_number)

    def _acquire_entry(self, order_number: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(order_number)
            if lock is None:
                lock = threading.RLock()
                self._locks[order_number] = lock
            self._holders[order_number] = self._holders.get(order_number, 0) + 1
            return lock

    def _release_entry(self, order_number: str) -> None:
        # Drop the lock once nobody holds or waits for it.
        with self._guard:
            remaining = self._holders[order_number] - 1
            if remaining:
                self._holders[order_number] = remaining
            else:
                del self._holders[order_number]
                del self._locks[order_number]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
