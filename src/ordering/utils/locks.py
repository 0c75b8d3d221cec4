"""Keyed lock registry for serializing work on a single natural key.

Cart mutations are serialized per owner, and order materialization per
gateway order id, so two requests racing on the same key run one after the
other while unrelated keys proceed in parallel. Locks are reentrant for the
holding thread and are dropped from the registry once nobody holds or waits
on them.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class KeyedLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}
        self._waiters: dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key) -> Iterator[None]:
        key = str(key)
        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())
            self._waiters[key] = self._waiters.get(key, 0) + 1

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]


cart_locks = KeyedLocks()
settlement_locks = KeyedLocks()
