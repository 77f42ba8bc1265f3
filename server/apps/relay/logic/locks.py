"""Per-key locking for work shared by concurrent requests."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import final


@final
class KeyedLock:
    """Mutual exclusion scoped to a single key.

    Threads holding different keys never block each other. Lock
    objects are dropped once nobody holds or waits on them, so the
    map does not grow with the number of keys ever seen.
    """

    def __init__(self) -> None:
        """Initialize an empty lock map."""
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for key for the duration of the block.

        Args:
            key: Key to serialize on.

        Yields:
            None while the lock is held.
        """
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[key] -= 1
                if not self._users[key]:
                    del self._users[key]
                    del self._locks[key]

    def __len__(self) -> int:
        """Count keys currently held or waited on."""
        with self._guard:
            return len(self._locks)
