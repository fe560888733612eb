"""Per-key locks for serializing profile read-modify-write sequences."""

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """
    Registry of one lock per key, created on first use.

    Only serializes writers inside a single process. A key's lock is dropped
    once no thread holds or waits on it.

    Usage:
        locks = KeyedLocks()
        with locks.hold(user_id):
            ...  # fetch, mutate, commit
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, _KeyLock] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[key]

    def is_held(self, key: Hashable) -> bool:
        """True while some thread is inside ``hold(key)``."""
        with self._guard:
            entry = self._locks.get(key)
        return entry is not None and entry.lock.locked()

    def active_keys(self) -> set[Hashable]:
        """Keys currently held or waited on."""
        with self._guard:
            return set(self._locks)


__all__ = ["KeyedLocks"]
