# entity_assets/utils/entity_locks.py
"""
Per-entity critical sections.

Every mutating sequence on an entity folder (ingest, delete, renumber) runs
while holding the folder's lock, so gallery index allocation and
renumbering never interleave. Different folders never contend.

A folder's lock is registered while at least one thread holds or waits for
it and dropped afterwards, so the registry only grows with the number of
entities being mutated concurrently.

Locks are in-process only; cross-process exclusion is the caller's duty.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class EntityLockRegistry:
    """Hands out one re-entrant lock per entity folder key."""

    def __init__(self):
        self._locks: Dict[str, threading.RLock] = {}
        self._users: Dict[str, int] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        """
        Hold the lock of one entity folder.

        Args:
            key: Relative entity folder, e.g. "product/000123"
        """
        entity_lock = self._acquire_entry(key)
        try:
            with entity_lock:
                yield
        finally:
            self._release_entry(key)

    def _acquire_entry(self, key: str) -> threading.RLock:
        with self._registry_lock:
            entity_lock = self._locks.get(key)
            if entity_lock is None:
                entity_lock = threading.RLock()
                self._locks[key] = entity_lock
            self._users[key] = self._users.get(key, 0) + 1
            return entity_lock

    def _release_entry(self, key: str) -> None:
        with self._registry_lock:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        """Number of folders whose lock is currently held or awaited"""
        with self._registry_lock:
            return len(self._locks)
