"""
Per-event locking

Single writer per gig event: every read-modify-write on one event record
holds that event's lock until persistence and side-effect publication are
done. Different events never contend.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class EventLockRegistry:
    """
    Lazily created re-entrant lock per event id

    Re-entrant because a subscriber reacting to a published event may call
    back into an engine for the same event while the publisher still holds
    its lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, event_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(event_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[event_id] = lock
            return lock

    @contextmanager
    def hold(self, event_id: str) -> Iterator[None]:
        """Hold the writer lock for one event"""
        lock = self._lock_for(event_id)
        with lock:
            yield

    def discard(self, event_id: str) -> None:
        """Forget the lock of a deleted event"""
        with self._guard:
            self._locks.pop(event_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
