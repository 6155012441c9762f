# ABOUTME: Hands out one re-entrant lock per key for read-modify-write sections.
# ABOUTME: Locks are weakly held so keys nobody is using do not pile up over the process lifetime.

from __future__ import annotations

import threading
import weakref
from typing import Hashable


class KeyedLocks:
    """
    Lock registry keyed by e.g. (student_id, kc_id).

    A lock lives as long as some caller holds it; two callers asking for the
    same key while either still holds the lock get the same object.
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def __call__(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)
