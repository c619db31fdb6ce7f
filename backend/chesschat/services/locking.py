import threading
from contextlib import contextmanager
from typing import Dict, Hashable, List


class KeyedLocks:
    """Mutual exclusion per key (game id, user id, ...).

    Entries are reference counted and dropped once no holder or waiter is
    left, so the table only grows with the number of keys in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, List] = {}  # key -> [lock, holders + waiters]

    @contextmanager
    def hold(self, key: Hashable):
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
