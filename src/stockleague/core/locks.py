"""Per-player mutual exclusion for ledger and summary writers."""

import threading
from contextlib import contextmanager
from typing import Iterator


class PlayerLocks:
    """
    Registry of one re-entrant lock per player id.

    Trades, imports and summary rebuilds for the same player run one at a
    time so that the read summary -> validate -> append -> recompute sequence
    cannot interleave. A thread already holding a player's lock may take it
    again, so a summary read inside a trade can heal stale summaries.
    Different players never share a lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, player_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(player_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[player_id] = lock
            return lock

    @contextmanager
    def hold(self, player_id: str) -> Iterator[None]:
        """Hold the player's lock for the duration of the block."""
        lock = self.lock_for(player_id)
        with lock:
            yield
