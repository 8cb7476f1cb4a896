# db/cache_store.py
from datetime import datetime, timedelta, timezone

from ..models import CacheEntry

CACHE_DURATION = timedelta(minutes=15)


def utcnow():
    return datetime.now(timezone.utc)


class ReadingCache:
    """Single-slot, in-memory holder for the latest reading.

    Lives as long as the process; a restart starts cold. ``put`` swaps the
    whole entry in one assignment, so readers see either the old or the new
    entry and never a mix.
    """

    def __init__(self, window=CACHE_DURATION, clock=utcnow):
        self.window = window
        self.clock = clock
        self._entry = None

    def get(self):
        return self._entry

    def put(self, reading):
        self._entry = CacheEntry(reading=reading, computed_at=self.clock())

    def is_fresh(self, entry):
        if entry is None:
            return False
        return self.clock() - entry.computed_at < self.window
