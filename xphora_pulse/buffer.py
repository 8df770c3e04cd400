import threading
from collections import deque

import structlog

from .models import BufferStatus

log = structlog.get_logger()

DEFAULT_CAPACITY = 1000


class EventBuffer:
    """
    Bounded in-memory store of the most recent events.

    Eviction is by insertion order, not by event timestamp: once the buffer
    is full, the event appended longest ago is dropped first, even if a newer
    insertion carries an older timestamp.

    Appends and snapshots take a lock so an engine shared by concurrent
    requests never sees a half-applied batch. Analysis runs on the snapshot
    and needs no further locking.
    """

    def __init__(self, capacity=DEFAULT_CAPACITY):
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        self.capacity = capacity
        self.evicted_total = 0
        self._events = deque()
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._events)

    def ingest(self, events):
        """Append events in order, then evict the oldest beyond capacity.

        Returns how many events this call evicted.
        """
        events = list(events)
        if not events:
            return 0

        with self._lock:
            self._events.extend(events)
            evicted = 0
            while len(self._events) > self.capacity:
                self._events.popleft()
                evicted += 1
            self.evicted_total += evicted
            size = len(self._events)

        log.debug("events_buffered", added=len(events), evicted=evicted, size=size)
        return evicted

    def snapshot(self):
        """Current contents, oldest first, as an immutable tuple."""
        with self._lock:
            return tuple(self._events)

    def clear(self):
        with self._lock:
            self._events.clear()

    def status(self):
        with self._lock:
            oldest = self._events[0].id if self._events else None
            newest = self._events[-1].id if self._events else None
            size = len(self._events)
        return BufferStatus(
            size=size,
            capacity=self.capacity,
            evicted_total=self.evicted_total,
            oldest_event_id=oldest,
            newest_event_id=newest,
        )
