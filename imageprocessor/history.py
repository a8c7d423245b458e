# imageprocessor/history.py
"""
Bounded in-memory history of processing attempts.

One store is shared by every request thread, so the deque and its capacity
are only ever touched while holding the lock. Nothing here is persisted.
"""
from __future__ import annotations

import threading
from collections import deque

from imageprocessor.errors import InvalidHistorySize, InvalidStatusFilter
from imageprocessor.models import HistoryRecord, ProcessingOutcome

DEFAULT_CAPACITY = 10


def _validate_capacity(capacity) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise InvalidHistorySize("History size must be greater than zero")
    return capacity


def _normalize_status(status) -> ProcessingOutcome | None:
    if status is None or isinstance(status, ProcessingOutcome):
        return status
    if isinstance(status, str):
        # empty filter means "everything"
        return ProcessingOutcome.parse(status) if status.strip() else None
    raise InvalidStatusFilter(f"Invalid status filter provided: {status!r}")


class HistoryStore:
    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        capacity = _validate_capacity(capacity)
        self._lock = threading.Lock()
        # maxlen makes append() drop the oldest record once full
        self._records: deque[HistoryRecord] = deque(maxlen=capacity)

    def append(self, record: HistoryRecord) -> None:
        with self._lock:
            self._records.append(record)

    def query(self, status: ProcessingOutcome | str | None = None) -> list[HistoryRecord]:
        """Return records oldest first, optionally only those with the given outcome."""
        status = _normalize_status(status)
        with self._lock:
            if status is None:
                return list(self._records)
            return [r for r in self._records if r.outcome is status]

    def set_capacity(self, capacity: int) -> None:
        capacity = _validate_capacity(capacity)
        with self._lock:
            # A new deque keeps only the newest `capacity` records
            self._records = deque(self._records, maxlen=capacity)

    def get_capacity(self) -> int:
        with self._lock:
            return self._records.maxlen

    @property
    def capacity(self) -> int:
        return self.get_capacity()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
