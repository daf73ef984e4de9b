"""In-memory trace store for testing.

Simple dict-based storage implementing the full TraceStore protocol.
Not for production use: records never leave the current process.
"""

import itertools
import threading
from collections.abc import Iterator

from compdb_core.exceptions import TraceIOError
from compdb_core.trace._types import TraceLocation, TraceSequence
from compdb_core.trace.record import TraceRecord


class MemoryTraceStore:
    """Dict-based trace store for unit tests.

    Locations are ``memory://{sequence}``; the sequence comes from a
    process-local counter, so write order is exact.
    """

    def __init__(self) -> None:
        self._records: dict[TraceLocation, tuple[TraceSequence, TraceRecord]] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def write(self, record: TraceRecord) -> TraceLocation:
        with self._lock:
            sequence = TraceSequence(next(self._counter))
            location = TraceLocation(f"memory://{sequence}")
            self._records[location] = (sequence, record)
        return location

    def read(self, location: TraceLocation) -> TraceRecord:
        try:
            return self._records[location][1]
        except KeyError:
            raise TraceIOError(f"No trace stored at {location}") from None

    def locations(self) -> Iterator[TraceLocation]:
        with self._lock:
            snapshot = list(self._records)
        yield from snapshot

    def sequence(self, location: TraceLocation) -> TraceSequence:
        try:
            return self._records[location][0]
        except KeyError:
            raise TraceIOError(f"No trace stored at {location}") from None

    def read_all(self) -> Iterator[TraceRecord]:
        for location in self.locations():
            yield self.read(location)

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["MemoryTraceStore"]
