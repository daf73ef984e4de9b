"""Trace store protocol.

Defines the TraceStore protocol that all storage backends implement.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from compdb_core.trace._types import TraceLocation, TraceSequence
from compdb_core.trace.record import TraceRecord


@runtime_checkable
class TraceStore(Protocol):
    """Protocol for trace storage backends.

    Implementations: LocalTraceStore (one JSON file per trace in a shared
    directory), MemoryTraceStore (testing).

    Writers never coordinate: each write targets a freshly generated
    location. Enumeration assumes all writers have finished.
    """

    def write(self, record: TraceRecord) -> TraceLocation:
        """Persist one record at a new location. Raises TraceIOError on failure."""
        ...

    def read(self, location: TraceLocation) -> TraceRecord:
        """Reconstruct one record. Raises TraceIOError or TraceDecodeError."""
        ...

    def locations(self) -> Iterator[TraceLocation]:
        """Lazily list stored records in unspecified order.

        Raises TraceIOError when the storage location itself is inaccessible.
        """
        ...

    def sequence(self, location: TraceLocation) -> TraceSequence:
        """Return the write-order value assigned to a location at write time."""
        ...

    def read_all(self) -> Iterator[TraceRecord]:
        """Lazily yield every readable record. Unreadable records are logged and skipped."""
        ...


__all__ = ["TraceStore"]
