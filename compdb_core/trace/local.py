"""Local filesystem trace store.

Layout:
    {base_path}/{sequence:020d}-{pid}-{token}.json      <- one trace record
    {base_path}/.{sequence:020d}-{pid}-{token}.json.tmp  <- write in progress

The sequence is seeded from the system-wide monotonic clock and is strictly
increasing within a writer process; the token is cryptographically random.
Together with the pid they make names from unrelated processes collision-free
without any locking between writers.
"""

import contextlib
import os
import re
import secrets
import threading
import time
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from compdb_core.exceptions import TraceDecodeError, TraceIOError, TraceStoreError
from compdb_core.logging import get_compdb_logger
from compdb_core.trace._types import TraceLocation, TraceSequence
from compdb_core.trace.record import TraceRecord

logger = get_compdb_logger(__name__)

TRACE_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"
TOKEN_BYTES = 8
SEQUENCE_WIDTH = 20

_TRACE_NAME = re.compile(rf"^(?P<sequence>\d{{{SEQUENCE_WIDTH}}})-(?P<pid>\d+)-(?P<token>[0-9a-f]+)\.json$")


def _trace_filename(sequence: int, pid: int) -> str:
    """Build a collision-resistant trace filename."""
    return f"{sequence:0{SEQUENCE_WIDTH}d}-{pid}-{secrets.token_hex(TOKEN_BYTES)}{TRACE_SUFFIX}"


class LocalTraceStore:
    """Directory-backed trace store shared by every process of a build.

    Each record is written to a hidden temporary file opened in create-or-fail
    mode and then atomically renamed, so enumeration never sees a partially
    written final file. Temporaries left behind by interrupted writers are
    ignored by ``locations()``.
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._sequence_lock = threading.Lock()
        self._last_sequence = 0

    @property
    def base_path(self) -> Path:
        """Shared directory holding the trace files."""
        return self._base_path

    def _next_sequence(self) -> int:
        with self._sequence_lock:
            sequence = max(time.monotonic_ns(), self._last_sequence + 1)
            self._last_sequence = sequence
        return sequence

    def write(self, record: TraceRecord) -> TraceLocation:
        """Write one record to a freshly named file and return its path."""
        name = _trace_filename(self._next_sequence(), record.pid)
        final_path = self._base_path / name
        temp_path = self._base_path / f".{name}{TEMP_SUFFIX}"
        try:
            with open(temp_path, "x", encoding="utf-8") as f:
                f.write(record.to_json())
            os.replace(temp_path, final_path)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink()
            raise TraceIOError(f"Cannot write trace file {final_path}: {e}") from e
        return TraceLocation(str(final_path))

    def read(self, location: TraceLocation) -> TraceRecord:
        """Load and validate a single trace file."""
        try:
            data = Path(location).read_bytes()
        except OSError as e:
            raise TraceIOError(f"Cannot read trace file {location}: {e}") from e
        try:
            return TraceRecord.from_json(data)
        except ValidationError as e:
            raise TraceDecodeError(f"Invalid trace file {location}: {e.error_count()} error(s)") from e

    def locations(self) -> Iterator[TraceLocation]:
        """Yield the path of every completed trace file in the directory."""
        try:
            entries = os.scandir(self._base_path)
        except OSError as e:
            raise TraceIOError(f"Cannot list trace directory {self._base_path}: {e}") from e
        with entries:
            for entry in entries:
                if not _TRACE_NAME.match(entry.name):
                    if not entry.name.endswith(TEMP_SUFFIX):
                        logger.debug(f"Ignoring foreign file in trace directory: {entry.name}")
                    continue
                yield TraceLocation(entry.path)

    def sequence(self, location: TraceLocation) -> TraceSequence:
        """Parse the write-order value out of a trace filename."""
        match = _TRACE_NAME.match(Path(location).name)
        if match is None:
            raise TraceDecodeError(f"Not a trace filename: {location}")
        return TraceSequence(int(match.group("sequence")))

    def read_all(self) -> Iterator[TraceRecord]:
        """Yield every readable record, skipping and logging damaged ones."""
        for location in self.locations():
            try:
                yield self.read(location)
            except TraceStoreError as e:
                logger.warning(f"Skipping trace: {e}")


__all__ = ["LocalTraceStore"]
