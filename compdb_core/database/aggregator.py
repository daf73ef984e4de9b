"""Database aggregator: full trace store -> ordered compilation database.

Aggregation runs once, single-threaded, after the observed build has
finished. Traces are visited in the order of the sequence the store assigned
at write time (ties broken by location), which defines "later" for the
duplicate policy and makes the result deterministic for an unchanged store.
"""

from dataclasses import dataclass

from compdb_core.compilation.classifier import Classifier
from compdb_core.compilation.models import CompilationEntry
from compdb_core.database.options import DatabaseOptions, DuplicatePolicy
from compdb_core.exceptions import TraceStoreError
from compdb_core.logging import get_compdb_logger
from compdb_core.trace._types import TraceLocation
from compdb_core.trace.protocol import TraceStore

logger = get_compdb_logger(__name__)


@dataclass
class AggregationReport:
    """Counters of the last aggregation run."""

    traces_read: int = 0
    traces_skipped: int = 0
    entries_classified: int = 0
    entries_kept: int = 0


class Aggregator:
    """Classifies every stored trace and applies inclusion and duplicate policies."""

    def __init__(
        self,
        store: TraceStore,
        classifier: Classifier | None = None,
        options: DatabaseOptions | None = None,
    ) -> None:
        self._store = store
        self._classifier = classifier or Classifier()
        self._options = options or DatabaseOptions()
        self.report = AggregationReport()

    def _ordered_locations(self, report: AggregationReport) -> list[TraceLocation]:
        """List the store in write order. A store that cannot be listed is fatal."""
        keyed: list[tuple[int, str, TraceLocation]] = []
        for location in self._store.locations():
            try:
                keyed.append((self._store.sequence(location), location, location))
            except TraceStoreError as e:
                report.traces_skipped += 1
                logger.warning(f"Skipping trace {location}: {e}")
        keyed.sort()
        return [location for _, _, location in keyed]

    def _included(self, entry: CompilationEntry) -> bool:
        return entry.phase in self._options.include_phases

    def run(self) -> list[CompilationEntry]:
        """Build the compilation database from the whole store.

        Raises:
            TraceIOError: The trace store itself cannot be listed.
        """
        report = AggregationReport()
        kept: list[CompilationEntry] = []

        for location in self._ordered_locations(report):
            try:
                record = self._store.read(location)
            except TraceStoreError as e:
                report.traces_skipped += 1
                logger.warning(f"Skipping trace {location}: {e}")
                continue

            report.traces_read += 1
            entries = self._classifier.classify(record)
            report.entries_classified += len(entries)
            kept.extend(entry for entry in entries if self._included(entry))

        if self._options.duplicate_policy is DuplicatePolicy.LAST_WINS:
            kept = deduplicate(kept)

        report.entries_kept = len(kept)
        self.report = report
        logger.info(
            f"Aggregated {report.traces_read} trace(s): {report.entries_kept} entries kept "
            f"of {report.entries_classified} classified, {report.traces_skipped} trace(s) skipped"
        )
        return kept


def _identity(entry: CompilationEntry) -> tuple[str | None, ...]:
    if entry.source is None:
        return (None, entry.output, entry.cwd)
    return entry.key


def deduplicate(entries: list[CompilationEntry]) -> list[CompilationEntry]:
    """Keep the last entry per (source, cwd), placed where that last entry occurred.

    Entries without a source are keyed by (output, cwd) instead.
    """
    survivors: dict[tuple[str | None, ...], CompilationEntry] = {}
    for entry in entries:
        identity = _identity(entry)
        survivors.pop(identity, None)
        survivors[identity] = entry
    return list(survivors.values())


__all__ = ["AggregationReport", "Aggregator", "deduplicate"]
