"""Factory function for creating trace store instances based on settings."""

from compdb_core.exceptions import TraceIOError
from compdb_core.settings import InterceptSettings
from compdb_core.trace.local import LocalTraceStore
from compdb_core.trace.protocol import TraceStore


def create_trace_store(settings: InterceptSettings) -> TraceStore:
    """Create the TraceStore named by the interception settings.

    Raises:
        TraceIOError: No trace directory is configured.
    """
    if settings.target is None:
        raise TraceIOError("No trace directory configured (set COMPDB_TARGET)")
    return LocalTraceStore(settings.target)


__all__ = ["create_trace_store"]
