"""Capture of the current process invocation into the trace store.

Capture runs inline in every intercepted process, once per spawned tool. It
never waits on other processes and never raises: a trace that cannot be
recorded is reported through the log and the traced process carries on.
"""

from collections.abc import Sequence

from compdb_core.exceptions import TraceStoreError
from compdb_core.logging import get_compdb_logger
from compdb_core.settings import InterceptSettings, load_intercept_settings
from compdb_core.trace._types import TraceLocation
from compdb_core.trace.factory import create_trace_store
from compdb_core.trace.protocol import TraceStore
from compdb_core.trace.record import TraceRecord

logger = get_compdb_logger(__name__)


def capture(
    cmd: Sequence[str],
    settings: InterceptSettings | None = None,
    store: TraceStore | None = None,
) -> TraceLocation | None:
    """Record ``cmd`` as invoked by the current process.

    Args:
        cmd: Argument vector of the intercepted invocation.
        settings: Interception settings. Read from the environment when None.
        store: Explicit store. Built from ``settings`` when None.

    Returns:
        Location of the stored trace, or None when capture is disabled,
        unconfigured, or failed.
    """
    if store is None:
        if settings is None:
            settings = load_intercept_settings()
        if not settings.active:
            return None
        store = create_trace_store(settings)
    elif settings is not None and not settings.enabled:
        return None

    try:
        record = TraceRecord.capture(cmd)
    except (OSError, ValueError) as e:
        logger.warning(f"Cannot capture invocation {list(cmd)!r}: {e}")
        return None

    try:
        return store.write(record)
    except TraceStoreError as e:
        logger.warning(f"Cannot store trace of {record.program}: {e}")
        return None
