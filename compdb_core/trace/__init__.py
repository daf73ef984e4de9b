"""Trace records and the stores that persist them during a build."""

from ._types import TraceLocation, TraceSequence
from .capture import capture
from .factory import create_trace_store
from .local import LocalTraceStore
from .memory import MemoryTraceStore
from .protocol import TraceStore
from .record import TraceRecord

__all__ = [
    "LocalTraceStore",
    "MemoryTraceStore",
    "TraceLocation",
    "TraceRecord",
    "TraceSequence",
    "TraceStore",
    "capture",
    "create_trace_store",
]
