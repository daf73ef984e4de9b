"""Domain-specific types for the trace system."""

from typing import NewType

TraceLocation = NewType("TraceLocation", str)
"""Backend-specific identifier of one stored trace (a file path for LocalTraceStore)."""

TraceSequence = NewType("TraceSequence", int)
"""Write-order value assigned by the store. Higher means written later."""

__all__ = ["TraceLocation", "TraceSequence"]
