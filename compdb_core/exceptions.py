"""Exception hierarchy for compdb-core.

All exceptions inherit from CompdbCoreError. Trace store errors are recovered
per record during aggregation; database errors are surfaced to the caller.
"""


class CompdbCoreError(Exception):
    """Base exception for all compdb-core errors."""


class TraceStoreError(CompdbCoreError):
    """Raised when a trace record cannot be stored or retrieved."""


class TraceIOError(TraceStoreError):
    """Raised when a trace file or the trace directory cannot be accessed."""


class TraceDecodeError(TraceStoreError):
    """Raised when stored trace content is not a complete, valid record."""


class DatabaseError(CompdbCoreError):
    """Base exception for compilation database output errors."""


class DatabaseWriteError(DatabaseError):
    """Raised when the compilation database cannot be written."""


class DatabaseReadError(DatabaseError):
    """Raised when an existing compilation database cannot be loaded."""
