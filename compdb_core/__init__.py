"""compdb-core - compilation database generation from intercepted builds.

@public

Every process an external build spawns can be captured as a TraceRecord
(pid, working directory, argument vector) and stored as an independent file
in a shared trace directory. Once the build has finished, the Aggregator
classifies every stored record into CompilationEntry objects, applies the
inclusion and duplicate policies, and the result is written in the
conventional compile_commands.json format.

Quick Start:
    >>> from compdb_core import Aggregator, LocalTraceStore, write_database
    >>>
    >>> store = LocalTraceStore(Path("/tmp/traces"))
    >>> entries = Aggregator(store).run()
    >>> write_database(Path("compile_commands.json"), entries)

Command line:
    compdb intercept -- make -j8
    compdb aggregate --traces /tmp/traces -o compile_commands.json

Environment Variables:
    - COMPDB_TARGET: Trace directory exported to traced processes
    - COMPDB_ENABLED: Capture toggle
    - COMPDB_LOG_LEVEL: Package log level
"""

from .compilation import Classifier, ClassifierOptions, CompilationEntry, CompilerPhase
from .database import (
    Aggregator,
    DatabaseOptions,
    DuplicatePolicy,
    read_database,
    to_database,
    write_database,
)
from .exceptions import (
    CompdbCoreError,
    DatabaseError,
    DatabaseReadError,
    DatabaseWriteError,
    TraceDecodeError,
    TraceIOError,
    TraceStoreError,
)
from .logging import LoggingConfig, get_compdb_logger, setup_logging
from .settings import InterceptSettings
from .trace import (
    LocalTraceStore,
    MemoryTraceStore,
    TraceLocation,
    TraceRecord,
    TraceStore,
    capture,
    create_trace_store,
)

__version__ = "0.1.0"

__all__ = [
    # Trace capture and storage
    "TraceRecord",
    "TraceLocation",
    "TraceStore",
    "LocalTraceStore",
    "MemoryTraceStore",
    "capture",
    "create_trace_store",
    "InterceptSettings",
    # Classification
    "Classifier",
    "ClassifierOptions",
    "CompilationEntry",
    "CompilerPhase",
    # Database
    "Aggregator",
    "DatabaseOptions",
    "DuplicatePolicy",
    "read_database",
    "to_database",
    "write_database",
    # Logging
    "LoggingConfig",
    "get_compdb_logger",
    "setup_logging",
    # Exceptions
    "CompdbCoreError",
    "TraceStoreError",
    "TraceIOError",
    "TraceDecodeError",
    "DatabaseError",
    "DatabaseWriteError",
    "DatabaseReadError",
]
