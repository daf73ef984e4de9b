"""Test helpers shared across test packages."""

from compdb_core.trace import TraceRecord


def make_record(*cmd: str, cwd: str = "/build", pid: int = 4242) -> TraceRecord:
    """Build a TraceRecord from positional arguments."""
    return TraceRecord(pid=pid, cwd=cwd, cmd=cmd)
