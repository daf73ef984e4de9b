"""Immutable snapshot of one observed process invocation."""

import os
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TraceRecord(BaseModel):
    """One intercepted process: pid, working directory and argument vector.

    The pid never identifies a record on its own, since the OS reuses pids
    during a build. Records are frozen after construction and serialize to
    ``{"pid": ..., "cwd": ..., "cmd": [...]}``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pid: int = Field(ge=0)
    cwd: str
    cmd: tuple[str, ...]

    @field_validator("cwd")
    @classmethod
    def validate_cwd(cls, v: str) -> str:
        """Working directory must be absolute."""
        if not os.path.isabs(v):
            raise ValueError(f"cwd must be an absolute path: {v!r}")
        return v

    @field_validator("cmd", mode="before")
    @classmethod
    def validate_cmd(cls, v: Any) -> Any:
        """Reject an empty argument vector and bare strings."""
        if isinstance(v, (str, bytes)):
            raise ValueError("cmd must be a sequence of arguments, not a string")
        if not v:
            raise ValueError("cmd must contain at least the program name")
        return tuple(v)

    @classmethod
    def capture(cls, cmd: Sequence[str]) -> "TraceRecord":
        """Build a record for the current process invoking ``cmd``.

        Raises:
            OSError: The working directory cannot be read (e.g. it was removed).
            pydantic.ValidationError: ``cmd`` is empty.
        """
        return cls(pid=os.getpid(), cwd=os.getcwd(), cmd=tuple(cmd))

    @property
    def program(self) -> str:
        """The invoked program as seen by the exec layer (``cmd[0]``)."""
        return self.cmd[0]

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str | bytes) -> "TraceRecord":
        return cls.model_validate_json(data)


__all__ = ["TraceRecord"]
