"""Classified compilation steps derived from trace records."""

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class CompilerPhase(StrEnum):
    """Furthest pipeline stage an invocation performs, in pipeline order."""

    PREPROCESSING = "preprocessing"
    COMPILATION = "compilation"
    ASSEMBLY = "assembly"
    LINKING = "linking"

    @property
    def rank(self) -> int:
        return _PIPELINE_ORDER.index(self)

    @classmethod
    def most_restrictive(cls, phases: Iterable["CompilerPhase"]) -> "CompilerPhase":
        """Earliest requested stage wins; no marker at all means the full pipeline."""
        return min(phases, key=lambda phase: phase.rank, default=cls.LINKING)


_PIPELINE_ORDER = tuple(CompilerPhase)


class CompilationEntry(BaseModel):
    """One compile step, reproducible in isolation.

    ``flags`` excludes the compiler, every source file and the output flag
    with its argument. ``source`` is None only for link steps without a
    source file.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    compiler: str
    phase: CompilerPhase
    flags: tuple[str, ...] = ()
    source: str | None = None
    output: str | None = None
    cwd: str

    @property
    def key(self) -> tuple[str | None, str]:
        """Identity of the entry inside a compilation database."""
        return (self.source, self.cwd)

    def arguments(self) -> list[str]:
        """Command line that replays this step: compiler, flags, then the source."""
        args = [self.compiler, *self.flags]
        if self.source is not None:
            args.append(self.source)
        return args


__all__ = ["CompilationEntry", "CompilerPhase"]
