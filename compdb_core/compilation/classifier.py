"""Command classifier: trace record -> compilation entries.

Recognition is by program basename against the name patterns of each flag
dialect. A token is a source candidate when it is not an option, is not
consumed as the argument of a preceding flag, and ends in a recognized
source suffix. The filesystem is never consulted, so classification depends
only on the recorded argument vector.
"""

import os

from compdb_core.compilation.dialects import FlagDialect, GccDialect, LinkerDialect, MsvcDialect, program_name
from compdb_core.compilation.models import CompilationEntry, CompilerPhase
from compdb_core.compilation.options import ClassifierOptions
from compdb_core.logging import get_compdb_logger
from compdb_core.trace.record import TraceRecord

logger = get_compdb_logger(__name__)


class Classifier:
    """Turns trace records into compilation entries. Never raises."""

    def __init__(self, options: ClassifierOptions | None = None) -> None:
        self._options = options or ClassifierOptions()
        # Most specific patterns first: clang-cl must not fall through to gcc.
        self._dialects: tuple[FlagDialect, ...] = (
            MsvcDialect(self._options.extra_msvc_compilers),
            LinkerDialect(self._options.extra_linkers),
            GccDialect(self._options.extra_gcc_compilers),
        )

    @property
    def options(self) -> ClassifierOptions:
        return self._options

    def dialect_for(self, program: str) -> FlagDialect | None:
        """Select the dialect for ``cmd[0]``, or None for non-compilers."""
        name = program_name(program)
        for dialect in self._dialects:
            if dialect.recognizes(name):
                return dialect
        return None

    def is_source(self, token: str) -> bool:
        """Suffix allow-list check, case-sensitive."""
        return os.path.splitext(token)[1] in self._options.source_suffixes

    def classify(self, record: TraceRecord) -> list[CompilationEntry]:
        """Classify one record.

        Returns one entry per distinct source file, a single Linking entry
        without source when none is found, or an empty list when the program
        is not a recognized compiler or the command cannot be interpreted.
        """
        try:
            return self._classify(record)
        except Exception as e:  # noqa: BLE001
            logger.debug(f"Treating {record.program} as a non-compiler: {e}")
            return []

    def _classify(self, record: TraceRecord) -> list[CompilationEntry]:
        dialect = self.dialect_for(record.program)
        if dialect is None:
            return []

        parsed = dialect.parse(record.cmd[1:], self.is_source)
        sources = list(dict.fromkeys(parsed.sources))
        if not sources:
            return [
                CompilationEntry(
                    compiler=record.program,
                    phase=CompilerPhase.LINKING,
                    flags=parsed.flags,
                    output=parsed.output,
                    cwd=record.cwd,
                )
            ]

        return [
            CompilationEntry(
                compiler=record.program,
                phase=parsed.phase,
                flags=parsed.flags,
                source=source,
                output=parsed.output,
                cwd=record.cwd,
            )
            for source in sources
        ]


__all__ = ["Classifier"]
