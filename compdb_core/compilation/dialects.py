"""Compiler flag dialects.

A dialect knows which program names it handles and how that family spells
its phase markers, output flag and flags with separate arguments. The set of
dialects is closed: gcc-like drivers, MSVC-like drivers and standalone
linkers. The classifier picks one by program name and lets it tokenize the
argument vector.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import ClassVar

from compdb_core.compilation.models import CompilerPhase

SourcePredicate = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class ParsedArguments:
    """Result of splitting an argument vector (without ``cmd[0]``)."""

    phase: CompilerPhase
    flags: tuple[str, ...]
    sources: tuple[str, ...]
    output: str | None


def program_name(program: str) -> str:
    """Basename of ``cmd[0]`` for either path separator, without a trailing ``.exe``."""
    name = re.split(r"[\\/]", program)[-1]
    if name.lower().endswith(".exe"):
        name = name[:-4]
    return name


class FlagDialect(ABC):
    """Common tokenizer; subclasses supply the vocabulary."""

    name: ClassVar[str]
    patterns: ClassVar[tuple[re.Pattern[str], ...]]
    accepts_sources: ClassVar[bool] = True

    def __init__(self, extra_names: Iterable[str] = ()) -> None:
        self._extra_names = frozenset(extra_names)

    def recognizes(self, name: str) -> bool:
        """Check a program basename (as returned by ``program_name``)."""
        return name in self._extra_names or any(p.fullmatch(name) for p in self.patterns)

    @abstractmethod
    def is_option(self, token: str, is_source: SourcePredicate) -> bool: ...

    @abstractmethod
    def marker(self, token: str) -> CompilerPhase | None:
        """Phase limited by this flag, if it is a phase marker."""

    @abstractmethod
    def takes_argument(self, token: str) -> bool:
        """True when the flag consumes the next token as its argument."""

    @abstractmethod
    def output_of(self, token: str, following: str | None) -> tuple[str | None, int]:
        """Return (output path, tokens consumed), or (None, 0) for a non-output token."""

    def explicit_source(self, token: str) -> str | None:
        """Source named by a flag, e.g. MSVC ``/Tcfile.c``."""
        return None

    def swallows_rest(self, token: str) -> bool:
        """True when every later token belongs to another tool (MSVC ``/link``)."""
        return False

    def parse(self, args: Sequence[str], is_source: SourcePredicate) -> ParsedArguments:
        flags: list[str] = []
        sources: list[str] = []
        markers: list[CompilerPhase] = []
        output: str | None = None

        i = 0
        while i < len(args):
            token = args[i]
            following = args[i + 1] if i + 1 < len(args) else None

            if self.swallows_rest(token):
                flags.extend(args[i:])
                break

            path, consumed = self.output_of(token, following)
            if consumed:
                output = path
                i += consumed
                continue

            if (named := self.explicit_source(token)) is not None:
                if self.accepts_sources:
                    sources.append(named)
                else:
                    flags.append(token)
                i += 1
                continue

            if self.is_option(token, is_source):
                if (phase := self.marker(token)) is not None:
                    markers.append(phase)
                flags.append(token)
                if self.takes_argument(token) and following is not None:
                    flags.append(following)
                    i += 2
                else:
                    i += 1
                continue

            if self.accepts_sources and is_source(token):
                sources.append(token)
            else:
                flags.append(token)
            i += 1

        return ParsedArguments(
            phase=CompilerPhase.most_restrictive(markers),
            flags=tuple(flags),
            sources=tuple(sources),
            output=output,
        )


class GccDialect(FlagDialect):
    """gcc, clang, icc and their cross-prefixed and versioned variants."""

    name = "gcc"
    patterns = (
        re.compile(
            r"(?:[\w.]+-)*"  # cross prefix: x86_64-linux-gnu-
            r"(?:cc|c\+\+|gcc|g\+\+|xgcc|xg\+\+|c89|c99|clang|clang\+\+|icc|icpc|icx|icpx)"
            r"(?:-\d+(?:\.\d+)*)?"  # version suffix: -12, -17.0.1
        ),
    )

    MARKERS: ClassVar[dict[str, CompilerPhase]] = {
        "-E": CompilerPhase.PREPROCESSING,
        "-M": CompilerPhase.PREPROCESSING,
        "-MM": CompilerPhase.PREPROCESSING,
        "-c": CompilerPhase.COMPILATION,
        "-S": CompilerPhase.ASSEMBLY,
    }

    WITH_ARGUMENT: ClassVar[frozenset[str]] = frozenset({
        "-I", "-D", "-U", "-L", "-l", "-T", "-u", "-z", "-x",
        "-include", "-imacros", "-isystem", "-iquote", "-idirafter", "-isysroot",
        "-iprefix", "-iwithprefix", "-iwithprefixbefore", "-imultilib",
        "-MF", "-MT", "-MQ",
        "-Xlinker", "-Xpreprocessor", "-Xassembler", "-Xclang",
        "-arch", "-target", "--param", "-aux-info", "-dumpbase", "-dumpdir",
    })

    def is_option(self, token: str, is_source: SourcePredicate) -> bool:
        return token.startswith("-") and token != "-"

    def marker(self, token: str) -> CompilerPhase | None:
        return self.MARKERS.get(token)

    def takes_argument(self, token: str) -> bool:
        return token in self.WITH_ARGUMENT

    def output_of(self, token: str, following: str | None) -> tuple[str | None, int]:
        if token == "-o":
            return (following, 2) if following is not None else (None, 0)
        if token.startswith("-o") and len(token) > 2:
            return token[2:], 1
        return None, 0


class MsvcDialect(FlagDialect):
    """cl.exe and clang-cl. Options start with ``/`` or ``-``."""

    name = "msvc"
    patterns = (re.compile(r"(?i:cl|clang-cl)"),)

    MARKERS: ClassVar[dict[str, CompilerPhase]] = {
        "E": CompilerPhase.PREPROCESSING,
        "EP": CompilerPhase.PREPROCESSING,
        "P": CompilerPhase.PREPROCESSING,
        "c": CompilerPhase.COMPILATION,
    }

    WITH_ARGUMENT: ClassVar[frozenset[str]] = frozenset({"I", "D", "U", "FI", "imsvc", "Xclang"})

    @staticmethod
    def _switch(token: str) -> str:
        return token[1:] if token[:1] in ("/", "-") else token

    def is_option(self, token: str, is_source: SourcePredicate) -> bool:
        if token.startswith("-"):
            return token != "-"
        # An absolute POSIX path to a source file is not a switch.
        return token.startswith("/") and not is_source(token)

    def marker(self, token: str) -> CompilerPhase | None:
        return self.MARKERS.get(self._switch(token))

    def takes_argument(self, token: str) -> bool:
        return self._switch(token) in self.WITH_ARGUMENT

    def output_of(self, token: str, following: str | None) -> tuple[str | None, int]:
        if token[:1] not in ("/", "-"):
            return None, 0
        switch = self._switch(token)
        if not switch.startswith("Fo"):
            return None, 0
        path = switch[2:].removeprefix(":")
        if path:
            return path, 1
        return (following, 2) if following is not None else (None, 0)

    def explicit_source(self, token: str) -> str | None:
        if token[:1] not in ("/", "-"):
            return None
        switch = self._switch(token)
        if switch[:2] in ("Tc", "Tp") and len(switch) > 2:
            return switch[2:]
        return None

    def swallows_rest(self, token: str) -> bool:
        return token[:1] in ("/", "-") and self._switch(token).lower() == "link"


class LinkerDialect(FlagDialect):
    """Standalone linkers. Always the Linking phase, never a source file."""

    name = "linker"
    patterns = (
        re.compile(r"(?:[\w.]+-)*(?:ld|ld\.bfd|ld\.gold|ld\.lld|ld64\.lld|gold|lld|lld-link|link)(?:-\d+(?:\.\d+)*)?"),
    )
    accepts_sources = False

    def is_option(self, token: str, is_source: SourcePredicate) -> bool:
        return token.startswith("-")

    def marker(self, token: str) -> CompilerPhase | None:
        return None

    def takes_argument(self, token: str) -> bool:
        return token in ("-L", "-l", "-T", "-e", "-m", "-z", "-u", "-y", "-Map", "--script")

    def output_of(self, token: str, following: str | None) -> tuple[str | None, int]:
        if token in ("-o", "--output"):
            return (following, 2) if following is not None else (None, 0)
        if token.startswith("--output="):
            return token.removeprefix("--output="), 1
        if token.upper().startswith(("/OUT:", "-OUT:")):
            return token[5:], 1
        if token.startswith("-o") and len(token) > 2:
            return token[2:], 1
        return None, 0


__all__ = [
    "FlagDialect",
    "GccDialect",
    "LinkerDialect",
    "MsvcDialect",
    "ParsedArguments",
    "program_name",
]
