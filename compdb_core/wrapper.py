"""Wrapper-substitution capture mechanism.

The build finds compiler shims (symlinks to ``compdb-wrapper``) first on
PATH. Each shim records the invocation into the trace store, resolves the
real tool on PATH with the shim directory excluded, and replaces itself with
it, so the build observes the exact exit status and output of the real tool.

Explicit form, for build systems that take a compiler launcher:
    compdb-wrapper [-t TRACE_DIR] [--] gcc -c foo.c
"""

import argparse
import os
import shutil
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from compdb_core.compilation.dialects import program_name
from compdb_core.settings import InterceptSettings, load_intercept_settings
from compdb_core.trace.capture import capture

WRAPPER_NAME = "compdb-wrapper"

DEFAULT_SHIM_NAMES: tuple[str, ...] = ("cc", "c++", "gcc", "g++", "clang", "clang++")

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


def find_wrapper() -> Path:
    """Locate the installed ``compdb-wrapper`` executable."""
    if found := shutil.which(WRAPPER_NAME):
        return Path(found)
    sibling = Path(sys.executable).parent / WRAPPER_NAME
    if sibling.exists():
        return sibling
    raise FileNotFoundError(f"{WRAPPER_NAME} executable not found on PATH")


def install_shims(directory: Path, names: Iterable[str] = DEFAULT_SHIM_NAMES, wrapper: Path | None = None) -> list[Path]:
    """Create one symlink per compiler name in ``directory`` pointing at the wrapper."""
    target = wrapper or find_wrapper()
    directory.mkdir(parents=True, exist_ok=True)
    shims: list[Path] = []
    for name in names:
        shim = directory / name
        if shim.is_symlink() or shim.exists():
            shim.unlink()
        shim.symlink_to(target)
        shims.append(shim)
    return shims


def _same_directory(a: str, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def resolve_executable(name: str, wrapper_dir: Path | None = None, search_path: str | None = None) -> str | None:
    """Find the real tool for ``name``, never returning a shim.

    Names containing a path separator are used as given.
    """
    if os.sep in name or (os.altsep and os.altsep in name):
        return name if os.access(name, os.X_OK) and not os.path.isdir(name) else None

    directories = (search_path if search_path is not None else os.environ.get("PATH", "")).split(os.pathsep)
    if wrapper_dir is not None:
        directories = [d for d in directories if d and not _same_directory(d, wrapper_dir)]
    return shutil.which(name, path=os.pathsep.join(d for d in directories if d))


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=WRAPPER_NAME, description="Record a compiler invocation, then run it")
    parser.add_argument("-t", "--target", type=Path, help="Trace directory (overrides COMPDB_TARGET)")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to record and run")
    return parser


def _command_and_settings(argv: Sequence[str]) -> tuple[list[str], InterceptSettings]:
    settings = load_intercept_settings()
    invoked = program_name(argv[0]) if argv else WRAPPER_NAME
    if invoked != WRAPPER_NAME:
        # Called through a shim: the shim name is the program the build asked for.
        return [invoked, *argv[1:]], settings

    args = _parser().parse_args(list(argv[1:]))
    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if args.target is not None:
        settings = InterceptSettings(target=args.target, enabled=settings.enabled, wrapper_dir=settings.wrapper_dir)
    return command, settings


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of ``compdb-wrapper`` and of every compiler shim.

    Unlike the ``compdb`` CLI, ``argv`` includes the program name, because
    the shim name selects the tool to run. Only returns on failure.
    """
    argv = list(sys.argv if argv is None else argv)
    command, settings = _command_and_settings(argv)
    if not command:
        print(f"{WRAPPER_NAME}: expected a command to run", file=sys.stderr)
        return 2

    capture(command, settings)

    executable = resolve_executable(command[0], settings.wrapper_dir)
    if executable is None:
        print(f"{WRAPPER_NAME}: {command[0]}: command not found", file=sys.stderr)
        return EXIT_NOT_FOUND
    try:
        os.execv(executable, command)
    except OSError as e:
        print(f"{WRAPPER_NAME}: {command[0]}: {e}", file=sys.stderr)
        return EXIT_NOT_EXECUTABLE
    return 0  # only reached when os.execv is replaced in tests


__all__ = [
    "DEFAULT_SHIM_NAMES",
    "WRAPPER_NAME",
    "find_wrapper",
    "install_shims",
    "main",
    "resolve_executable",
]
