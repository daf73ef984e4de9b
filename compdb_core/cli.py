"""Command-line interface: run a build under interception and write the database."""

import argparse
import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Any

from compdb_core.compilation.classifier import Classifier
from compdb_core.compilation.models import CompilerPhase
from compdb_core.database.aggregator import Aggregator
from compdb_core.database.options import DatabaseOptions, DuplicatePolicy
from compdb_core.database.output import (
    DEFAULT_DATABASE_NAME,
    merge_database,
    read_database,
    to_database,
    write_database,
)
from compdb_core.exceptions import DatabaseError, TraceIOError
from compdb_core.logging import get_compdb_logger, setup_logging
from compdb_core.settings import InterceptSettings
from compdb_core.trace.capture import capture
from compdb_core.trace.local import LocalTraceStore
from compdb_core.wrapper import DEFAULT_SHIM_NAMES, install_shims

logger = get_compdb_logger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _strip_separator(command: list[str]) -> list[str]:
    return command[1:] if command and command[0] == "--" else command


def _database_options(args: argparse.Namespace) -> DatabaseOptions:
    """Environment defaults, overridden by whatever was given on the command line."""
    overrides: dict[str, Any] = {}
    if args.keep_duplicates:
        overrides["duplicate_policy"] = DuplicatePolicy.KEEP_ALL
    if args.command_style:
        overrides["command_style"] = True
    if args.include_phase:
        overrides["include_phases"] = frozenset(CompilerPhase(phase) for phase in args.include_phase)
    return DatabaseOptions(**overrides)


def _aggregate(traces: Path, args: argparse.Namespace) -> int:
    """Aggregate ``traces`` into ``args.output``. Returns a process exit code."""
    options = _database_options(args)
    try:
        entries = Aggregator(LocalTraceStore(traces), Classifier(), options).run()
    except TraceIOError as e:
        logger.error(f"Cannot read traces: {e}")
        return 1

    elements = to_database(entries, options.command_style)
    try:
        if args.append:
            elements = merge_database(read_database(args.output), elements, options.duplicate_policy)
        write_database(args.output, elements=elements)
    except DatabaseError as e:
        logger.error(str(e))
        return 1
    return 0


def _cmd_intercept(args: argparse.Namespace) -> int:
    build = _strip_separator(args.build)
    if not build:
        logger.error("No build command given")
        return 2

    traces = args.traces or Path(tempfile.mkdtemp(prefix="compdb-traces-"))
    traces.mkdir(parents=True, exist_ok=True)
    shim_dir = Path(tempfile.mkdtemp(prefix="compdb-shims-"))
    try:
        try:
            install_shims(shim_dir, args.compiler or DEFAULT_SHIM_NAMES)
        except OSError as e:
            logger.error(f"Cannot install compiler shims: {e}")
            return 1
        settings = InterceptSettings(target=traces.resolve(), enabled=True, wrapper_dir=shim_dir)
        env = {
            **os.environ,
            **settings.to_environ(),
            "PATH": os.pathsep.join(filter(None, [str(shim_dir), os.environ.get("PATH", "")])),
        }
        logger.info(f"Running {build[0]} with traces in {traces}")
        try:
            build_status = subprocess.run(build, env=env, check=False).returncode
        except OSError as e:
            logger.error(f"Cannot run {build[0]}: {e}")
            build_status = 127

        status = _aggregate(traces, args)
    finally:
        shutil.rmtree(shim_dir, ignore_errors=True)
        if args.traces is None and not args.keep_traces:
            shutil.rmtree(traces, ignore_errors=True)

    return status or build_status


def _cmd_aggregate(args: argparse.Namespace) -> int:
    return _aggregate(args.traces, args)


def _cmd_capture(args: argparse.Namespace) -> int:
    command = _strip_separator(args.command)
    if not command:
        logger.error("No command given")
        return 2
    location = capture(command, store=LocalTraceStore(args.traces))
    if location is None:
        return 1
    print(location)
    return 0


def _add_database_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--output", type=Path, default=Path(DEFAULT_DATABASE_NAME), help="Compilation database path")
    parser.add_argument("--append", action="store_true", help="Merge into an existing database instead of replacing it")
    parser.add_argument("--keep-duplicates", action="store_true", help="Keep every entry per (file, directory)")
    parser.add_argument("--command-style", action="store_true", help="Emit 'command' strings instead of 'arguments' lists")
    parser.add_argument(
        "--include-phase",
        action="append",
        choices=[phase.value for phase in CompilerPhase],
        help="Phase to include (repeatable). Default: compilation and assembly",
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for compilation database generation."""
    parser = argparse.ArgumentParser(prog="compdb", description="Compilation database generator")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level override",
    )
    subparsers = parser.add_subparsers(dest="subcommand")

    # intercept
    intercept_parser = subparsers.add_parser("intercept", help="Run a build and record every compiler invocation")
    _add_database_arguments(intercept_parser)
    intercept_parser.add_argument("--traces", type=Path, help="Trace directory (default: temporary, removed afterwards)")
    intercept_parser.add_argument("--keep-traces", action="store_true", help="Keep the temporary trace directory")
    intercept_parser.add_argument("--compiler", action="append", help="Compiler name to intercept (repeatable)")
    intercept_parser.add_argument("build", nargs=argparse.REMAINDER, help="Build command, after --")

    # aggregate
    aggregate_parser = subparsers.add_parser("aggregate", help="Build the database from an existing trace directory")
    _add_database_arguments(aggregate_parser)
    aggregate_parser.add_argument("--traces", type=Path, required=True, help="Trace directory")

    # capture
    capture_parser = subparsers.add_parser("capture", help="Record a single invocation into a trace directory")
    capture_parser.add_argument("--traces", type=Path, required=True, help="Trace directory")
    capture_parser.add_argument("command", nargs=argparse.REMAINDER, help="Invocation to record, after --")

    args = parser.parse_args(argv)
    if args.log_level:
        setup_logging(level=args.log_level)

    handlers = {"intercept": _cmd_intercept, "aggregate": _cmd_aggregate, "capture": _cmd_capture}
    handler = handlers.get(args.subcommand)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


__all__ = ["main"]


if __name__ == "__main__":
    sys.exit(main())
