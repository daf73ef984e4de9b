"""Serialization of the compilation database (compile_commands.json).

Each element carries ``directory``, ``file``, ``arguments`` (or a
shell-quoted ``command``) and ``output`` when the invocation named one.
Output is deterministic: the same entries always produce the same bytes.
"""

import contextlib
import json
import os
import shlex
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from compdb_core.compilation.models import CompilationEntry
from compdb_core.database.options import DuplicatePolicy
from compdb_core.exceptions import DatabaseReadError, DatabaseWriteError
from compdb_core.logging import get_compdb_logger

logger = get_compdb_logger(__name__)

DEFAULT_DATABASE_NAME = "compile_commands.json"


def to_database_entry(entry: CompilationEntry, command_style: bool = False) -> dict[str, Any]:
    """Render one entry in the conventional compilation database shape."""
    if entry.source is None:
        raise ValueError(f"Entry without source cannot be serialized: {entry.compiler} in {entry.cwd}")
    element: dict[str, Any] = {"directory": entry.cwd, "file": entry.source}
    if command_style:
        element["command"] = shlex.join(entry.arguments())
    else:
        element["arguments"] = entry.arguments()
    if entry.output is not None:
        element["output"] = entry.output
    return element


def to_database(entries: Iterable[CompilationEntry], command_style: bool = False) -> list[dict[str, Any]]:
    """Render entries in order. Link steps without a source have no database element and are skipped."""
    elements: list[dict[str, Any]] = []
    for entry in entries:
        if entry.source is None:
            logger.debug(f"Skipping {entry.compiler} link step without source in {entry.cwd}")
            continue
        elements.append(to_database_entry(entry, command_style))
    return elements


def merge_database(
    existing: list[dict[str, Any]],
    new: list[dict[str, Any]],
    policy: DuplicatePolicy = DuplicatePolicy.LAST_WINS,
) -> list[dict[str, Any]]:
    """Append ``new`` elements to an existing database.

    Under LAST_WINS, elements of ``new`` replace existing ones with the same
    (file, directory).
    """
    if policy is DuplicatePolicy.KEEP_ALL:
        return [*existing, *new]
    survivors: dict[tuple[Any, Any], dict[str, Any]] = {}
    for element in (*existing, *new):
        key = (element.get("file"), element.get("directory"))
        survivors.pop(key, None)
        survivors[key] = element
    return list(survivors.values())


def dumps_database(elements: list[dict[str, Any]]) -> str:
    return json.dumps(elements, indent=2, ensure_ascii=False) + "\n"


def write_database(
    path: Path,
    entries: Iterable[CompilationEntry] | None = None,
    *,
    command_style: bool = False,
    elements: list[dict[str, Any]] | None = None,
) -> Path:
    """Write the database atomically: temp file in the same directory, then replace.

    Pass either compilation ``entries`` or pre-rendered ``elements``.

    Raises:
        DatabaseWriteError: The file cannot be written. Fatal for the caller.
    """
    if elements is None:
        elements = to_database(entries or (), command_style)
    content = dumps_database(elements)

    path = Path(path)
    temp_name: str | None = None
    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(temp_name, 0o644)
        os.replace(temp_name, path)
    except OSError as e:
        if temp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(temp_name)
        raise DatabaseWriteError(f"Cannot write compilation database {path}: {e}") from e

    logger.info(f"Wrote {len(elements)} entries to {path}")
    return path


def read_database(path: Path) -> list[dict[str, Any]]:
    """Load an existing database. A missing file is an empty database.

    Raises:
        DatabaseReadError: The file exists but is unreadable or not a JSON array of objects.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return []
    except OSError as e:
        raise DatabaseReadError(f"Cannot read compilation database {path}: {e}") from e

    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DatabaseReadError(f"Malformed compilation database {path}: {e}") from e
    if not isinstance(data, list) or not all(isinstance(element, dict) for element in data):
        raise DatabaseReadError(f"Compilation database {path} is not a JSON array of objects")
    return data


__all__ = [
    "DEFAULT_DATABASE_NAME",
    "dumps_database",
    "merge_database",
    "read_database",
    "to_database",
    "to_database_entry",
    "write_database",
]
