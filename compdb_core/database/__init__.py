"""Aggregation of classified traces into a compilation database."""

from .aggregator import AggregationReport, Aggregator, deduplicate
from .options import DatabaseOptions, DuplicatePolicy
from .output import (
    DEFAULT_DATABASE_NAME,
    dumps_database,
    merge_database,
    read_database,
    to_database,
    to_database_entry,
    write_database,
)

__all__ = [
    "DEFAULT_DATABASE_NAME",
    "AggregationReport",
    "Aggregator",
    "DatabaseOptions",
    "DuplicatePolicy",
    "deduplicate",
    "dumps_database",
    "merge_database",
    "read_database",
    "to_database",
    "to_database_entry",
    "write_database",
]
