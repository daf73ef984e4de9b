"""Logging infrastructure for compdb-core.

@public

Every module obtains its logger through get_compdb_logger(), which applies
the package logging configuration on first use. Diagnostics go to stderr so
the observed build's own stdout is left untouched.

Key components:
    get_compdb_logger: Factory function for package loggers
    setup_logging: Initialize logging configuration from YAML or defaults
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from compdb_core.logging import get_compdb_logger
    >>>
    >>> logger = get_compdb_logger(__name__)
    >>> logger.info("Aggregation started")
"""

from .logging_config import LoggingConfig, get_compdb_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_compdb_logger",
]
