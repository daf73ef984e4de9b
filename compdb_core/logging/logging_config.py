"""Centralized logging configuration for compdb-core.

@public

Supports YAML-based configuration (logging.config.dictConfig format) and a
built-in default. Environment variables override the defaults so that a
traced child process inherits the parent's verbosity.

Environment variables:
    COMPDB_LOGGING_CONFIG: Path to a custom logging.yml
    COMPDB_LOG_LEVEL: Default level for the compdb_core logger tree
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PACKAGE_LOGGER = "compdb_core"

# Default log levels for different components
DEFAULT_LOG_LEVELS = {
    "compdb_core": "INFO",
    "compdb_core.trace": "INFO",
    "compdb_core.compilation": "INFO",
    "compdb_core.database": "INFO",
}


class LoggingConfig:
    """Manages logging configuration for the package.

    @public

    Configuration precedence:
        1. Explicit config_path parameter
        2. COMPDB_LOGGING_CONFIG environment variable
        3. Default configuration

    Example:
        >>> config = LoggingConfig()
        >>> config.apply()
        >>>
        >>> config = LoggingConfig(Path("custom_logging.yml"))
        >>> config.apply()

    Note:
        Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config: Optional[Dict[str, Any]] = None

    @staticmethod
    def _get_default_config_path() -> Optional[Path]:
        """Get config path from COMPDB_LOGGING_CONFIG, if set."""
        if env_path := os.environ.get("COMPDB_LOGGING_CONFIG"):
            return Path(env_path)
        return None

    def load_config(self) -> Dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary in logging.config.dictConfig format. Cached after the
            first call; create a new LoggingConfig to reload from disk.
        """
        if self._config is None:
            loaded: Any = None
            if self.config_path and self.config_path.exists():
                try:
                    with open(self.config_path, "r") as f:
                        loaded = yaml.safe_load(f)
                except (OSError, yaml.YAMLError):
                    loaded = None
            # Unreadable or non-mapping files fall back to the default config.
            self._config = loaded if isinstance(loaded, dict) else self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config(level: Optional[str] = None) -> Dict[str, Any]:
        """Get default logging configuration.

        Args:
            level: Package log level. Defaults to COMPDB_LOG_LEVEL, then INFO.

        Default format:
            "HH:MM:SS.mmm | LEVEL | logger.name - message"
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
                "detailed": {
                    "format": (
                        "%(asctime)s | %(levelname)-7s | %(name)s | "
                        "%(funcName)s:%(lineno)d - %(message)s"
                    ),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                PACKAGE_LOGGER: {
                    "level": level or os.environ.get("COMPDB_LOG_LEVEL", "INFO"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self):
        """Apply the configuration to Python's logging system.

        Should be called once during application initialization. Multiple
        calls reconfigure logging. An invalid configuration (unknown level,
        bad handler) falls back to the built-in default at INFO.
        """
        config = self.load_config()
        try:
            logging.config.dictConfig(config)
        except ValueError as e:
            logging.config.dictConfig(self._get_default_config(level="INFO"))
            logging.getLogger(PACKAGE_LOGGER).warning(f"Invalid logging configuration, using defaults: {e}")


# Global configuration instance
_logging_config: Optional[LoggingConfig] = None


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Setup logging for compdb-core.

    @public

    Args:
        config_path: Optional path to YAML logging configuration file.
                    If None, uses environment variables or defaults.
        level: Optional log level override (INFO, DEBUG, WARNING, etc.).
              Overrides any level set in configuration or environment.

    Example:
        >>> setup_logging()
        >>> setup_logging(Path("/etc/compdb/logging.yml"))
        >>> setup_logging(level="DEBUG")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            logging.getLogger(logger_name).setLevel(level.upper())


def get_compdb_logger(name: str) -> logging.Logger:
    """Get a logger for package components.

    @public

    Args:
        name: Logger name, typically __name__.

    Returns:
        Logger configured by setup_logging(). Logging is initialized with
        defaults on first call if nothing has configured it yet.

    Example:
        >>> logger = get_compdb_logger(__name__)
        >>> logger.debug("Classified %d entries", 3)
    """
    if _logging_config is None:
        setup_logging()

    return logging.getLogger(name)
