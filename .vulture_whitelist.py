"""Vulture whitelist: names used by frameworks or entry points, not direct code."""

# Pydantic validators, called by Pydantic
from compdb_core.trace.record import TraceRecord

TraceRecord.validate_cwd
TraceRecord.validate_cmd

# Console script entry points declared in pyproject.toml
from compdb_core import cli, wrapper

cli.main
wrapper.main

# Add more as vulture reports false positives
