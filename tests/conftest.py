"""Common test fixtures for compdb-core."""

import logging
import os
from pathlib import Path

import pytest

from compdb_core.trace import LocalTraceStore


@pytest.fixture(autouse=True)
def clean_compdb_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep COMPDB_* variables of the developer's shell out of every test."""
    for name in list(os.environ):
        if name.startswith("COMPDB_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def trace_dir(tmp_path: Path) -> Path:
    path = tmp_path / "traces"
    path.mkdir()
    return path


@pytest.fixture
def local_store(trace_dir: Path) -> LocalTraceStore:
    return LocalTraceStore(trace_dir)


@pytest.fixture
def compdb_caplog(caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch) -> pytest.LogCaptureFixture:
    """caplog that also sees the package loggers (they do not propagate by default)."""
    monkeypatch.setattr(logging.getLogger("compdb_core"), "propagate", True)
    caplog.set_level(logging.DEBUG, logger="compdb_core")
    return caplog
