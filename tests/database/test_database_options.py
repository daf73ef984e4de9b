"""Tests for DatabaseOptions and ClassifierOptions environment handling."""

import pytest
from pydantic import ValidationError

from compdb_core.compilation import DEFAULT_SOURCE_SUFFIXES, ClassifierOptions, CompilerPhase
from compdb_core.database import DatabaseOptions, DuplicatePolicy


class TestDatabaseOptions:
    def test_defaults(self):
        options = DatabaseOptions()
        assert options.include_phases == {CompilerPhase.COMPILATION, CompilerPhase.ASSEMBLY}
        assert options.duplicate_policy is DuplicatePolicy.LAST_WINS
        assert options.command_style is False

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("COMPDB_DUPLICATE_POLICY", "keep_all")
        monkeypatch.setenv("COMPDB_COMMAND_STYLE", "true")
        monkeypatch.setenv("COMPDB_INCLUDE_PHASES", '["compilation"]')
        options = DatabaseOptions()
        assert options.duplicate_policy is DuplicatePolicy.KEEP_ALL
        assert options.command_style is True
        assert options.include_phases == {CompilerPhase.COMPILATION}

    def test_frozen(self):
        options = DatabaseOptions()
        with pytest.raises(ValidationError):
            options.command_style = True  # type: ignore[misc]


class TestClassifierOptions:
    def test_defaults(self):
        options = ClassifierOptions()
        assert options.source_suffixes == DEFAULT_SOURCE_SUFFIXES
        assert {".c", ".cpp", ".C", ".s", ".S", ".cu"} <= options.source_suffixes
        assert ".h" not in options.source_suffixes
        assert ".o" not in options.source_suffixes

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("COMPDB_EXTRA_GCC_COMPILERS", '["tcc"]')
        monkeypatch.setenv("COMPDB_SOURCE_SUFFIXES", '[".c", ".pc"]')
        options = ClassifierOptions()
        assert options.extra_gcc_compilers == ("tcc",)
        assert options.source_suffixes == {".c", ".pc"}
