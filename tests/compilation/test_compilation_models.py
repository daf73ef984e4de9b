"""Tests for CompilerPhase and CompilationEntry."""

import pytest
from pydantic import ValidationError

from compdb_core.compilation import CompilationEntry, CompilerPhase


class TestCompilerPhase:
    def test_pipeline_order(self):
        assert [p.rank for p in CompilerPhase] == [0, 1, 2, 3]
        assert list(CompilerPhase) == [
            CompilerPhase.PREPROCESSING,
            CompilerPhase.COMPILATION,
            CompilerPhase.ASSEMBLY,
            CompilerPhase.LINKING,
        ]

    def test_most_restrictive_wins(self):
        phases = [CompilerPhase.ASSEMBLY, CompilerPhase.PREPROCESSING, CompilerPhase.COMPILATION]
        assert CompilerPhase.most_restrictive(phases) is CompilerPhase.PREPROCESSING

    def test_no_marker_means_linking(self):
        assert CompilerPhase.most_restrictive([]) is CompilerPhase.LINKING

    def test_values_are_strings(self):
        assert CompilerPhase("compilation") is CompilerPhase.COMPILATION
        assert str(CompilerPhase.ASSEMBLY) == "assembly"


class TestCompilationEntry:
    def test_arguments_append_source(self):
        entry = CompilationEntry(
            compiler="cc", phase=CompilerPhase.COMPILATION, flags=("-c", "-O2"), source="foo.c", output="foo.o", cwd="/build"
        )
        assert entry.arguments() == ["cc", "-c", "-O2", "foo.c"]
        assert entry.key == ("foo.c", "/build")

    def test_arguments_without_source(self):
        entry = CompilationEntry(compiler="ld", phase=CompilerPhase.LINKING, flags=("a.o",), cwd="/build")
        assert entry.arguments() == ["ld", "a.o"]
        assert entry.source is None
        assert entry.output is None

    def test_frozen(self):
        entry = CompilationEntry(compiler="cc", phase=CompilerPhase.LINKING, cwd="/build")
        with pytest.raises(ValidationError):
            entry.compiler = "gcc"  # type: ignore[misc]
