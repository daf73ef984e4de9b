"""Tests for the database aggregator."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from compdb_core.compilation import CompilerPhase
from compdb_core.database import Aggregator, DatabaseOptions, DuplicatePolicy, deduplicate, dumps_database, to_database, write_database
from compdb_core.exceptions import TraceIOError
from compdb_core.trace import LocalTraceStore, MemoryTraceStore, TraceLocation
from tests.support.helpers import make_record


class ReversedMemoryStore(MemoryTraceStore):
    """Enumerates newest first, like a directory listing in arbitrary order."""

    def locations(self) -> Iterator[TraceLocation]:
        yield from reversed(list(super().locations()))


def _store_with(*cmds: tuple[str, ...], cwd: str = "/build") -> MemoryTraceStore:
    store = MemoryTraceStore()
    for cmd in cmds:
        store.write(make_record(*cmd, cwd=cwd))
    return store


class TestInclusion:
    def test_compile_steps_are_kept(self):
        store = _store_with(("cc", "-c", "a.c"), ("cc", "-S", "b.c"))
        entries = Aggregator(store).run()
        assert [(e.source, e.phase) for e in entries] == [("a.c", CompilerPhase.COMPILATION), ("b.c", CompilerPhase.ASSEMBLY)]

    def test_preprocessing_linking_and_non_compilers_are_excluded(self):
        store = _store_with(
            ("make", "all"),
            ("cc", "-E", "a.c"),
            ("cc", "main.c", "-o", "app"),
            ("ld", "-o", "app", "main.o"),
            ("cc", "-c", "b.c"),
        )
        entries = Aggregator(store).run()
        assert [e.source for e in entries] == ["b.c"]

    def test_custom_include_phases(self):
        store = _store_with(("cc", "-E", "a.c"), ("cc", "-c", "b.c"), ("cc", "main.c"))
        options = DatabaseOptions(include_phases=frozenset({CompilerPhase.PREPROCESSING, CompilerPhase.LINKING}))
        entries = Aggregator(store, options=options).run()
        assert [e.source for e in entries] == ["a.c", "main.c"]

    def test_link_steps_without_source_follow_inclusion_policy(self):
        store = _store_with(("ld", "-o", "app", "main.o"), ("cc", "-c", "main.c"))
        assert [e.source for e in Aggregator(store).run()] == ["main.c"]

        options = DatabaseOptions(include_phases=frozenset(CompilerPhase))
        entries = Aggregator(store, options=options).run()
        assert [(e.phase, e.source, e.output) for e in entries] == [
            (CompilerPhase.LINKING, None, "app"),
            (CompilerPhase.COMPILATION, "main.c", None),
        ]

    def test_link_steps_without_source_deduplicate_by_output(self):
        store = _store_with(
            ("ld", "-o", "app", "old.o"),
            ("ld", "-o", "lib.so", "x.o"),
            ("ld", "-o", "app", "new.o"),
        )
        options = DatabaseOptions(include_phases=frozenset({CompilerPhase.LINKING}))
        entries = Aggregator(store, options=options).run()
        assert [(e.output, e.flags) for e in entries] == [("lib.so", ("x.o",)), ("app", ("new.o",))]

    def test_empty_store(self):
        aggregator = Aggregator(MemoryTraceStore())
        assert aggregator.run() == []
        assert aggregator.report.traces_read == 0


class TestDuplicates:
    def test_last_wins(self):
        store = _store_with(("cc", "-c", "x.c", "-O0"), ("cc", "-c", "y.c"), ("cc", "-c", "x.c", "-O2"))
        entries = Aggregator(store).run()
        assert [(e.source, e.flags) for e in entries] == [("y.c", ("-c",)), ("x.c", ("-c", "-O2"))]

    def test_same_source_in_different_directories_is_not_a_duplicate(self):
        store = MemoryTraceStore()
        store.write(make_record("cc", "-c", "x.c", cwd="/build/a"))
        store.write(make_record("cc", "-c", "x.c", cwd="/build/b"))
        entries = Aggregator(store).run()
        assert [e.cwd for e in entries] == ["/build/a", "/build/b"]

    def test_keep_all(self):
        store = _store_with(("cc", "-c", "x.c", "-O0"), ("cc", "-c", "x.c", "-O2"))
        options = DatabaseOptions(duplicate_policy=DuplicatePolicy.KEEP_ALL)
        entries = Aggregator(store, options=options).run()
        assert [e.flags for e in entries] == [("-c", "-O0"), ("-c", "-O2")]

    def test_deduplicate_keeps_position_of_last_occurrence(self):
        store = _store_with(("cc", "-c", "a.c"), ("cc", "-c", "b.c"), ("cc", "-c", "a.c", "-g"))
        entries = Aggregator(store, options=DatabaseOptions(duplicate_policy=DuplicatePolicy.KEEP_ALL)).run()
        assert [e.source for e in deduplicate(entries)] == ["b.c", "a.c"]


class TestOrdering:
    def test_order_follows_write_sequence_not_enumeration(self):
        store = ReversedMemoryStore()
        for name in ("a.c", "b.c", "c.c"):
            store.write(make_record("cc", "-c", name))
        entries = Aggregator(store).run()
        assert [e.source for e in entries] == ["a.c", "b.c", "c.c"]

    def test_later_write_wins_regardless_of_enumeration(self):
        store = ReversedMemoryStore()
        store.write(make_record("cc", "-c", "x.c", "-O0"))
        store.write(make_record("cc", "-c", "x.c", "-O3"))
        [entry] = Aggregator(store).run()
        assert entry.flags == ("-c", "-O3")

    def test_local_store_order(self, local_store: LocalTraceStore):
        for name in ("one.c", "two.c", "three.c", "four.c"):
            local_store.write(make_record("gcc", "-c", name))
        entries = Aggregator(local_store).run()
        assert [e.source for e in entries] == ["one.c", "two.c", "three.c", "four.c"]


class TestRobustness:
    def test_corrupt_traces_are_skipped(self, local_store: LocalTraceStore, trace_dir: Path, compdb_caplog):
        local_store.write(make_record("cc", "-c", "good.c"))
        (trace_dir / f"{1:020d}-1-deadbeef.json").write_text('{"pid": 1, "cwd": "/b", "cmd": ["cc"', encoding="utf-8")
        (trace_dir / f"{2:020d}-1-cafebabe.json").write_text('{"pid": 1, "cwd": "relative", "cmd": ["cc"]}', encoding="utf-8")
        (trace_dir / ".partial.json.tmp").write_text("{", encoding="utf-8")

        aggregator = Aggregator(local_store)
        entries = aggregator.run()

        assert [e.source for e in entries] == ["good.c"]
        assert aggregator.report.traces_read == 1
        assert aggregator.report.traces_skipped == 2
        assert "Skipping trace" in compdb_caplog.text

    def test_missing_store_is_fatal(self, tmp_path: Path):
        with pytest.raises(TraceIOError):
            Aggregator(LocalTraceStore(tmp_path / "missing")).run()

    def test_report_counts(self):
        store = _store_with(("cc", "-c", "a.c", "b.c"), ("cc", "-c", "a.c"), ("make",))
        aggregator = Aggregator(store)
        aggregator.run()
        report = aggregator.report
        assert report.traces_read == 3
        assert report.traces_skipped == 0
        assert report.entries_classified == 3
        assert report.entries_kept == 2


class TestDeterminism:
    def test_rerun_produces_identical_bytes(self, local_store: LocalTraceStore, tmp_path: Path):
        for name in ("a.c", "b.c", "a.c"):
            local_store.write(make_record("cc", "-c", name, "-o", name.replace(".c", ".o")))

        first = write_database(tmp_path / "first.json", Aggregator(local_store).run())
        second = write_database(tmp_path / "second.json", Aggregator(local_store).run())

        assert first.read_bytes() == second.read_bytes()

    def test_aggregation_is_pure_over_the_store(self):
        store = _store_with(("cc", "-c", "a.c"), ("cc", "-c", "b.c"))
        assert dumps_database(to_database(Aggregator(store).run())) == dumps_database(to_database(Aggregator(store).run()))
