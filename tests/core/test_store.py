"""Tests for sections_transformer.core.store."""

from __future__ import annotations

import threading

import pytest

from sections_transformer.core.errors import (
    ReloadInProgressError,
    SourceUnavailableError,
    TransformError,
)
from sections_transformer.core.models import RawTerm
from sections_transformer.core.store import SectionStore, Snapshot, build_snapshot
from sections_transformer.core.transform import transform_section
from sections_transformer.sources.static import StaticSource
from tests._support import AFRICA_UUID


class BlockingSource(StaticSource):
    """Static source whose fetch blocks until released."""

    def __init__(self, terms):
        super().__init__(terms, name="blocking")
        self.entered = threading.Event()
        self.release = threading.Event()

    def fetch_terms(self, taxonomy_name):
        self.entered.set()
        assert self.release.wait(timeout=5), "test never released the fetch"
        return super().fetch_terms(taxonomy_name)


def _terms(prefix: str, n: int) -> list[RawTerm]:
    return [RawTerm(canonical_name=f"{prefix}-{i}", raw_id=f"{prefix}_{i}") for i in range(n)]


class TestBeforeFirstLoad:
    def test_get_all_not_found(self, store):
        assert store.get_all() == ([], False)

    def test_get_by_uuid_not_found(self, store):
        assert store.get_by_uuid(AFRICA_UUID) == (None, False)

    def test_count_and_uuids_empty(self, store):
        assert store.get_count() == 0
        assert store.get_uuids() == []
        assert store.snapshot is None
        assert not store.is_loaded


class TestReads:
    def test_get_all(self, loaded_store, sample_terms):
        sections, found = loaded_store.get_all()
        assert found is True
        assert [s.pref_label for s in sections] == [t.canonical_name for t in sample_terms]

    def test_get_by_uuid(self, loaded_store):
        section, found = loaded_store.get_by_uuid(AFRICA_UUID)
        assert found is True
        assert section.pref_label == "Africa Section"

    def test_get_by_uuid_absent_returns_none(self, loaded_store):
        section, found = loaded_store.get_by_uuid("00000000-0000-0000-0000-000000000000")
        assert found is False
        assert section is None

    def test_count(self, loaded_store):
        assert loaded_store.get_count() == 3

    def test_uuids_in_upstream_order(self, loaded_store, sample_terms):
        expected = [transform_section(t, "Sections").uuid for t in sample_terms]
        assert loaded_store.get_uuids() == expected

    def test_returned_list_is_a_copy(self, loaded_store):
        loaded_store.get_uuids().clear()
        sections, _ = loaded_store.get_all()
        sections.clear()
        assert loaded_store.get_count() == 3
        assert len(loaded_store.get_uuids()) == 3


class TestReload:
    def test_empty_upstream_is_loaded(self):
        store = SectionStore(StaticSource([]))
        snapshot = store.reload()
        assert snapshot.count == 0
        assert store.get_count() == 0
        assert store.get_all() == ([], True)

    def test_reload_is_idempotent(self, store):
        first = store.reload()
        second = store.reload()
        assert dict(first.by_uuid) == dict(second.by_uuid)
        assert first.ordered_uuids == second.ordered_uuids
        assert second.version == first.version + 1

    def test_reload_picks_up_new_terms(self, loaded_store, source):
        source.set_terms(_terms("new", 5))
        loaded_store.reload()
        assert loaded_store.get_count() == 5
        assert loaded_store.get_by_uuid(AFRICA_UUID) == (None, False)

    def test_failed_reload_keeps_previous_snapshot(self, loaded_store, source):
        before_snapshot = loaded_store.snapshot
        before_all = loaded_store.get_all()
        before_count = loaded_store.get_count()

        source.set_available(False)
        with pytest.raises(SourceUnavailableError):
            loaded_store.reload()

        assert loaded_store.snapshot is before_snapshot
        assert loaded_store.get_count() == before_count
        assert loaded_store.get_all() == before_all

    def test_failed_first_load_stays_unloaded(self, store, source):
        source.set_available(False)
        with pytest.raises(SourceUnavailableError):
            store.reload()
        assert store.get_all() == ([], False)

    def test_store_recovers_after_failure(self, loaded_store, source):
        source.set_available(False)
        with pytest.raises(SourceUnavailableError):
            loaded_store.reload()
        source.set_available(True)
        assert loaded_store.reload().version == 2

    def test_published_snapshot_is_immutable(self, loaded_store):
        snapshot = loaded_store.snapshot
        with pytest.raises(TypeError):
            snapshot.by_uuid["x"] = None  # type: ignore[index]
        assert isinstance(snapshot.ordered_uuids, tuple)


class TestDuplicatePolicy:
    def test_first_seen_wins(self):
        terms = [
            RawTerm(canonical_name="First", raw_id="dup"),
            RawTerm(canonical_name="Other", raw_id="other"),
            RawTerm(canonical_name="Second", raw_id="dup"),
        ]
        store = SectionStore(StaticSource(terms))
        snapshot = store.reload()

        dup_uuid = transform_section(terms[0], "Sections").uuid
        section, found = store.get_by_uuid(dup_uuid)
        assert found
        assert section.pref_label == "First"
        assert snapshot.count == 2
        assert snapshot.skipped == 1
        assert store.get_uuids()[0] == dup_uuid


class TestTransformFailures:
    def test_failing_term_is_skipped(self, sample_terms):
        def picky(term, taxonomy_name):
            if term.canonical_name == "World":
                raise TransformError("rejected")
            return transform_section(term, taxonomy_name)

        store = SectionStore(StaticSource(sample_terms), transformer=picky)
        snapshot = store.reload()
        assert snapshot.count == 2
        assert snapshot.skipped == 1
        assert "World" not in [s.pref_label for s in store.get_all()[0]]

    def test_skipped_error_names_the_term(self, sample_terms):
        raised: list[TransformError] = []

        def reject_all(term, taxonomy_name):
            err = TransformError("rejected")
            raised.append(err)
            raise err

        snapshot = build_snapshot(sample_terms, "Sections", version=1, transformer=reject_all)
        assert snapshot.count == 0
        assert snapshot.skipped == 3
        assert [e.context.raw_id for e in raised] == [t.raw_id for t in sample_terms]
        assert raised[0].context.taxonomy == "Sections"


class TestBuildSnapshot:
    def test_count_matches_indexes(self, sample_terms):
        snapshot = build_snapshot(sample_terms, "Sections", version=7)
        assert isinstance(snapshot, Snapshot)
        assert snapshot.version == 7
        assert snapshot.count == len(snapshot.by_uuid) == len(snapshot.ordered_uuids) == 3


class TestConcurrency:
    def test_concurrent_reload_is_rejected(self, sample_terms):
        source = BlockingSource(sample_terms)
        store = SectionStore(source)
        errors: list[Exception] = []

        def background():
            try:
                store.reload()
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        worker = threading.Thread(target=background)
        worker.start()
        assert source.entered.wait(timeout=5)
        assert store.is_reloading

        with pytest.raises(ReloadInProgressError):
            store.reload()

        source.release.set()
        worker.join(timeout=5)
        assert not errors
        assert store.get_count() == 3
        assert not store.is_reloading

    def test_reads_not_blocked_by_inflight_reload(self, sample_terms):
        source = BlockingSource(sample_terms)
        source.release.set()
        store = SectionStore(source)
        store.reload()
        source.release.clear()
        source.entered.clear()
        source.set_terms(_terms("next", 10))

        worker = threading.Thread(target=store.reload)
        worker.start()
        assert source.entered.wait(timeout=5)

        # Reload is parked inside the fetch; reads answer from the old snapshot.
        assert store.get_count() == 3
        assert store.get_by_uuid(AFRICA_UUID)[1] is True

        source.release.set()
        worker.join(timeout=5)
        assert store.get_count() == 10

    def test_readers_see_whole_snapshots(self):
        generation_a = _terms("a", 3)
        generation_b = _terms("b", 7)
        source = StaticSource(generation_a)
        store = SectionStore(source)
        store.reload()

        stop = threading.Event()
        problems: list[str] = []

        def reader():
            while not stop.is_set():
                sections, found = store.get_all()
                prefixes = {s.pref_label.split("-")[0] for s in sections}
                if not found or len(prefixes) != 1:
                    problems.append(f"mixed snapshot: {prefixes}")
                expected = 3 if prefixes == {"a"} else 7
                if len(sections) != expected:
                    problems.append(f"length {len(sections)} for {prefixes}")
                snapshot = store.snapshot
                if snapshot.count != len(snapshot.sections()):
                    problems.append("snapshot count disagrees with its sections")

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in readers:
            t.start()
        for i in range(200):
            source.set_terms(generation_b if i % 2 == 0 else generation_a)
            store.reload()
        stop.set()
        for t in readers:
            t.join(timeout=5)

        assert problems == []


class TestConnectivity:
    def test_ok(self, store):
        store.check_connectivity()

    def test_failure_raises_without_touching_snapshot(self, loaded_store, source):
        snapshot = loaded_store.snapshot
        source.set_available(False)
        with pytest.raises(SourceUnavailableError):
            loaded_store.check_connectivity()
        assert loaded_store.snapshot is snapshot
        assert source.fetch_count == 1
