"""Tests for the sections router."""

from __future__ import annotations

import json
import threading
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from sections_transformer.api.app import create_app
from sections_transformer.core.models import RawTerm
from sections_transformer.core.store import SectionStore
from sections_transformer.sources.static import StaticSource
from tests._support import AFRICA_TME_ID, AFRICA_UUID

PREFIX = "/transformers/sections"

pytestmark = pytest.mark.integration


class TestListSections:
    def test_lists_all(self, client):
        resp = client.get(PREFIX)
        assert resp.status_code == 200
        body = resp.json()
        assert len(body) == 3
        assert body[0] == {
            "uuid": AFRICA_UUID,
            "prefLabel": "Africa Section",
            "alternativeIdentifiers": {"TME": [AFRICA_TME_ID], "uuids": [AFRICA_UUID]},
            "type": "Section",
        }

    def test_not_loaded(self, settings, store):
        with TestClient(create_app(settings=settings, store=store)) as c:
            resp = c.get(PREFIX)
        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("application/problem+json")
        assert resp.json()["title"] == "Sections not loaded"

    def test_loaded_empty(self, settings):
        store = SectionStore(StaticSource(), "Sections")
        store.reload()
        with TestClient(create_app(settings=settings, store=store)) as c:
            resp = c.get(PREFIX)
        assert resp.status_code == 200
        assert resp.json() == []


class TestGetSection:
    def test_found(self, client):
        resp = client.get(f"{PREFIX}/{AFRICA_UUID}")
        assert resp.status_code == 200
        assert resp.json()["prefLabel"] == "Africa Section"

    def test_not_found(self, client):
        resp = client.get(f"{PREFIX}/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert resp.json()["title"] == "Section not found"


class TestCountAndIds:
    def test_count(self, client):
        resp = client.get(f"{PREFIX}/__count")
        assert resp.status_code == 200
        assert resp.text == "3"

    def test_count_before_load(self, settings, store):
        with TestClient(create_app(settings=settings, store=store)) as c:
            assert c.get(f"{PREFIX}/__count").text == "0"

    def test_ids(self, client, loaded_store):
        resp = client.get(f"{PREFIX}/__ids")
        assert resp.status_code == 200
        lines = resp.text.splitlines()
        assert [json.loads(line)["id"] for line in lines] == loaded_store.get_uuids()
        assert lines[0] == json.dumps({"id": AFRICA_UUID})


class TestReload:
    def test_reload_picks_up_changes(self, client, source):
        source.set_terms([RawTerm("World", "Nstein_GL_AFTM_GL_100001")])
        resp = client.post(f"{PREFIX}/__reload")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 1
        assert body["version"] == 2
        assert client.get(f"{PREFIX}/__count").text == "1"

    def test_reload_reports_publish_time(self, client, loaded_store):
        resp = client.post(f"{PREFIX}/__reload")
        assert resp.status_code == 200
        loaded_at = datetime.fromisoformat(resp.json()["loaded_at"])
        assert loaded_at == loaded_store.snapshot.loaded_at

    def test_source_down_keeps_snapshot(self, client, source):
        source.set_available(False)
        resp = client.post(f"{PREFIX}/__reload")
        assert resp.status_code == 503
        assert resp.json()["title"] == "SourceUnavailableError"
        assert resp.headers["Retry-After"] == "5"
        assert client.get(f"{PREFIX}/__count").text == "3"

    def test_concurrent_reload_conflict(self, settings, sample_terms):
        entered = threading.Event()
        release = threading.Event()

        class SlowSource(StaticSource):
            def fetch_terms(self, taxonomy_name):
                entered.set()
                release.wait(timeout=5)
                return super().fetch_terms(taxonomy_name)

        store = SectionStore(SlowSource(sample_terms), "Sections")
        worker = threading.Thread(target=store.reload)
        worker.start()
        try:
            assert entered.wait(timeout=5)
            with TestClient(create_app(settings=settings, store=store)) as c:
                resp = c.post(f"{PREFIX}/__reload")
            assert resp.status_code == 409
            assert resp.json()["title"] == "ReloadInProgressError"
        finally:
            release.set()
            worker.join(timeout=5)
        assert store.get_count() == 3
