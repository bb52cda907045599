"""
Shared pytest fixtures for sections-transformer tests.

Provides raw terms, an in-memory source, stores (empty and loaded) and a
FastAPI ``TestClient`` over a loaded store.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from sections_transformer.api.app import create_app
from sections_transformer.core.models import RawTerm
from sections_transformer.core.settings import SectionsSettings
from sections_transformer.core.store import SectionStore
from sections_transformer.sources.static import StaticSource


@pytest.fixture
def africa_term() -> RawTerm:
    return RawTerm(canonical_name="Africa Section", raw_id="Nstein_GL_AFTM_GL_164835")


@pytest.fixture
def sample_terms(africa_term: RawTerm) -> list[RawTerm]:
    return [
        africa_term,
        RawTerm(canonical_name="World", raw_id="Nstein_GL_AFTM_GL_100001"),
        RawTerm(canonical_name="Companies", raw_id="Nstein_GL_AFTM_GL_100002"),
    ]


@pytest.fixture
def source(sample_terms: list[RawTerm]) -> StaticSource:
    return StaticSource(sample_terms)


@pytest.fixture
def store(source: StaticSource) -> SectionStore:
    return SectionStore(source, "Sections")


@pytest.fixture
def loaded_store(store: SectionStore) -> SectionStore:
    store.reload()
    return store


@pytest.fixture
def settings() -> SectionsSettings:
    return SectionsSettings(source="static", load_on_startup=False, log_json=True)


@pytest.fixture
def client(settings: SectionsSettings, loaded_store: SectionStore) -> Generator[TestClient, None, None]:
    app = create_app(settings=settings, store=loaded_store)
    with TestClient(app) as c:
        yield c
