"""
FastAPI dependency injection: settings singleton and the section store.

Usage in routers::

    from sections_transformer.api.deps import Store

    @router.get("/__count")
    def count(store: Store):
        ...
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from sections_transformer.core.settings import SectionsSettings
from sections_transformer.core.store import SectionStore


@lru_cache(maxsize=1)
def get_settings() -> SectionsSettings:
    """Cached settings: loaded once per process."""
    return SectionsSettings()


def get_store(request: Request) -> SectionStore:
    """The store created by the app factory."""
    return request.app.state.store


Settings = Annotated[SectionsSettings, Depends(get_settings)]
Store = Annotated[SectionStore, Depends(get_store)]
