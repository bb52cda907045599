"""
FastAPI application factory.

``create_app()`` wires settings, the section store, middleware, exception
handlers, routers and lifespan events into a single ``FastAPI`` instance.
It is the only place that decides which taxonomy source backs the store.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sections_transformer.api.deps import get_settings
from sections_transformer.api.middleware.errors import (
    transformer_error_handler,
    unhandled_exception_handler,
)
from sections_transformer.api.middleware.request_id import RequestIDMiddleware
from sections_transformer.api.middleware.timing import TimingMiddleware
from sections_transformer.core.errors import TransformerError
from sections_transformer.core.health import HealthCheck, SnapshotInfo, create_health_router
from sections_transformer.core.logging import configure_logging, get_logger
from sections_transformer.core.settings import SectionsSettings
from sections_transformer.core.store import SectionStore
from sections_transformer.sources import StaticSource, TaxonomySource, TMEClient

log = get_logger(__name__)


def build_source(settings: SectionsSettings) -> TaxonomySource:
    """Instantiate the taxonomy source selected by ``settings.source``."""
    if settings.source == "static":
        return StaticSource()
    return TMEClient.from_settings(settings)


def _snapshot_info(store: SectionStore) -> SnapshotInfo:
    snapshot = store.snapshot
    if snapshot is None:
        return SnapshotInfo()
    return SnapshotInfo(
        loaded=True,
        count=snapshot.count,
        version=snapshot.version,
        loaded_at=snapshot.loaded_at.isoformat(),
    )


def _initial_load(store: SectionStore) -> None:
    try:
        store.reload()
    except TransformerError as exc:
        # Not fatal: the service stays up and a later reload can succeed.
        log.warning("initial_load_failed", **exc.to_dict())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: start-up load and shutdown hooks."""
    settings: SectionsSettings = app.state.settings
    store: SectionStore = app.state.store

    log.info(
        "sections-transformer starting",
        version=app.version,
        taxonomy=store.taxonomy_name,
        source=store.source.name,
    )
    if settings.load_on_startup:
        threading.Thread(
            target=_initial_load,
            args=(store,),
            name="sections-initial-load",
            daemon=True,
        ).start()

    yield

    close = getattr(store.source, "close", None)
    if callable(close):
        close()
    log.info("sections-transformer shutting down")


def create_app(
    *,
    settings: SectionsSettings | None = None,
    store: SectionStore | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : SectionsSettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    store : SectionStore | None
        Pre-built store (useful for testing).  When ``None`` one is built
        over the source selected by ``settings.source``.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    if store is None:
        store = SectionStore(build_source(settings), settings.taxonomy_name)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(TransformerError, transformer_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from sections_transformer.api.routers import sections

    async def check_source() -> None:
        await asyncio.to_thread(store.check_connectivity)

    app.include_router(
        create_health_router(
            settings.api_title,
            version=settings.api_version,
            checks=[HealthCheck(store.source.name, check_source, timeout_s=settings.tme_timeout_s)],
            snapshot_info=lambda: _snapshot_info(store),
        ),
    )
    app.include_router(sections.router, prefix=settings.api_prefix, tags=["sections"])

    return app
