"""
Sections router: read access to the current snapshot plus reload.

Endpoints (relative to the configured prefix):
    GET  ""           All sections (404 until the first successful load)
    GET  /__count     Number of sections, plain text
    GET  /__ids       One ``{"id": uuid}`` JSON object per line
    POST /__reload    Reload from the taxonomy source
    GET  /{uuid}      One section (404 if absent)

Read endpoints are plain ``def`` so they run in the threadpool; the reload
endpoint blocks on upstream I/O and must never run on the event loop.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Path, Request
from fastapi.responses import PlainTextResponse, Response

from sections_transformer.api.deps import Store
from sections_transformer.api.middleware.errors import problem_response
from sections_transformer.api.schemas.sections import ReloadResponse, SectionSchema

router = APIRouter()


def _not_loaded(request: Request) -> Response:
    return problem_response(
        status=404,
        title="Sections not loaded",
        detail="The taxonomy has not been loaded yet",
        instance=str(request.url),
    )


@router.get("", response_model=list[SectionSchema])
def list_sections(request: Request, store: Store):
    """All sections of the current snapshot."""
    sections, found = store.get_all()
    if not found:
        return _not_loaded(request)
    return [SectionSchema.from_section(s) for s in sections]


@router.get("/__count", response_class=PlainTextResponse)
def count_sections(store: Store) -> PlainTextResponse:
    """Number of sections in the current snapshot (0 before the first load)."""
    return PlainTextResponse(str(store.get_count()))


@router.get("/__ids", response_class=PlainTextResponse)
def list_section_ids(store: Store) -> PlainTextResponse:
    """UUIDs in snapshot order, newline-delimited JSON objects."""
    lines = "".join(json.dumps({"id": u}) + "\n" for u in store.get_uuids())
    return PlainTextResponse(lines)


@router.post("/__reload", response_model=ReloadResponse)
def reload_sections(store: Store) -> ReloadResponse:
    """Reload from the source; 409 if a reload is running, 503 if the source fails."""
    snapshot = store.reload()
    return ReloadResponse(
        count=snapshot.count,
        version=snapshot.version,
        skipped=snapshot.skipped,
        loaded_at=snapshot.loaded_at,
    )


@router.get("/{uuid}", response_model=SectionSchema)
def get_section(
    request: Request,
    store: Store,
    uuid: str = Path(..., description="Section UUID"),
):
    """One section by UUID."""
    section, found = store.get_by_uuid(uuid)
    if not found:
        return problem_response(
            status=404,
            title="Section not found",
            detail=f"No section with uuid {uuid!r} in the current snapshot",
            instance=str(request.url),
        )
    return SectionSchema.from_section(section)
