"""Health endpoints for the sections transformer.

The service has one upstream dependency, the taxonomy source, so health
is binary: every check passes (``healthy``) or the service cannot reload
(``unhealthy``).  The cached snapshot is reported alongside so operators
can tell "TME is down but we still serve data" from "nothing loaded yet".

Routes created by :func:`create_health_router`:

- ``GET /health``        full report, 503 when a check fails
- ``GET /health/ready``  same report, used as the readiness probe
- ``GET /health/live``   always 200 while the process runs
- ``GET /__gtg``         plain ``OK`` or 503 for load balancers
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

_START_TIME = time.monotonic()

Status = Literal["healthy", "unhealthy"]


class CheckResult(BaseModel):
    """Outcome of one dependency check."""

    status: Status
    latency_ms: float | None = None
    error: str | None = None


class SnapshotInfo(BaseModel):
    """What the store is serving right now."""

    loaded: bool = False
    count: int = 0
    version: int | None = None
    loaded_at: str | None = None


class HealthResponse(BaseModel):
    """Body of ``GET /health`` and ``GET /health/ready``."""

    status: Status = "healthy"
    service: str = ""
    version: str = ""
    uptime_s: float = 0.0
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    checks: dict[str, CheckResult] = Field(default_factory=dict)
    snapshot: SnapshotInfo | None = None


class LivenessResponse(BaseModel):
    status: str = "alive"


@dataclass
class HealthCheck:
    """A named async probe; it passes by returning and fails by raising."""

    name: str
    check_fn: Callable[[], Awaitable[Any]]
    timeout_s: float = 5.0


async def _run_check(check: HealthCheck) -> CheckResult:
    start = time.monotonic()
    try:
        await asyncio.wait_for(check.check_fn(), timeout=check.timeout_s)
    except TimeoutError:
        return CheckResult(status="unhealthy", error="timeout")
    except Exception as exc:  # noqa: BLE001
        return CheckResult(
            status="unhealthy",
            latency_ms=round((time.monotonic() - start) * 1000, 2),
            error=str(exc)[:200],
        )
    return CheckResult(status="healthy", latency_ms=round((time.monotonic() - start) * 1000, 2))


async def run_checks(checks: list[HealthCheck]) -> dict[str, CheckResult]:
    """Run *checks* concurrently, keyed by check name."""
    results = await asyncio.gather(*(_run_check(c) for c in checks))
    return {c.name: r for c, r in zip(checks, results)}


def overall_status(results: dict[str, CheckResult]) -> Status:
    if all(r.status == "healthy" for r in results.values()):
        return "healthy"
    return "unhealthy"


def create_health_router(
    service_name: str,
    version: str,
    checks: list[HealthCheck] | None = None,
    *,
    snapshot_info: Callable[[], SnapshotInfo] | None = None,
    prefix: str = "/health",
    gtg_path: str = "/__gtg",
) -> APIRouter:
    """Build the health router.

    Parameters
    ----------
    checks : list[HealthCheck] | None
        Dependency probes; all must pass for the service to be healthy.
    snapshot_info : () -> SnapshotInfo | None
        Reports the store's current snapshot in the health body.
    """
    router = APIRouter(tags=["health"])
    checks = list(checks or [])

    async def _report() -> JSONResponse:
        results = await run_checks(checks)
        status = overall_status(results)
        body = HealthResponse(
            status=status,
            service=service_name,
            version=version,
            uptime_s=round(time.monotonic() - _START_TIME, 1),
            checks=results,
            snapshot=snapshot_info() if snapshot_info else None,
        )
        return JSONResponse(
            content=body.model_dump(exclude_none=True),
            status_code=200 if status == "healthy" else 503,
        )

    @router.get(prefix, response_model=HealthResponse)
    async def health() -> JSONResponse:
        return await _report()

    @router.get(f"{prefix}/ready", response_model=HealthResponse)
    async def readiness() -> JSONResponse:
        return await _report()

    @router.get(f"{prefix}/live", response_model=LivenessResponse)
    async def liveness() -> LivenessResponse:
        return LivenessResponse()

    @router.get(gtg_path, response_class=PlainTextResponse)
    async def good_to_go() -> PlainTextResponse:
        if overall_status(await run_checks(checks)) == "healthy":
            return PlainTextResponse("OK")
        return PlainTextResponse("Service unavailable", status_code=503)

    return router
