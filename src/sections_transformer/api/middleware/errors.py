"""
Exception handlers: map service errors to RFC 7807 responses.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from sections_transformer.api.schemas.common import ProblemDetail
from sections_transformer.core.errors import ErrorCategory, TransformerError
from sections_transformer.core.logging import get_logger

log = get_logger(__name__)

# ── Error category → HTTP status mapping ─────────────────────────────────

ERROR_CATEGORY_TO_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.SOURCE: 503,
    ErrorCategory.PARSE: 502,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.VALIDATION: 422,
    ErrorCategory.CONFIG: 500,
    ErrorCategory.INTERNAL: 500,
}


def status_for_category(category: ErrorCategory) -> int:
    """Resolve an error category to HTTP status, defaulting to 500."""
    return ERROR_CATEGORY_TO_STATUS.get(category, 500)


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    context: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance,
        context=context or {},
    )
    return JSONResponse(
        status_code=status,
        content=body.model_dump(),
        media_type="application/problem+json",
        headers=headers,
    )


async def transformer_error_handler(request: Request, exc: TransformerError) -> JSONResponse:
    """Map a :class:`TransformerError` to a problem response by category."""
    status = status_for_category(exc.category)
    headers = {"Retry-After": "5"} if exc.retryable and status in (409, 503) else None
    return problem_response(
        status=status,
        title=exc.__class__.__name__,
        detail=exc.message,
        instance=str(request.url),
        context=exc.context.to_dict(),
        headers=headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: returns 500 with ProblemDetail."""
    log.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if request.app.state.settings.debug else "An unexpected error occurred.",
        instance=str(request.url),
    )
