"""
Common API schemas: RFC 7807 error envelope.

Every non-2xx JSON response uses :class:`ProblemDetail`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Example:
        {
            "type": "about:blank",
            "title": "Section not found",
            "status": 404,
            "detail": "No section with uuid 'abc' in the current snapshot",
            "instance": "/transformers/sections/abc",
            "context": {}
        }
    """

    type: str = Field(default="about:blank", description="Error type URI (usually 'about:blank')")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")
    context: dict[str, Any] = Field(default_factory=dict, description="Structured error context")
