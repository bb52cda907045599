"""Pydantic request/response schemas."""

from sections_transformer.api.schemas.common import ProblemDetail
from sections_transformer.api.schemas.sections import (
    AlternativeIdentifiersSchema,
    ReloadResponse,
    SectionSchema,
)

__all__ = [
    "ProblemDetail",
    "AlternativeIdentifiersSchema",
    "ReloadResponse",
    "SectionSchema",
]
