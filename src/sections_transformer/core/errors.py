"""
Structured error types for the sections transformer.

Instead of generic exceptions that lose context, every error raised by the
service extends :class:`TransformerError` and carries:

- **Category:** What kind of error (source, parse, validation, config ...)
- **Retryable:** Whether the operation can be retried automatically
- **Context:** Structured metadata (taxonomy, source, URL, HTTP status)
- **Cause:** Chained underlying exception for root cause analysis

Architecture:
    ::

        TransformerError
        ├── SourceError              (SOURCE)
        │   ├── SourceUnavailableError   retryable: fetch/ping failed
        │   └── ParseError               (PARSE): upstream payload malformed
        ├── TransformError           (VALIDATION): one term could not convert
        ├── ReloadInProgressError    (CONFLICT)   retryable: reload rejected
        └── ConfigError              (CONFIG)

A lookup for an absent identifier is a normal negative result
(``found=False``) and never raises.

Usage:
    from sections_transformer.core.errors import SourceUnavailableError

    try:
        response = client.get(url)
    except httpx.TransportError as exc:
        raise SourceUnavailableError("TME unreachable", cause=exc).with_context(url=url)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and HTTP mapping."""

    SOURCE = "SOURCE"
    PARSE = "PARSE"
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        taxonomy: Taxonomy name being processed (e.g. ``"Sections"``)
        source_name: Name of the taxonomy source (e.g. ``"tme"``)
        raw_id: Raw TME identifier of the term involved, if any
        url: URL that was being accessed
        http_status: HTTP status code if applicable
        metadata: Additional key-value pairs
    """

    taxonomy: str | None = None
    source_name: str | None = None
    raw_id: str | None = None
    url: str | None = None
    http_status: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["taxonomy", "source_name", "raw_id", "url", "http_status"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TransformerError(Exception):
    """
    Base exception for all sections transformer errors.

    Subclasses set ``default_category`` and ``default_retryable`` so callers
    get sensible semantics without passing them explicitly.

    Examples:
        >>> error = TransformerError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(taxonomy="Sections").context.taxonomy
        'Sections'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TransformerError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SourceError("Failed").with_context(
                source_name="tme",
                url="https://tme.example.com/rs/authorities/Sections/"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(TransformerError):
    """Error from the taxonomy source."""

    default_category = ErrorCategory.SOURCE
    default_retryable = False


class SourceUnavailableError(SourceError):
    """Taxonomy source could not be reached or answered with an error status."""

    default_retryable = True


class ParseError(SourceError):
    """Taxonomy source answered with a payload that could not be parsed."""

    default_category = ErrorCategory.PARSE


# =============================================================================
# TRANSFORM / RELOAD ERRORS
# =============================================================================


class TransformError(TransformerError):
    """A single raw term could not be converted into a section.

    Never raised by the built-in transformer, which is total. Snapshot
    construction logs and skips terms that raise it.
    """

    default_category = ErrorCategory.VALIDATION


class ReloadInProgressError(TransformerError):
    """A reload was requested while another one was still running."""

    default_category = ErrorCategory.CONFLICT
    default_retryable = True

    def __init__(self, message: str = "A reload is already in progress", **kwargs: Any):
        super().__init__(message, **kwargs)


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(TransformerError):
    """Missing or invalid configuration."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TransformerError",
    "SourceError",
    "SourceUnavailableError",
    "ParseError",
    "TransformError",
    "ReloadInProgressError",
    "ConfigError",
]
