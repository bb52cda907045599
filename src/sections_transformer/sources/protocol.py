"""
Taxonomy source protocol.

The store depends only on this protocol, never on a concrete client, so
the TME client and the in-memory source are interchangeable.

Usage:
    from sections_transformer.sources import StaticSource, TaxonomySource

    source: TaxonomySource = StaticSource([RawTerm("Africa Section", "Nstein_GL_AFTM_GL_164835")])
    terms = source.fetch_terms("Sections")
    source.ping()
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sections_transformer.core.models import RawTerm


@runtime_checkable
class TaxonomySource(Protocol):
    """
    Protocol for taxonomy sources.

    Implementations raise :class:`~sections_transformer.core.errors.SourceError`
    subclasses on failure and never return partial results.
    """

    @property
    def name(self) -> str:
        """Source name used in logs and error context."""
        ...

    def fetch_terms(self, taxonomy_name: str) -> list[RawTerm]:
        """Fetch every term of *taxonomy_name*, in upstream order."""
        ...

    def ping(self) -> None:
        """Cheap liveness probe; raises ``SourceUnavailableError`` on failure."""
        ...
