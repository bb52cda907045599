"""In-memory taxonomy source for local runs and tests."""

from __future__ import annotations

from collections.abc import Iterable

from sections_transformer.core.errors import SourceUnavailableError
from sections_transformer.core.models import RawTerm


class StaticSource:
    """Serve a fixed list of terms.

    ``set_terms`` replaces what subsequent fetches return; ``set_available``
    simulates the upstream going down (fetch and ping then raise
    :class:`SourceUnavailableError`).
    """

    def __init__(self, terms: Iterable[RawTerm] = (), *, name: str = "static") -> None:
        self._terms = list(terms)
        self._available = True
        self._name = name
        self.fetch_count = 0

    @property
    def name(self) -> str:
        return self._name

    def set_terms(self, terms: Iterable[RawTerm]) -> None:
        self._terms = list(terms)

    def set_available(self, available: bool) -> None:
        self._available = available

    def fetch_terms(self, taxonomy_name: str) -> list[RawTerm]:
        self.ping()
        self.fetch_count += 1
        return list(self._terms)

    def ping(self) -> None:
        if not self._available:
            raise SourceUnavailableError(f"Source {self._name!r} is unavailable").with_context(
                source_name=self._name
            )
