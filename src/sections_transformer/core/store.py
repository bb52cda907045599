"""
In-memory section store with atomic snapshot reloads.

The store holds exactly one published :class:`Snapshot`.  Snapshots are
immutable: ``by_uuid`` is a read-only mapping view and ``ordered_uuids`` a
tuple.  Readers dereference ``self._snapshot`` once and answer from that
object, so they never take a lock and never see a half-built snapshot.

``reload()`` fetches terms, builds a fresh snapshot off to the side and
publishes it with a single reference assignment.  Only one reload runs at
a time: a reload requested while another is running is rejected at once
with :class:`ReloadInProgressError`.  Any failure leaves the previous
snapshot in place.

Duplicate identifiers within one fetch collapse with first-seen wins; the
first term keeps its position in ``ordered_uuids``.

Examples:
    >>> store = SectionStore(StaticSource([RawTerm("Africa Section", "Nstein_GL_AFTM_GL_164835")]))
    >>> store.get_all()
    ([], False)
    >>> store.reload().count
    1
    >>> store.get_uuids()
    ['adb4f804-c3b6-3eca-8708-5edeec653a27']
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from sections_transformer.core.errors import ReloadInProgressError, SourceError, TransformError
from sections_transformer.core.logging import get_logger
from sections_transformer.core.models import RawTerm, Section
from sections_transformer.core.transform import transform_section
from sections_transformer.sources.protocol import TaxonomySource

log = get_logger(__name__)

Transformer = Callable[[RawTerm, str], Section]


@dataclass(frozen=True)
class Snapshot:
    """One complete, immutable generation of the section dataset.

    Attributes:
        by_uuid: Read-only mapping of UUID → section.
        ordered_uuids: UUIDs in the order assembled during the reload.
        version: 1 for the first published snapshot, +1 per reload.
        loaded_at: When the snapshot was published (UTC).
        skipped: Number of terms dropped as duplicates or transform failures.
    """

    by_uuid: Mapping[str, Section]
    ordered_uuids: tuple[str, ...]
    version: int = 0
    loaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    skipped: int = 0

    @property
    def count(self) -> int:
        return len(self.ordered_uuids)

    def sections(self) -> list[Section]:
        """Sections in ``ordered_uuids`` order."""
        return [self.by_uuid[u] for u in self.ordered_uuids]


def build_snapshot(
    terms: Iterable[RawTerm],
    taxonomy_name: str,
    *,
    version: int,
    transformer: Transformer = transform_section,
) -> Snapshot:
    """Transform *terms* into a new snapshot.

    Terms whose transformation raises :class:`TransformError` are logged and
    skipped.  When two terms map to the same UUID the first one wins.
    """
    by_uuid: dict[str, Section] = {}
    ordered: list[str] = []
    skipped = 0

    for term in terms:
        try:
            section = transformer(term, taxonomy_name)
        except TransformError as exc:
            skipped += 1
            exc.with_context(raw_id=term.raw_id, taxonomy=taxonomy_name)
            log.warning("term_skipped", **exc.to_dict())
            continue

        if section.uuid in by_uuid:
            skipped += 1
            log.warning(
                "duplicate_term_ignored",
                uuid=section.uuid,
                raw_id=term.raw_id,
                kept_label=by_uuid[section.uuid].pref_label,
                ignored_label=section.pref_label,
            )
            continue

        by_uuid[section.uuid] = section
        ordered.append(section.uuid)

    return Snapshot(
        by_uuid=MappingProxyType(by_uuid),
        ordered_uuids=tuple(ordered),
        version=version,
        skipped=skipped,
    )


class SectionStore:
    """Thread-safe, read-mostly cache of the sections taxonomy.

    Parameters
    ----------
    source:
        Where raw terms come from.
    taxonomy_name:
        Taxonomy to fetch; also seeds identifier derivation.
    transformer:
        Term → section function (defaults to :func:`transform_section`).
    """

    def __init__(
        self,
        source: TaxonomySource,
        taxonomy_name: str = "Sections",
        *,
        transformer: Transformer = transform_section,
    ) -> None:
        self._source = source
        self._taxonomy_name = taxonomy_name
        self._transformer = transformer
        self._snapshot: Snapshot | None = None
        self._reload_lock = threading.Lock()
        self._publish_lock = threading.Lock()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def source(self) -> TaxonomySource:
        return self._source

    @property
    def taxonomy_name(self) -> str:
        return self._taxonomy_name

    @property
    def snapshot(self) -> Snapshot | None:
        """The currently published snapshot, or ``None`` before the first load."""
        return self._snapshot

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def is_reloading(self) -> bool:
        return self._reload_lock.locked()

    # ── Reads (lock-free) ────────────────────────────────────────────────

    def get_all(self) -> tuple[list[Section], bool]:
        """All sections; ``found`` is ``False`` only before the first load."""
        snapshot = self._snapshot
        if snapshot is None:
            return [], False
        return snapshot.sections(), True

    def get_by_uuid(self, uuid: str) -> tuple[Section | None, bool]:
        """Point lookup; ``(None, False)`` when absent."""
        snapshot = self._snapshot
        if snapshot is None:
            return None, False
        section = snapshot.by_uuid.get(uuid)
        return section, section is not None

    def get_count(self) -> int:
        snapshot = self._snapshot
        return snapshot.count if snapshot is not None else 0

    def get_uuids(self) -> list[str]:
        snapshot = self._snapshot
        return list(snapshot.ordered_uuids) if snapshot is not None else []

    # ── Reload ───────────────────────────────────────────────────────────

    def reload(self) -> Snapshot:
        """Fetch, transform and publish a new snapshot.

        Returns:
            The newly published snapshot.

        Raises:
            ReloadInProgressError: Another reload is running.
            SourceError: Fetching from the source failed; nothing changed.
        """
        if not self._reload_lock.acquire(blocking=False):
            log.info("reload_rejected", reason="in_progress", taxonomy=self._taxonomy_name)
            raise ReloadInProgressError().with_context(taxonomy=self._taxonomy_name)

        try:
            start = time.perf_counter()
            previous = self._snapshot
            version = previous.version + 1 if previous is not None else 1

            try:
                terms = self._source.fetch_terms(self._taxonomy_name)
            except SourceError as exc:
                log.warning(
                    "reload_failed",
                    taxonomy=self._taxonomy_name,
                    source=self._source.name,
                    kept_version=previous.version if previous is not None else None,
                    **exc.to_dict(),
                )
                raise

            snapshot = build_snapshot(
                terms,
                self._taxonomy_name,
                version=version,
                transformer=self._transformer,
            )
            with self._publish_lock:
                self._snapshot = snapshot

            log.info(
                "reload_completed",
                taxonomy=self._taxonomy_name,
                count=snapshot.count,
                skipped=snapshot.skipped,
                version=snapshot.version,
                loaded_at=snapshot.loaded_at.isoformat(),
                elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return snapshot
        finally:
            self._reload_lock.release()

    def check_connectivity(self) -> None:
        """Probe the source without reloading; raises ``SourceError`` on failure."""
        self._source.ping()
