"""Domain models: raw TME terms and transformed sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

SECTION_TYPE = "Section"


@dataclass(frozen=True, slots=True)
class RawTerm:
    """A term as delivered by the taxonomy source.

    Attributes:
        canonical_name: Human-readable label.
        raw_id: Opaque TME identifier, only unique within its taxonomy.
    """

    canonical_name: str
    raw_id: str


@dataclass(frozen=True, slots=True)
class AlternativeIdentifiers:
    """Other identifiers the section is known by."""

    tme: tuple[str, ...] = ()
    uuids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Section:
    """A section with a stable, content-derived UUID.

    Attributes:
        uuid: Name-based UUID derived from ``(taxonomy, raw_id)``.
        pref_label: Copied from the term's canonical name.
        alternative_identifiers: TME identifier and UUID list.
        type: Always ``"Section"``.
    """

    uuid: str
    pref_label: str
    alternative_identifiers: AlternativeIdentifiers = field(default_factory=AlternativeIdentifiers)
    type: str = SECTION_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON wire form."""
        return {
            "uuid": self.uuid,
            "prefLabel": self.pref_label,
            "alternativeIdentifiers": {
                "TME": list(self.alternative_identifiers.tme),
                "uuids": list(self.alternative_identifiers.uuids),
            },
            "type": self.type,
        }
