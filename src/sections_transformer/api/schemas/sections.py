"""Section response schemas (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from sections_transformer.core.models import Section


class AlternativeIdentifiersSchema(BaseModel):
    """Other identifiers of a section."""

    model_config = ConfigDict(populate_by_name=True)

    tme: list[str] = Field(default_factory=list, alias="TME")
    uuids: list[str] = Field(default_factory=list)


class SectionSchema(BaseModel):
    """A section as served over HTTP."""

    model_config = ConfigDict(populate_by_name=True)

    uuid: str
    pref_label: str = Field(alias="prefLabel")
    alternative_identifiers: AlternativeIdentifiersSchema = Field(alias="alternativeIdentifiers")
    type: str

    @classmethod
    def from_section(cls, section: Section) -> SectionSchema:
        return cls(
            uuid=section.uuid,
            pref_label=section.pref_label,
            alternative_identifiers=AlternativeIdentifiersSchema(
                tme=list(section.alternative_identifiers.tme),
                uuids=list(section.alternative_identifiers.uuids),
            ),
            type=section.type,
        )


class ReloadResponse(BaseModel):
    """Body of a successful reload."""

    message: str = "Reload completed"
    count: int = Field(description="Sections in the published snapshot")
    version: int = Field(description="Snapshot version (increments per reload)")
    skipped: int = Field(default=0, description="Terms dropped as duplicates or failures")
    loaded_at: datetime = Field(description="When the snapshot was published (UTC)")
