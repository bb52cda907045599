"""
Term → section transformation with deterministic identity.

The TME identifier is ``base64(raw_id) + "-" + base64(taxonomy)``.  ``-``
never occurs in the standard base64 alphabet, so the composite splits back
into its two components without ambiguity whatever characters the raw id
or taxonomy name contain.

The section UUID is a name-based (version 3) UUID over the TME identifier:
the MD5 digest of the identifier's UTF-8 bytes with the RFC 4122 version
and variant bits applied.  No namespace bytes are prepended, which keeps
the identifiers equal to those already published for the taxonomy.

Examples:
    >>> term = RawTerm(canonical_name="Africa Section", raw_id="Nstein_GL_AFTM_GL_164835")
    >>> section = transform_section(term, "Sections")
    >>> section.uuid
    'adb4f804-c3b6-3eca-8708-5edeec653a27'
    >>> section.alternative_identifiers.tme
    ('TnN0ZWluX0dMX0FGVE1fR0xfMTY0ODM1-U2VjdGlvbnM=',)
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import uuid

from sections_transformer.core.models import SECTION_TYPE, AlternativeIdentifiers, RawTerm, Section

_SEPARATOR = "-"


def build_tme_identifier(raw_id: str, taxonomy_name: str) -> str:
    """Encode ``(raw_id, taxonomy_name)`` as a reversible TME identifier."""
    encoded_id = base64.b64encode(raw_id.encode("utf-8")).decode("ascii")
    encoded_taxonomy = base64.b64encode(taxonomy_name.encode("utf-8")).decode("ascii")
    return f"{encoded_id}{_SEPARATOR}{encoded_taxonomy}"


def parse_tme_identifier(tme_identifier: str) -> tuple[str, str]:
    """Decode a TME identifier back into ``(raw_id, taxonomy_name)``.

    Raises:
        ValueError: If the identifier is not two base64 parts joined by ``-``.
    """
    parts = tme_identifier.split(_SEPARATOR)
    if len(parts) != 2:
        raise ValueError(f"Malformed TME identifier: {tme_identifier!r}")
    try:
        raw_id, taxonomy_name = (
            base64.b64decode(part, validate=True).decode("utf-8") for part in parts
        )
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"Malformed TME identifier: {tme_identifier!r}") from exc
    return raw_id, taxonomy_name


def derive_uuid(tme_identifier: str) -> str:
    """Name-based version 3 UUID for a TME identifier."""
    digest = hashlib.md5(tme_identifier.encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest, version=3))


def transform_section(term: RawTerm, taxonomy_name: str) -> Section:
    """Convert one raw term into a section.

    Total: every term yields a section, including one with an empty
    ``raw_id``.  Filtering invalid terms is the caller's job.
    """
    tme_identifier = build_tme_identifier(term.raw_id, taxonomy_name)
    section_uuid = derive_uuid(tme_identifier)
    return Section(
        uuid=section_uuid,
        pref_label=term.canonical_name,
        alternative_identifiers=AlternativeIdentifiers(
            tme=(tme_identifier,),
            uuids=(section_uuid,),
        ),
        type=SECTION_TYPE,
    )

