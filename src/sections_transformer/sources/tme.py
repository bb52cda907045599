"""
TME taxonomy client.

Fetches the terms of a TME authority over HTTP.  TME answers with XML::

    <taxonomy>
      <term>
        <canonicalName>Africa Section</canonicalName>
        <id>Nstein_GL_AFTM_GL_164835</id>
      </term>
      ...
    </taxonomy>

Terms are requested in pages of ``max_records`` using ``skip``; a page
shorter than ``max_records`` ends the fetch.  Requests carry basic auth
and a ``ClientToken`` header.

Usage:
    with TMEClient("https://tme.example.com", username="u", password="p", token="t") as tme:
        terms = tme.fetch_terms("Sections")
"""

from __future__ import annotations

import time

import httpx
from lxml import etree

from sections_transformer.core.errors import (
    ConfigError,
    ParseError,
    SourceError,
    SourceUnavailableError,
)
from sections_transformer.core.logging import get_logger
from sections_transformer.core.models import RawTerm
from sections_transformer.core.settings import SectionsSettings

log = get_logger(__name__)


def parse_terms(content: bytes) -> list[RawTerm]:
    """Parse a TME taxonomy XML document into raw terms.

    Raises:
        ParseError: If the document is not well-formed XML.
    """
    try:
        root = etree.fromstring(content)
    except etree.XMLSyntaxError as exc:
        raise ParseError("TME returned malformed XML", cause=exc) from exc

    terms = []
    for node in root.iter("term"):
        terms.append(
            RawTerm(
                canonical_name=(node.findtext("canonicalName") or "").strip(),
                raw_id=(node.findtext("id") or "").strip(),
            )
        )
    return terms


class TMEClient:
    """HTTP client for a TME authority endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        taxonomy_name: str = "Sections",
        max_records: int = 10000,
        timeout_s: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/xml"}
        if token:
            headers["ClientToken"] = token
        auth = httpx.BasicAuth(username, password or "") if username else None

        self._base_url = base_url.rstrip("/")
        self._taxonomy_name = taxonomy_name
        self._max_records = max_records
        self._client = httpx.Client(
            headers=headers,
            auth=auth,
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: SectionsSettings) -> TMEClient:
        """Build a client from service settings.

        Raises:
            ConfigError: If TME credentials are missing.
        """
        missing = [
            name
            for name in ("tme_username", "tme_password", "tme_token")
            if not getattr(settings, name)
        ]
        if missing:
            raise ConfigError(
                f"TME source selected but {', '.join(missing)} not set"
            ).with_context(missing=missing)
        return cls(
            settings.tme_base_url,
            username=settings.tme_username,
            password=settings.tme_password,
            token=settings.tme_token,
            taxonomy_name=settings.taxonomy_name,
            max_records=settings.tme_max_records,
            timeout_s=settings.tme_timeout_s,
        )

    @property
    def name(self) -> str:
        return "tme"

    def _authority_url(self, taxonomy_name: str) -> str:
        return f"{self._base_url}/rs/authorities/{taxonomy_name}/"

    def _get_page(self, taxonomy_name: str, *, skip: int, max_records: int) -> bytes:
        url = self._authority_url(taxonomy_name)
        try:
            response = self._client.get(url, params={"maxRecords": max_records, "skip": skip})
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(f"TME request failed: {exc}", cause=exc).with_context(
                source_name=self.name, taxonomy=taxonomy_name, url=url
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise SourceUnavailableError(
                f"TME returned HTTP {response.status_code}"
            ).with_context(
                source_name=self.name,
                taxonomy=taxonomy_name,
                url=url,
                http_status=response.status_code,
            )
        return response.content

    def fetch_terms(self, taxonomy_name: str) -> list[RawTerm]:
        """Fetch every term of *taxonomy_name*, page by page.

        Raises:
            SourceError: If TME answers a later page with the same terms as
                the previous one, i.e. it ignores ``skip``.
        """
        start = time.perf_counter()
        terms: list[RawTerm] = []
        skip = 0
        previous_first: str | None = None
        while True:
            content = self._get_page(taxonomy_name, skip=skip, max_records=self._max_records)
            try:
                page = parse_terms(content)
            except ParseError as exc:
                exc.with_context(taxonomy=taxonomy_name, skip=skip)
                raise
            if page and page[0].raw_id == previous_first:
                raise SourceError("TME repeated a page; paging is not advancing").with_context(
                    source_name=self.name, taxonomy=taxonomy_name, skip=skip
                )
            terms.extend(page)
            if len(page) < self._max_records:
                break
            previous_first = page[0].raw_id
            skip += self._max_records

        log.info(
            "tme_terms_fetched",
            taxonomy=taxonomy_name,
            count=len(terms),
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return terms

    def ping(self) -> None:
        """Request a single record to prove TME is reachable and authorised."""
        self._get_page(self._taxonomy_name, skip=0, max_records=1)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TMEClient:
        return self

    def __exit__(self, *args) -> None:
        self.close()
