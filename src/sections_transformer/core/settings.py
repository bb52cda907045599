"""Service settings.

All values can be overridden via environment variables prefixed with
``SECTIONS_`` (``SECTIONS_TME_BASE_URL``, ``SECTIONS_PORT`` ...) or a
``.env`` file in the working directory.

Order of precedence (highest → lowest):
    1. Explicit keyword arguments (tests)
    2. Environment variables
    3. ``.env`` file
    4. Defaults below
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SectionsSettings(BaseSettings):
    """Settings for the sections transformer service."""

    model_config = SettingsConfigDict(
        env_prefix="SECTIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port")
    debug: bool = Field(default=False, description="Expose exception details in 500 responses")

    # ── Observability ────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool | None = Field(default=None, description="JSON logs; None → auto (JSON if not a TTY)")

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/transformers/sections", description="URL prefix for section routes")
    api_title: str = Field(default="sections-transformer", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # ── Taxonomy ─────────────────────────────────────────────────────────
    taxonomy_name: str = Field(default="Sections", description="TME taxonomy to serve")
    source: Literal["tme", "static"] = Field(default="tme", description="Taxonomy source backend")
    load_on_startup: bool = Field(default=True, description="Load the taxonomy in the background at start-up")

    # ── TME ──────────────────────────────────────────────────────────────
    tme_base_url: str = Field(default="https://tme.ft.com", description="TME base URL")
    tme_username: str | None = Field(default=None, description="TME basic-auth user")
    tme_password: str | None = Field(default=None, description="TME basic-auth password")
    tme_token: str | None = Field(default=None, description="TME ClientToken header value")
    tme_max_records: int = Field(default=10000, ge=1, description="Terms requested per TME page")
    tme_timeout_s: float = Field(default=30.0, gt=0, description="HTTP timeout for TME requests")
