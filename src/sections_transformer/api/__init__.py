"""
HTTP layer for the sections transformer.

Provides a FastAPI application factory.  Routers only translate between
HTTP and :class:`~sections_transformer.core.store.SectionStore`; all
transformation and caching logic lives in ``sections_transformer.core``.

Quick start::

    from sections_transformer.api import create_app

    app = create_app()  # ready for uvicorn
"""

from sections_transformer.api.app import create_app

__all__ = ["create_app"]
