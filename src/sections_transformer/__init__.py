"""
sections-transformer: serves the TME Sections taxonomy over HTTP.

Raw TME terms are transformed into sections with stable, content-derived
UUIDs and held in an in-memory store that reloads atomically.

Quick start::

    from sections_transformer.api import create_app

    app = create_app()  # ready for uvicorn
"""

__version__ = "0.1.0"
