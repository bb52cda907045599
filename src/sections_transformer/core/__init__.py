"""Core of the sections transformer.

Layout::

    errors.py      Typed error hierarchy (TransformerError, SourceUnavailableError)
    logging.py     structlog configuration
    settings.py    pydantic-settings configuration (SECTIONS_ prefix)
    models.py      RawTerm / Section dataclasses
    transform.py   Term → section transformation and identifier derivation
    store.py       SectionStore: immutable snapshots, atomic reload
    health.py      Health models and router factory
"""
