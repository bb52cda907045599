"""Taxonomy sources: the protocol the store consumes and its implementations."""

from sections_transformer.sources.protocol import TaxonomySource
from sections_transformer.sources.static import StaticSource
from sections_transformer.sources.tme import TMEClient, parse_terms

__all__ = [
    "TaxonomySource",
    "StaticSource",
    "TMEClient",
    "parse_terms",
]
