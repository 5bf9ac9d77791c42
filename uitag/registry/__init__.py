"""Identifier registry and the extractor that builds it."""

from .extractor import ExtractedSite, SelectorExtractor
from .registry import Registry, RegistryEntry, selector_for

__all__ = ["ExtractedSite", "Registry", "RegistryEntry", "SelectorExtractor", "selector_for"]
