"""Stylesheet artifacts derived from the identifier registry."""

from .generator import GenerationResult, StylesheetGenerator
from .reader import GeneratedStylesheet, read_generated_stylesheet

__all__ = [
    "GeneratedStylesheet",
    "GenerationResult",
    "StylesheetGenerator",
    "read_generated_stylesheet",
]
