"""Source parsing and module indexing."""

from .components import ComponentDecl, ImportBinding, ModuleIndex
from .tree_sitter import (
    ParsedSource,
    SourceParseError,
    SourceParseFailure,
    SourceParser,
)

__all__ = [
    "ComponentDecl",
    "ImportBinding",
    "ModuleIndex",
    "ParsedSource",
    "SourceParseError",
    "SourceParseFailure",
    "SourceParser",
]
