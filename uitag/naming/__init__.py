"""Identifier naming rules."""

from .resolver import (
    IDENTIFIER_PATTERN,
    IdentifierTooLong,
    Layer,
    MalformedIdentifier,
    NamingError,
    UnresolvedLayer,
    detect_layer,
    is_component_path,
    is_valid_identifier,
    layer_of_identifier,
    resolve_identifier,
    split_words,
)

__all__ = [
    "IDENTIFIER_PATTERN",
    "IdentifierTooLong",
    "Layer",
    "MalformedIdentifier",
    "NamingError",
    "UnresolvedLayer",
    "detect_layer",
    "is_component_path",
    "is_valid_identifier",
    "layer_of_identifier",
    "resolve_identifier",
    "split_words",
]
