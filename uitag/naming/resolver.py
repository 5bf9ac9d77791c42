"""Maps a component's file location and export name to its identifier.

Identifiers are kebab-case strings of two to four segments. The first segment
names the layer the component lives in (``page``, ``layout``, ``ui`` or a
domain folder below ``components/``); the remaining segments come from the
export name, or from the path when the component is a default export.

Everything in this module is a pure function of its arguments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, List, Optional, Sequence, Tuple

from ..models import (
    DEFAULT_EXPORT,
    IDENTIFIER_TOO_LONG,
    MALFORMED_IDENTIFIER,
    UNRESOLVED_LAYER,
)

IDENTIFIER_PATTERN = re.compile(r"^[a-z]+(-[a-z]+){1,3}$")
MAX_SEGMENTS = 4

FIXED_LAYERS: tuple[str, ...] = ("page", "layout", "ui")

_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")
_COMPONENTS_DIR = "components"
_APP_DIR = "app"
_PAGE_STEM = "page"
_INDEX_STEMS = {"index"}
_ROOT_PAGE_TOKENS = ("home",)


class NamingError(ValueError):
    """Raised when no valid identifier can be produced for a component."""

    code = MALFORMED_IDENTIFIER

    def __init__(self, message: str, *, file_path: str, export_name: str) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.export_name = export_name


class UnresolvedLayer(NamingError):
    """The file path matches none of the layer conventions."""

    code = UNRESOLVED_LAYER


class IdentifierTooLong(NamingError):
    """The composed identifier has more than four segments."""

    code = IDENTIFIER_TOO_LONG


class MalformedIdentifier(NamingError):
    """The composed identifier does not match the kebab-case pattern."""

    code = MALFORMED_IDENTIFIER


@dataclass(frozen=True)
class Layer:
    """Layer a component belongs to.

    ``folder_index`` is the position of the path segment that established the
    layer (the ``ui``/``layout``/domain folder, or ``app`` for pages).
    """

    kind: str
    name: str
    folder_index: int

    @property
    def tokens(self) -> List[str]:
        return self.name.split("-")


def split_words(name: str) -> List[str]:
    """Split a camel, Pascal, kebab or snake case name into lower-case words."""
    return [word.lower() for word in _WORD_PATTERN.findall(name)]


def is_valid_identifier(value: str) -> bool:
    return bool(IDENTIFIER_PATTERN.match(value))


def layer_of_identifier(identifier: str) -> Tuple[str, Optional[str]]:
    """Return ``(layer, domain)`` for an identifier based on its first segment."""
    head = identifier.split("-", 1)[0]
    if head in FIXED_LAYERS:
        return head, None
    return "domain", head


def detect_layer(file_path: str) -> Layer:
    """Return the layer for a path; rules are tried in precedence order."""
    parts = _split_path(file_path)
    for rule in _LAYER_RULES:
        layer = rule(parts)
        if layer is not None:
            return layer
    raise UnresolvedLayer(
        "path matches no ui/layout/domain/page convention",
        file_path=file_path,
        export_name="",
    )


def is_component_path(file_path: str) -> bool:
    """Return True when the path lives under a recognised layer."""
    try:
        detect_layer(file_path)
    except UnresolvedLayer:
        return False
    return True


def resolve_identifier(file_path: str, export_name: str) -> str:
    """Return the canonical identifier for ``export_name`` declared in ``file_path``."""
    try:
        layer = detect_layer(file_path)
    except UnresolvedLayer as exc:
        raise UnresolvedLayer(str(exc), file_path=file_path, export_name=export_name) from None

    tokens = derive_tokens(file_path, export_name, layer)
    if not tokens:
        raise MalformedIdentifier(
            f"cannot derive an element name from {export_name!r}",
            file_path=file_path,
            export_name=export_name,
        )

    segments = layer.tokens + tokens
    identifier = "-".join(segments)
    if len(segments) > MAX_SEGMENTS:
        raise IdentifierTooLong(
            f"{identifier!r} has {len(segments)} segments (max {MAX_SEGMENTS})",
            file_path=file_path,
            export_name=export_name,
        )
    if not is_valid_identifier(identifier):
        raise MalformedIdentifier(
            f"{identifier!r} is not lower-case kebab-case letters",
            file_path=file_path,
            export_name=export_name,
        )
    return identifier


def derive_tokens(file_path: str, export_name: str, layer: Layer) -> List[str]:
    """Return the element-name words that follow the layer segment."""
    parts = _split_path(file_path)
    if export_name == DEFAULT_EXPORT:
        if layer.kind == "page":
            return _route_tokens(parts[layer.folder_index + 1 : -1])
        tokens = split_words(_default_export_base(parts))
    else:
        tokens = split_words(export_name)
    return _strip_redundant_prefix(tokens, parts, layer)


# ----------------------------------------------------------------------
# Layer rules


def _match_fixed(name: str) -> Callable[[Sequence[str]], Optional[Layer]]:
    def _rule(parts: Sequence[str]) -> Optional[Layer]:
        directories = parts[:-1]
        for index, segment in enumerate(directories[:-1]):
            if segment == _COMPONENTS_DIR and directories[index + 1] == name:
                return Layer(kind=name, name=name, folder_index=index + 1)
        return None

    return _rule


def _match_domain(parts: Sequence[str]) -> Optional[Layer]:
    directories = parts[:-1]
    for index, segment in enumerate(directories[:-1]):
        if segment == _COMPONENTS_DIR:
            return Layer(kind="domain", name=directories[index + 1], folder_index=index + 1)
    return None


def _match_page(parts: Sequence[str]) -> Optional[Layer]:
    if not parts or PurePosixPath(parts[-1]).stem != _PAGE_STEM:
        return None
    directories = parts[:-1]
    for index, segment in enumerate(directories):
        if segment == _APP_DIR:
            return Layer(kind="page", name="page", folder_index=index)
    return None


_LAYER_RULES: tuple[Callable[[Sequence[str]], Optional[Layer]], ...] = (
    _match_fixed("ui"),
    _match_fixed("layout"),
    _match_domain,
    _match_page,
)


# ----------------------------------------------------------------------
# Helpers


def _split_path(file_path: str) -> Tuple[str, ...]:
    normalised = file_path.replace("\\", "/")
    return tuple(part for part in PurePosixPath(normalised).parts if part not in {"", ".", "/"})


def _default_export_base(parts: Sequence[str]) -> str:
    stem = PurePosixPath(parts[-1]).stem
    if stem in _INDEX_STEMS and len(parts) >= 2:
        return parts[-2]
    return stem


def _is_virtual_route_segment(segment: str) -> bool:
    # (group), @slot, _private and [dynamic] folders do not name a route
    return (
        (segment.startswith("(") and segment.endswith(")"))
        or segment.startswith(("@", "_", "["))
    )


def _route_tokens(segments: Sequence[str]) -> List[str]:
    tokens: List[str] = []
    for segment in segments:
        if _is_virtual_route_segment(segment):
            continue
        for token in split_words(segment):
            if token not in tokens:
                tokens.append(token)
    return tokens or list(_ROOT_PAGE_TOKENS)


def _strip_redundant_prefix(tokens: List[str], parts: Sequence[str], layer: Layer) -> List[str]:
    if len(parts) < 2:
        return tokens
    folder_index = len(parts) - 2
    if folder_index == layer.folder_index:
        return _drop_prefix(tokens, layer.tokens, keep_last=False)
    folder_tokens = split_words(parts[folder_index])
    if len(folder_tokens) >= 2:
        return _drop_prefix(tokens, folder_tokens, keep_last=True)
    return tokens


def _drop_prefix(tokens: List[str], prefix: List[str], *, keep_last: bool) -> List[str]:
    if tokens[: len(prefix)] != prefix:
        return tokens
    cut = len(prefix) - 1 if keep_last else len(prefix)
    remainder = tokens[cut:]
    return remainder if remainder else tokens


__all__ = [
    "IDENTIFIER_PATTERN",
    "IdentifierTooLong",
    "Layer",
    "MAX_SEGMENTS",
    "MalformedIdentifier",
    "NamingError",
    "UnresolvedLayer",
    "derive_tokens",
    "detect_layer",
    "is_component_path",
    "is_valid_identifier",
    "layer_of_identifier",
    "resolve_identifier",
    "split_words",
]
