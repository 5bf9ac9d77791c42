"""Pure predicates over the identifier-bearing parts of a syntax tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Iterator, Optional

from tree_sitter import Node

from ..parsing.tree_sitter import line_of, node_text, unwrap_expression
from .literals import Classification, classify_attribute, classify_call, classify_value

ATTRIBUTE_SITE = "attribute"
PROPERTY_SITE = "property"
HELPER_SITE = "helper"


@dataclass(frozen=True)
class IdentifierSite:
    """One place in the source where an identifier is attached."""

    kind: str
    node: Node
    classification: Classification

    @property
    def offset(self) -> int:
        return self.node.start_byte

    @property
    def line(self) -> int:
        return line_of(self.node)


def attribute_name(attribute: Node, source: bytes) -> str:
    children = attribute.named_children
    return node_text(children[0], source) if children else ""


def property_key(pair: Node, source: bytes) -> str:
    key = pair.child_by_field_name("key")
    if key is None:
        return ""
    text = node_text(key, source)
    if key.type == "string":
        return text[1:-1]
    return text


def is_helper_call(node: Node, source: bytes, helpers: Collection[str]) -> bool:
    if node.type != "call_expression":
        return False
    callee = node.child_by_field_name("function")
    if callee is None:
        return False
    name = node_text(callee, source)
    return name in helpers or name.rsplit(".", 1)[-1] in helpers


def spread_helper_call(node: Node, source: bytes, helpers: Collection[str]) -> Optional[Node]:
    """Return the helper call spread by ``{...helper("id")}`` / ``...helper("id")``."""
    spread = node
    if node.type == "jsx_expression":
        inner = node.named_children
        if not inner:
            return None
        spread = inner[0]
    if spread.type != "spread_element" or not spread.named_children:
        return None
    call = unwrap_expression(spread.named_children[0])
    return call if is_helper_call(call, source, helpers) else None


def element_identifier(
    element: Node,
    source: bytes,
    attribute: str,
    helpers: Collection[str],
) -> Optional[IdentifierSite]:
    """Return the identifier site on a JSX opening/self-closing element, if any."""
    for child in element.named_children:
        if child.type == "jsx_attribute" and attribute_name(child, source) == attribute:
            return IdentifierSite(ATTRIBUTE_SITE, child, classify_attribute(child, source))
        if child.type == "jsx_expression":
            call = spread_helper_call(child, source, helpers)
            if call is not None:
                return IdentifierSite(HELPER_SITE, call, classify_call(call, source))
    return None


def object_identifier(
    obj: Node,
    source: bytes,
    attribute: str,
    helpers: Collection[str],
) -> Optional[IdentifierSite]:
    """Return the identifier site inside an object literal (``{"data-ui": "x"}``), if any."""
    return next(iter_object_sites(obj, source, attribute, helpers), None)


def iter_object_sites(
    obj: Node,
    source: bytes,
    attribute: str,
    helpers: Collection[str],
) -> Iterator[IdentifierSite]:
    for child in obj.named_children:
        if child.type == "pair" and property_key(child, source) == attribute:
            yield IdentifierSite(PROPERTY_SITE, child, classify_value(child.child_by_field_name("value"), source))
        elif child.type == "spread_element":
            call = spread_helper_call(child, source, helpers)
            if call is not None:
                yield IdentifierSite(HELPER_SITE, call, classify_call(call, source))


def existing_identifier(
    node: Node,
    source: bytes,
    attribute: str,
    helpers: Collection[str],
) -> Optional[IdentifierSite]:
    """Return the identifier already carried by a JSX element or props object."""
    if node.type == "object":
        return object_identifier(node, source, attribute, helpers)
    return element_identifier(node, source, attribute, helpers)


__all__ = [
    "ATTRIBUTE_SITE",
    "HELPER_SITE",
    "IdentifierSite",
    "PROPERTY_SITE",
    "attribute_name",
    "element_identifier",
    "existing_identifier",
    "is_helper_call",
    "iter_object_sites",
    "object_identifier",
    "property_key",
    "spread_helper_call",
]
