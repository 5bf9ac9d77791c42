"""Classifies identifier-producing values as literal, non-literal or absent.

Identifiers must be fixed strings so that a static scan can discover every one
of them. The classifier only looks at syntax; it never evaluates anything.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node

from ..parsing.tree_sitter import node_text, unwrap_expression


class Verdict(enum.Enum):
    LITERAL = "literal"
    NON_LITERAL = "non-literal"
    ABSENT = "absent"


@dataclass(frozen=True)
class Classification:
    verdict: Verdict
    value: Optional[str] = None

    @property
    def is_literal(self) -> bool:
        return self.verdict is Verdict.LITERAL


ABSENT = Classification(Verdict.ABSENT)
NON_LITERAL = Classification(Verdict.NON_LITERAL)


def classify_value(node: Optional[Node], source: bytes) -> Classification:
    """Classify an attribute value, property value or call argument."""
    if node is None:
        return ABSENT
    node = unwrap_expression(node)
    if node.type == "jsx_expression":
        inner = [child for child in node.named_children if child.type != "comment"]
        if not inner:
            return ABSENT
        return classify_value(inner[0], source)
    if node.type == "string":
        return Classification(Verdict.LITERAL, _strip_quotes(node_text(node, source)))
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return NON_LITERAL
        return Classification(Verdict.LITERAL, _strip_quotes(node_text(node, source)))
    return NON_LITERAL


def classify_call(call: Node, source: bytes) -> Classification:
    """Classify the first argument of an identifier helper call."""
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return ABSENT
    values = [child for child in arguments.named_children if child.type != "comment"]
    if not values:
        return ABSENT
    return classify_value(values[0], source)


def classify_attribute(attribute: Node, source: bytes) -> Classification:
    """Classify the value of a ``jsx_attribute`` node."""
    children = attribute.named_children
    if len(children) < 2:
        return ABSENT
    return classify_value(children[1], source)


def _strip_quotes(text: str) -> str:
    return text[1:-1] if len(text) >= 2 else text


__all__ = [
    "ABSENT",
    "Classification",
    "NON_LITERAL",
    "Verdict",
    "classify_attribute",
    "classify_call",
    "classify_value",
]
