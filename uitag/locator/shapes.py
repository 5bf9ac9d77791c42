"""Node-shape classification for injection target lookup.

Every expression the locator meets is classified into exactly one ``Shape``;
the locator keeps one handler per shape. Adding a new component pattern means
adding a member here and a handler in ``locator.py``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from tree_sitter import Node

from ..parsing.components import CLASS_TYPES, FUNCTION_TYPES, ModuleIndex, callee_name
from ..parsing.tree_sitter import unwrap_expression

DEFAULT_SLOT_COMPONENTS: tuple[str, ...] = ("Slot",)
DEFAULT_PRIMITIVE_SOURCES: tuple[str, ...] = ("@radix-ui/", "radix-ui", "@headlessui/react")
DEFAULT_CLONE_CALLEES: tuple[str, ...] = ("cloneElement",)

JSX_ELEMENT_TYPES = {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}
_WRAPPER_TYPES = {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"}
_FRAGMENT_NAMES = {"Fragment", "React.Fragment"}
_NON_ELEMENT_CHILDREN = {"jsx_opening_element", "jsx_closing_element", "jsx_text", "jsx_expression", "comment"}


class Shape(enum.Enum):
    WRAPPED = "wrapped"
    FUNCTION = "function"
    CLASS = "class"
    BINDING = "binding"
    FRAGMENT = "fragment"
    SLOT = "slot"
    PRIMITIVE = "primitive"
    FORWARD_REF = "forward-ref"
    CLONE_CALL = "clone-call"
    ELEMENT = "element"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ShapeRules:
    """Names that decide how calls and JSX elements are classified."""

    slot_components: tuple[str, ...] = DEFAULT_SLOT_COMPONENTS
    primitive_sources: tuple[str, ...] = DEFAULT_PRIMITIVE_SOURCES
    clone_callees: tuple[str, ...] = DEFAULT_CLONE_CALLEES


@dataclass(frozen=True)
class Scope:
    """Where an expression is being resolved: its module and enclosing function."""

    module: ModuleIndex
    function: Optional[Node] = None
    visited: frozenset[str] = field(default_factory=frozenset)


def classify(node: Node, scope: Scope, rules: ShapeRules) -> Shape:
    node_type = node.type
    if node_type in _WRAPPER_TYPES:
        return Shape.WRAPPED
    if node_type in FUNCTION_TYPES:
        return Shape.FUNCTION
    if node_type in CLASS_TYPES:
        return Shape.CLASS
    if node_type == "identifier":
        if scope.module.binding(scope.module.parsed.text(node)) is not None:
            return Shape.BINDING
        return Shape.UNSUPPORTED
    if node_type == "call_expression":
        if scope.module.is_wrapper_call(node):
            return Shape.FORWARD_REF
        if callee_name(node, scope.module.parsed) in rules.clone_callees:
            return Shape.CLONE_CALL
        return Shape.UNSUPPORTED
    if node_type in JSX_ELEMENT_TYPES:
        name = element_name(node, scope)
        if name is None or name in _FRAGMENT_NAMES:
            return Shape.FRAGMENT
        if is_slot(name, scope, rules):
            return Shape.SLOT
        if is_primitive(name, scope, rules):
            return Shape.PRIMITIVE
        return Shape.ELEMENT
    return Shape.UNSUPPORTED


def opening_element(node: Node) -> Optional[Node]:
    """Return the node that holds a JSX element's name and attributes."""
    if node.type == "jsx_self_closing_element":
        return node
    if node.type == "jsx_element":
        opening = node.child_by_field_name("open_tag")
        if opening is not None:
            return opening
        for child in node.named_children:
            if child.type == "jsx_opening_element":
                return child
    return None


def element_name(node: Node, scope: Scope) -> Optional[str]:
    opening = opening_element(node)
    if opening is None:
        return None
    name_node = opening.child_by_field_name("name")
    if name_node is None:
        return None
    return scope.module.parsed.text(name_node)


def first_element_child(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type in _NON_ELEMENT_CHILDREN:
            continue
        if child.type in JSX_ELEMENT_TYPES:
            return child
    return None


def is_slot(name: str, scope: Scope, rules: ShapeRules) -> bool:
    """True for slot elements, including ``const Comp = asChild ? Slot : "button"``."""
    if _names_slot(name, scope, rules):
        return True
    if "." not in name and scope.function is not None:
        local = local_binding(scope.function, name, scope)
        if local is not None:
            return any(_names_slot(candidate, scope, rules) for candidate in _identifier_branches(local, scope))
    return False


def _names_slot(name: str, scope: Scope, rules: ShapeRules) -> bool:
    slots = set(rules.slot_components)
    segments = name.split(".")
    if name in slots or segments[0] in slots or segments[-1] in slots:
        return True
    binding = scope.module.import_for(segments[0])
    return binding is not None and binding.imported in slots


def is_primitive(name: str, scope: Scope, rules: ShapeRules) -> bool:
    binding = scope.module.import_for(name.split(".")[0])
    if binding is None:
        return False
    return any(binding.source.startswith(prefix) for prefix in rules.primitive_sources)


def local_binding(function: Node, name: str, scope: Scope) -> Optional[Node]:
    """Return the value bound to ``name`` by a top-level ``const`` in a function body."""
    body = function.child_by_field_name("body")
    if body is None or body.type != "statement_block":
        return None
    for statement in body.named_children:
        if statement.type not in {"lexical_declaration", "variable_declaration"}:
            continue
        for declarator in statement.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is not None and scope.module.parsed.text(name_node) == name:
                return declarator.child_by_field_name("value")
    return None


def _identifier_branches(value: Node, scope: Scope) -> Iterable[str]:
    value = unwrap_expression(value)
    if value.type == "ternary_expression":
        branches: List[str] = []
        for field_name in ("consequence", "alternative"):
            branch = value.child_by_field_name(field_name)
            if branch is not None:
                branches.extend(_identifier_branches(branch, scope))
        return branches
    if value.type in {"identifier", "member_expression"}:
        return [scope.module.parsed.text(value)]
    return []


__all__ = [
    "DEFAULT_CLONE_CALLEES",
    "DEFAULT_PRIMITIVE_SOURCES",
    "DEFAULT_SLOT_COMPONENTS",
    "Scope",
    "Shape",
    "ShapeRules",
    "classify",
    "element_name",
    "first_element_child",
    "is_primitive",
    "is_slot",
    "local_binding",
    "opening_element",
]
