"""Finds the single syntax node of a component that should carry its identifier."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Sequence

from tree_sitter import Node

from ..analysis.attributes import IdentifierSite, existing_identifier
from ..parsing.components import DEFAULT_WRAPPER_CALLEES, ComponentDecl, ModuleIndex
from ..parsing.tree_sitter import ParsedSource, unwrap_expression
from .shapes import (
    Scope,
    Shape,
    ShapeRules,
    classify,
    first_element_child,
    opening_element,
)

DEFAULT_ATTRIBUTE = "data-ui"
DEFAULT_HELPERS: tuple[str, ...] = ("uiTarget",)

_MAX_DEPTH = 24


class TargetStatus(enum.Enum):
    TARGET = "target"
    SATISFIED = "satisfied"
    NO_TARGET = "no-target"


class HandleKind(enum.Enum):
    JSX_ELEMENT = "jsx-element"
    CLONE_PROPS = "clone-props"


@dataclass(frozen=True)
class InjectionHandle:
    """Reference to the node the injector edits.

    For ``JSX_ELEMENT`` handles ``node`` is the opening (or self-closing)
    element. For ``CLONE_PROPS`` handles ``node`` is the clone call and
    ``props`` its props argument, which may be missing.
    """

    kind: HandleKind
    node: Node
    shape: Shape
    props: Optional[Node] = None

    @property
    def key(self) -> tuple[str, int, int]:
        return (self.kind.value, self.node.start_byte, self.node.end_byte)


@dataclass(frozen=True)
class LocateResult:
    status: TargetStatus
    handle: Optional[InjectionHandle] = None
    site: Optional[IdentifierSite] = None
    reason: Optional[str] = None
    trail: tuple[Shape, ...] = ()

    @property
    def has_target(self) -> bool:
        return self.status is not TargetStatus.NO_TARGET


@dataclass(frozen=True)
class LocatorSettings:
    attribute: str = DEFAULT_ATTRIBUTE
    helpers: tuple[str, ...] = DEFAULT_HELPERS
    wrapper_callees: tuple[str, ...] = DEFAULT_WRAPPER_CALLEES
    rules: ShapeRules = ShapeRules()


_Handler = Callable[[Node, Scope, int, tuple], LocateResult]


class TargetLocator:
    """Resolves a component's rendered root to an injection handle."""

    def __init__(self, settings: LocatorSettings | None = None) -> None:
        self.settings = settings or LocatorSettings()
        self._handlers: Dict[Shape, _Handler] = {
            Shape.WRAPPED: self._unwrap,
            Shape.FUNCTION: self._function_root,
            Shape.CLASS: self._class_root,
            Shape.BINDING: self._binding,
            Shape.FRAGMENT: self._fragment_child,
            Shape.SLOT: self._select_element,
            Shape.PRIMITIVE: self._select_element,
            Shape.FORWARD_REF: self._forwarded_render,
            Shape.CLONE_CALL: self._clone_props,
            Shape.ELEMENT: self._select_element,
            Shape.UNSUPPORTED: self._unsupported,
        }

    def index(self, parsed: ParsedSource) -> ModuleIndex:
        """Index a parsed module using this locator's wrapper callees."""
        return ModuleIndex(parsed, wrapper_callees=self.settings.wrapper_callees)

    def locate(self, component: ComponentDecl, module: ModuleIndex) -> LocateResult:
        result = self._resolve(component.node, Scope(module=module), 0, ())
        if result.status is not TargetStatus.TARGET or result.handle is None:
            return result
        site = self.existing_site(result.handle, module.parsed.source)
        if site is not None:
            return replace(result, status=TargetStatus.SATISFIED, site=site)
        return result

    def existing_site(self, handle: InjectionHandle, source: bytes) -> Optional[IdentifierSite]:
        """Return the identifier already attached to a handle, if any."""
        if handle.kind is HandleKind.JSX_ELEMENT:
            node = handle.node
        elif handle.props is not None and handle.props.type == "object":
            node = handle.props
        else:
            return None
        return existing_identifier(node, source, self.settings.attribute, self.settings.helpers)

    # ------------------------------------------------------------------
    # Dispatch

    def _resolve(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        if depth > _MAX_DEPTH:
            return _no_target("component root is nested too deeply", trail)
        shape = classify(node, scope, self.settings.rules)
        return self._handlers[shape](node, scope, depth + 1, trail + (shape,))

    # ------------------------------------------------------------------
    # Handlers

    def _unwrap(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        return self._resolve(unwrap_expression(node), scope, depth, trail)

    def _function_root(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        root = returned_root(node)
        if root is None:
            return _no_target("function returns no element", trail)
        return self._resolve(root, replace(scope, function=node), depth, trail)

    def _class_root(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else ():
            if member.type != "method_definition":
                continue
            name_node = member.child_by_field_name("name")
            if name_node is not None and scope.module.parsed.text(name_node) == "render":
                return self._function_root(member, scope, depth, trail)
        return _no_target("class component has no render() method", trail)

    def _binding(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        name = scope.module.parsed.text(node)
        target = scope.module.binding(name)
        if target is None or name in scope.visited:
            return _no_target(f"cannot follow binding {name!r}", trail)
        return self._resolve(target, replace(scope, visited=scope.visited | {name}), depth, trail)

    def _fragment_child(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        child = first_element_child(node)
        if child is None:
            return _no_target("fragment has no element child", trail)
        return self._resolve(child, scope, depth, trail)

    def _select_element(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        opening = opening_element(node)
        if opening is None:
            return _no_target("element has no opening tag", trail)
        handle = InjectionHandle(kind=HandleKind.JSX_ELEMENT, node=opening, shape=trail[-1])
        return LocateResult(status=TargetStatus.TARGET, handle=handle, trail=trail)

    def _forwarded_render(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        arguments = call_arguments(node)
        if not arguments:
            return _no_target("wrapper call has no render callback", trail)
        return self._resolve(arguments[0], scope, depth, trail)

    def _clone_props(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        arguments = call_arguments(node)
        if not arguments:
            return _no_target("clone call has no element argument", trail)
        props = unwrap_expression(arguments[1]) if len(arguments) > 1 else None
        handle = InjectionHandle(kind=HandleKind.CLONE_PROPS, node=node, shape=trail[-1], props=props)
        return LocateResult(status=TargetStatus.TARGET, handle=handle, trail=trail)

    def _unsupported(self, node: Node, scope: Scope, depth: int, trail: tuple) -> LocateResult:
        return _no_target(f"no eligible element in {node.type.replace('_', ' ')}", trail)


def returned_root(function: Node) -> Optional[Node]:
    """Return the expression a function renders.

    Arrow functions with an expression body render that expression; otherwise
    the last top-level ``return`` with a non-null value wins.
    """
    body = function.child_by_field_name("body")
    if body is None:
        return None
    if body.type != "statement_block":
        return body
    root: Optional[Node] = None
    for statement in body.named_children:
        if statement.type != "return_statement":
            continue
        values = [child for child in statement.named_children if child.type != "comment"]
        if values and unwrap_expression(values[0]).type not in {"null", "undefined"}:
            root = values[0]
    return root


def call_arguments(call: Node) -> Sequence[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type != "comment"]


def _no_target(reason: str, trail: tuple) -> LocateResult:
    return LocateResult(status=TargetStatus.NO_TARGET, reason=reason, trail=trail)


__all__ = [
    "DEFAULT_ATTRIBUTE",
    "DEFAULT_HELPERS",
    "HandleKind",
    "InjectionHandle",
    "LocateResult",
    "LocatorSettings",
    "TargetLocator",
    "TargetStatus",
    "call_arguments",
    "returned_root",
]
