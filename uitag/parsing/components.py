"""Discovers exported components, imports and top-level bindings of a module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from tree_sitter import Node

from ..models import DEFAULT_EXPORT, MODULE_SCOPE, ComponentUnit
from .tree_sitter import ParsedSource, unwrap_expression

FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "arrow_function",
}
CLASS_TYPES = {"class_declaration", "abstract_class_declaration", "class"}

DEFAULT_WRAPPER_CALLEES: tuple[str, ...] = ("forwardRef", "memo")

_DECLARATION_TYPES = FUNCTION_TYPES | CLASS_TYPES
_VARIABLE_TYPES = {"lexical_declaration", "variable_declaration"}

# (export name, local name, value node, declaring statement)
_PendingExport = Tuple[str, Optional[str], Optional[Node], Node]


@dataclass(frozen=True)
class ImportBinding:
    """A name brought into module scope by an import statement."""

    local: str
    imported: str
    source: str


@dataclass
class ComponentDecl:
    """An exported component discovered in a module."""

    export_name: str
    local_name: Optional[str]
    node: Node
    declaration: Node
    order: int

    @property
    def is_default(self) -> bool:
        return self.export_name == DEFAULT_EXPORT

    @property
    def display_name(self) -> str:
        if self.is_default and self.local_name:
            return f"{DEFAULT_EXPORT} ({self.local_name})"
        return self.export_name

    def unit(self, file_path: str) -> ComponentUnit:
        return ComponentUnit(file_path=file_path, export_name=self.export_name, is_default=self.is_default)


def callee_name(call: Node, parsed: ParsedSource) -> str:
    """Return the last segment of a call's callee (``React.forwardRef`` -> ``forwardRef``)."""
    callee = call.child_by_field_name("function")
    if callee is None:
        return ""
    return parsed.text(callee).rsplit(".", 1)[-1].strip()


def string_literal_value(node: Node, parsed: ParsedSource) -> str:
    text = parsed.text(node)
    return text[1:-1] if len(text) >= 2 else text


class ModuleIndex:
    """Index of a parsed module: imports, top-level bindings and exported components."""

    def __init__(
        self,
        parsed: ParsedSource,
        *,
        wrapper_callees: Iterable[str] = DEFAULT_WRAPPER_CALLEES,
    ) -> None:
        self.parsed = parsed
        self.imports: Dict[str, ImportBinding] = {}
        self.bindings: Dict[str, Node] = {}
        self.declarations: Dict[str, Node] = {}
        self.components: List[ComponentDecl] = []
        self._wrapper_callees = set(wrapper_callees)
        self._index()

    @property
    def path(self) -> str:
        return self.parsed.path

    def binding(self, name: str) -> Optional[Node]:
        return self.bindings.get(name)

    def import_for(self, name: str) -> Optional[ImportBinding]:
        return self.imports.get(name)

    def is_wrapper_call(self, node: Node) -> bool:
        return node.type == "call_expression" and callee_name(node, self.parsed) in self._wrapper_callees

    def unit_at(self, offset: int) -> ComponentUnit:
        """Return the component unit whose declaration encloses ``offset``."""
        for component in self.components:
            if component.declaration.start_byte <= offset < component.declaration.end_byte:
                return component.unit(self.path)
        for name, statement in self.declarations.items():
            if statement.start_byte <= offset < statement.end_byte:
                return ComponentUnit(file_path=self.path, export_name=name)
        return ComponentUnit(file_path=self.path, export_name=MODULE_SCOPE)

    # ------------------------------------------------------------------
    # Indexing

    def _index(self) -> None:
        pending: List[_PendingExport] = []
        for statement in self.parsed.root.named_children:
            if statement.type == "import_statement":
                self._index_import(statement)
            elif statement.type == "export_statement":
                pending.extend(self._index_export(statement))
            else:
                self._index_declaration(statement, statement)

        for export_name, local_name, node, statement in pending:
            if node is None and local_name:
                node = self.bindings.get(local_name)
                statement = self.declarations.get(local_name, statement)
            if node is None or not self._is_component(export_name, node):
                continue
            self.components.append(
                ComponentDecl(
                    export_name=export_name,
                    local_name=local_name,
                    node=node,
                    declaration=statement,
                    order=len(self.components),
                )
            )

    def _index_import(self, statement: Node) -> None:
        source_node = statement.child_by_field_name("source")
        if source_node is None:
            return
        source = string_literal_value(source_node, self.parsed)
        for clause in statement.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    local = self.parsed.text(part)
                    self.imports[local] = ImportBinding(local=local, imported="default", source=source)
                elif part.type == "namespace_import":
                    for name_node in part.named_children:
                        local = self.parsed.text(name_node)
                        self.imports[local] = ImportBinding(local=local, imported="*", source=source)
                elif part.type == "named_imports":
                    for specifier in part.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        name_node = specifier.child_by_field_name("name")
                        alias_node = specifier.child_by_field_name("alias")
                        if name_node is None:
                            continue
                        imported = self.parsed.text(name_node)
                        local = self.parsed.text(alias_node) if alias_node is not None else imported
                        self.imports[local] = ImportBinding(local=local, imported=imported, source=source)

    def _index_declaration(self, node: Node, statement: Node) -> List[Tuple[str, Node]]:
        declared: List[Tuple[str, Node]] = []
        if node.type in _DECLARATION_TYPES:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                declared.append((self.parsed.text(name_node), node))
        elif node.type in _VARIABLE_TYPES:
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                value_node = declarator.child_by_field_name("value")
                if name_node is None or value_node is None or name_node.type != "identifier":
                    continue
                declared.append((self.parsed.text(name_node), value_node))
        for name, value in declared:
            self.bindings[name] = value
            self.declarations[name] = statement
        return declared

    def _index_export(self, statement: Node) -> List[_PendingExport]:
        is_default = any(child.type == "default" for child in statement.children)

        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            declared = self._index_declaration(declaration, statement)
            if is_default:
                if declared:
                    name, node = declared[0]
                    return [(DEFAULT_EXPORT, name, node, statement)]
                return [(DEFAULT_EXPORT, None, declaration, statement)]
            return [(name, name, node, statement) for name, node in declared]

        value = statement.child_by_field_name("value")
        if value is not None:
            value = unwrap_expression(value)
            if value.type == "identifier":
                return [(DEFAULT_EXPORT, self.parsed.text(value), None, statement)]
            name_node = value.child_by_field_name("name") if value.type in _DECLARATION_TYPES else None
            local_name = self.parsed.text(name_node) if name_node is not None else None
            return [(DEFAULT_EXPORT, local_name, value, statement)]

        if statement.child_by_field_name("source") is not None:
            # re-exports belong to the module that declares them
            return []

        exports: List[_PendingExport] = []
        for clause in statement.named_children:
            if clause.type != "export_clause":
                continue
            for specifier in clause.named_children:
                if specifier.type != "export_specifier":
                    continue
                name_node = specifier.child_by_field_name("name")
                alias_node = specifier.child_by_field_name("alias")
                if name_node is None:
                    continue
                local = self.parsed.text(name_node)
                exported = self.parsed.text(alias_node) if alias_node is not None else local
                exports.append((exported, local, None, statement))
        return exports

    def _is_component(self, export_name: str, node: Node) -> bool:
        value = unwrap_expression(node)
        if export_name == DEFAULT_EXPORT:
            named_like_component = True
        else:
            named_like_component = export_name[:1].isupper()
        if not named_like_component:
            return False
        if value.type in _DECLARATION_TYPES:
            return True
        return self.is_wrapper_call(value)


__all__ = [
    "CLASS_TYPES",
    "ComponentDecl",
    "DEFAULT_WRAPPER_CALLEES",
    "FUNCTION_TYPES",
    "ImportBinding",
    "ModuleIndex",
    "callee_name",
    "string_literal_value",
]
