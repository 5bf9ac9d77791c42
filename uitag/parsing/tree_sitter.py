"""Tree-sitter parsing for component source files."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, Iterator, List, Optional, Sequence

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

from ..models import PARSE_ERROR, Diagnostic

_LANGUAGE_BY_SUFFIX = {
    ".tsx": "tsx",
    ".ts": "typescript",
    ".jsx": "javascript",
    ".js": "javascript",
    ".mjs": "javascript",
}

_WRAPPER_TYPES = {
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
}


class SourceParseError(RuntimeError):
    """Raised when a source file cannot be parsed without syntax errors."""

    def __init__(self, path: str, line: int | None = None, detail: str | None = None) -> None:
        location = f"{path}:{line}" if line is not None else path
        super().__init__(f"{location}: {detail or 'syntax error'}")
        self.path = path
        self.line = line
        self.detail = detail or "syntax error"

    def to_diagnostic(self) -> Diagnostic:
        where = f" at line {self.line}" if self.line is not None else ""
        return Diagnostic(code=PARSE_ERROR, file=self.path, export=None, message=f"{self.detail}{where}")


class SourceParseFailure(RuntimeError):
    """Raised when one or more files of a batch failed to parse."""

    def __init__(self, errors: Sequence[SourceParseError]) -> None:
        self.errors = list(errors)
        paths = ", ".join(error.path for error in self.errors)
        super().__init__(f"{len(self.errors)} file(s) failed to parse: {paths}")

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [error.to_diagnostic() for error in self.errors]


@dataclass
class ParsedSource:
    """A parsed file together with the bytes it was parsed from."""

    path: str
    source: bytes
    tree: Tree
    language: str

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return node_text(node, self.source)


class SourceParser:
    """Parses JSX/TSX sources, keeping one tree-sitter parser per thread and language."""

    def __init__(self) -> None:
        self._local = threading.local()

    @staticmethod
    def language_for_path(path: str) -> Optional[str]:
        return _LANGUAGE_BY_SUFFIX.get(PurePosixPath(path).suffix.lower())

    def supports(self, path: str) -> bool:
        return self.language_for_path(path) is not None

    def parse(self, path: str, source: bytes) -> ParsedSource:
        language = self.language_for_path(path)
        if language is None:
            raise SourceParseError(path, detail="unsupported file type")
        tree = self._get_parser(language).parse(source)
        if tree.root_node.has_error:
            raise SourceParseError(path, line=_first_error_line(tree.root_node))
        return ParsedSource(path=path, source=source, tree=tree, language=language)

    def _get_parser(self, language: str) -> Parser:
        parsers: Dict[str, Parser] | None = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = {}
            self._local.parsers = parsers
        parser = parsers.get(language)
        if parser is None:
            parser = get_parser(language)
            parsers[language] = parser
        return parser


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its named descendants in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.named_children))


def unwrap_expression(node: Node) -> Node:
    """Strip parentheses and type-only wrappers (``as``, ``satisfies``, ``!``)."""
    current = node
    while current.type in _WRAPPER_TYPES and current.named_children:
        current = current.named_children[0]
    return current


def line_of(node: Node) -> int:
    return node.start_point[0] + 1


def _first_error_line(root: Node) -> int | None:
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return line_of(node)
    return None


__all__ = [
    "ParsedSource",
    "SourceParseError",
    "SourceParseFailure",
    "SourceParser",
    "iter_nodes",
    "line_of",
    "node_text",
    "unwrap_expression",
]
