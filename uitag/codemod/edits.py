"""Byte-range text edits that insert identifiers into source files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..locator.locator import HandleKind, InjectionHandle, call_arguments
from ..parsing.tree_sitter import node_text


class EditConflict(RuntimeError):
    """Raised when two edits of one file overlap."""


@dataclass(frozen=True)
class TextEdit:
    start: int
    end: int
    text: str


def build_edit(handle: InjectionHandle, identifier: str, attribute: str, source: bytes) -> TextEdit:
    """Return the edit that attaches ``identifier`` to ``handle``."""
    if handle.kind is HandleKind.JSX_ELEMENT:
        anchor = handle.node.child_by_field_name("type_arguments")
        if anchor is None:
            anchor = handle.node.child_by_field_name("name")
        if anchor is None:
            raise ValueError("JSX handle has no element name")
        return TextEdit(anchor.end_byte, anchor.end_byte, f' {attribute}="{identifier}"')

    entry = f'"{attribute}": "{identifier}"'
    props = handle.props
    if props is None:
        element = call_arguments(handle.node)[0]
        return TextEdit(element.end_byte, element.end_byte, f", {{ {entry} }}")
    if props.type == "object":
        members = [child for child in props.named_children if child.type != "comment"]
        if not members:
            return TextEdit(props.start_byte, props.end_byte, f"{{ {entry} }}")
        return TextEdit(props.start_byte + 1, props.start_byte + 1, f" {entry},")
    # computed props: spread them into a literal that also carries the identifier
    return TextEdit(props.start_byte, props.end_byte, f"{{ ...{node_text(props, source)}, {entry} }}")


def apply_edits(source: bytes, edits: Sequence[TextEdit]) -> bytes:
    """Apply non-overlapping edits to ``source`` and return the new bytes."""
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    for previous, current in zip(ordered, ordered[1:]):
        if current.start < previous.end or (current.start == previous.start == previous.end):
            raise EditConflict(f"overlapping edits at byte {current.start}")
    result = bytearray(source)
    for edit in reversed(ordered):
        result[edit.start : edit.end] = edit.text.encode("utf-8")
    return bytes(result)


__all__ = ["EditConflict", "TextEdit", "apply_edits", "build_edit"]
