"""Tests for literal classification and identifier predicates."""

from __future__ import annotations

from typing import List

from tree_sitter import Node

from uitag.analysis.attributes import element_identifier, existing_identifier
from uitag.analysis.literals import Verdict, classify_attribute, classify_call
from uitag.parsing.tree_sitter import ParsedSource, SourceParser, iter_nodes


def _parse(parser: SourceParser, code: str) -> ParsedSource:
    return parser.parse("components/ui/sample.tsx", code.encode("utf-8"))


def _nodes(parsed: ParsedSource, node_type: str) -> List[Node]:
    return [node for node in iter_nodes(parsed.root) if node.type == node_type]


def test_attribute_values_are_classified(source_parser: SourceParser) -> None:
    parsed = _parse(
        source_parser,
        'const a = <div data-ui="ui-a" x={"ui-b"} y={`ui-c`} z={`ui-${name}`} w={name} v />;',
    )
    verdicts = [classify_attribute(node, parsed.source) for node in _nodes(parsed, "jsx_attribute")]

    assert [(c.verdict, c.value) for c in verdicts] == [
        (Verdict.LITERAL, "ui-a"),
        (Verdict.LITERAL, "ui-b"),
        (Verdict.LITERAL, "ui-c"),
        (Verdict.NON_LITERAL, None),
        (Verdict.NON_LITERAL, None),
        (Verdict.ABSENT, None),
    ]


def test_helper_call_arguments_are_classified(source_parser: SourceParser) -> None:
    parsed = _parse(source_parser, 'uiTarget("ui-a"); uiTarget(id); uiTarget();')
    verdicts = [classify_call(node, parsed.source).verdict for node in _nodes(parsed, "call_expression")]

    assert verdicts == [Verdict.LITERAL, Verdict.NON_LITERAL, Verdict.ABSENT]


def test_element_identifier_finds_attribute_and_helper_spread(source_parser: SourceParser) -> None:
    parsed = _parse(
        source_parser,
        'const a = <div data-ui="ui-a" />;\nconst b = <div {...uiTarget("ui-b")} />;\nconst c = <div id="c" />;',
    )
    elements = _nodes(parsed, "jsx_self_closing_element")
    helpers = ("uiTarget",)

    first = element_identifier(elements[0], parsed.source, "data-ui", helpers)
    second = element_identifier(elements[1], parsed.source, "data-ui", helpers)

    assert first is not None and first.classification.value == "ui-a"
    assert second is not None and second.kind == "helper"
    assert second.classification.value == "ui-b"
    assert existing_identifier(elements[2], parsed.source, "data-ui", helpers) is None


def test_object_keys_carry_identifiers(source_parser: SourceParser) -> None:
    parsed = _parse(source_parser, 'const props = { "data-ui": "ui-a", role: "x" };\nconst other = { role: "y" };')
    objects = _nodes(parsed, "object")

    found = existing_identifier(objects[0], parsed.source, "data-ui", ())
    assert found is not None and found.kind == "property"
    assert existing_identifier(objects[1], parsed.source, "data-ui", ()) is None
