"""Tests for source parsing and component discovery."""

from __future__ import annotations

import textwrap

import pytest

from uitag.models import MODULE_SCOPE
from uitag.parsing.components import ModuleIndex
from uitag.parsing.tree_sitter import SourceParseError, SourceParser


def _index(parser: SourceParser, path: str, code: str) -> ModuleIndex:
    source = textwrap.dedent(code).lstrip("\n").encode("utf-8")
    return ModuleIndex(parser.parse(path, source))


def test_discovers_exported_components_in_declaration_order(source_parser: SourceParser) -> None:
    module = _index(
        source_parser,
        "components/ui/card.tsx",
        """
        import * as React from "react";

        export function Card() {
          return <div />;
        }

        export const CardTitle = React.forwardRef<HTMLHeadingElement>((props, ref) => (
          <h3 ref={ref} {...props} />
        ));

        export const cardVariants = () => "x";

        function CardFooter() {
          return <div />;
        }

        export { CardFooter as Footer };
        """,
    )

    assert [component.export_name for component in module.components] == ["Card", "CardTitle", "Footer"]
    assert module.components[2].local_name == "CardFooter"
    assert module.import_for("React").imported == "*"


def test_default_exports_use_the_synthetic_name(source_parser: SourceParser) -> None:
    module = _index(
        source_parser,
        "app/settings/page.tsx",
        """
        export default function SettingsPage() {
          return <main />;
        }
        """,
    )

    [component] = module.components
    assert component.is_default
    assert component.display_name == "default (SettingsPage)"
    assert component.unit("app/settings/page.tsx").export_name == "default"


def test_default_export_of_an_identifier_follows_the_binding(source_parser: SourceParser) -> None:
    module = _index(
        source_parser,
        "components/ui/badge.tsx",
        """
        const Badge = () => <span />;
        export default Badge;
        """,
    )

    [component] = module.components
    assert component.is_default
    assert component.node.type == "arrow_function"


def test_re_exports_are_ignored(source_parser: SourceParser) -> None:
    module = _index(
        source_parser,
        "components/ui/index.ts",
        """
        export { Button } from "./button";
        export * from "./card";
        """,
    )

    assert module.components == []


def test_unit_at_attributes_offsets(source_parser: SourceParser) -> None:
    code = textwrap.dedent(
        """
        const shared = { "data-ui": "ui-shared" };

        export function Panel() {
          return <section data-ui="ui-panel" />;
        }
        """
    ).lstrip("\n")
    source = code.encode("utf-8")
    module = ModuleIndex(source_parser.parse("components/ui/panel.tsx", source))

    assert module.unit_at(source.index(b"ui-panel")).export_name == "Panel"
    assert module.unit_at(source.index(b"ui-shared")).export_name == "shared"
    assert module.unit_at(len(source) - 1).export_name == MODULE_SCOPE


def test_syntax_errors_raise_parse_error(source_parser: SourceParser) -> None:
    with pytest.raises(SourceParseError) as excinfo:
        source_parser.parse("components/ui/broken.tsx", b"export function Broken( {\n  return <div>;\n")
    assert excinfo.value.path == "components/ui/broken.tsx"
    assert excinfo.value.to_diagnostic().code == "parse-error"


def test_unsupported_suffix_is_rejected(source_parser: SourceParser) -> None:
    assert not source_parser.supports("styles/site.css")
    with pytest.raises(SourceParseError):
        source_parser.parse("styles/site.css", b"a {}")
