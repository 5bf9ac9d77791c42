"""Tests for the selector extractor and registry ordering."""

from __future__ import annotations

import pytest

from tests._fixtures.repo_builder import RepoBuilder
from uitag.models import ComponentUnit
from uitag.parsing.tree_sitter import SourceParseFailure
from uitag.registry import Registry, SelectorExtractor
from uitag.validators import NonLiteralArgumentError, RegistryValidationError


def _extract(repo_builder: RepoBuilder, **kwargs) -> Registry:  # type: ignore[no-untyped-def]
    return SelectorExtractor(**kwargs).extract(repo_builder.path(), repo_builder.scan().paths())


def test_registry_is_ordered_by_layer_then_domain(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/button.tsx": """
                export const Button = () => <button data-ui="ui-button" />;
                export const IconButton = () => <button data-ui="ui-icon-button" />;
            """,
            "components/billing/totals.tsx": """
                export const Totals = () => <div data-ui="billing-totals" />;
            """,
            "components/auth/login-form.tsx": """
                export const LoginForm = () => <form {...uiTarget("auth-login-form")} />;
            """,
            "components/layout/shell.tsx": """
                export const Shell = () => <div data-ui="layout-shell" />;
            """,
            "app/page.tsx": """
                export default function Home() {
                  return <main data-ui="page-home" />;
                }
            """,
        }
    )

    registry = _extract(repo_builder)

    assert registry.identifiers() == [
        "page-home",
        "layout-shell",
        "ui-button",
        "ui-icon-button",
        "auth-login-form",
        "billing-totals",
    ]
    assert [group for group, _ in registry.grouped()] == ["page", "layout", "ui", "auth", "billing"]
    assert registry.get("page-home").sources == [ComponentUnit("app/page.tsx", "default", True)]


def test_hyphenated_domain_folder_keeps_its_own_group(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/user-profile/avatar.tsx": """
                export const Avatar = () => <img data-ui="user-profile-avatar" />;
            """,
            "components/user/badge.tsx": """
                export const Badge = () => <span data-ui="user-badge" />;
            """,
        }
    )

    registry = _extract(repo_builder)

    avatar = registry.get("user-profile-avatar")
    assert avatar is not None
    assert (avatar.layer, avatar.domain) == ("domain", "user-profile")
    assert registry.get("user-badge").domain == "user"
    assert [group for group, _ in registry.grouped()] == ["user", "user-profile"]


def test_clone_props_and_module_level_sites_are_collected(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/tooltip.tsx": """
                import { cloneElement } from "react";
                const triggerProps = { "data-ui": "ui-tooltip-trigger" };
                export function Tooltip({ children }) {
                  return cloneElement(children, { "data-ui": "ui-tooltip" });
                }
            """,
        }
    )

    registry = _extract(repo_builder)

    assert registry.get("ui-tooltip").sources[0].export_name == "Tooltip"
    assert registry.get("ui-tooltip-trigger").sources[0].export_name == "triggerProps"


def test_helper_definition_is_not_a_site(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib/ui-target.ts": """
                export function uiTarget(id: string) {
                  return { "data-ui": id };
                }
            """,
            "components/ui/chip.tsx": """
                export const Chip = () => <span {...uiTarget("ui-chip")} />;
            """,
        }
    )

    registry = _extract(repo_builder)

    assert registry.identifiers() == ["ui-chip"]


def test_duplicates_across_components_are_rejected(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/a.tsx": """
                export const A = () => <div data-ui="ui-row" />;
            """,
            "components/ui/b.tsx": """
                export const B = () => <div data-ui="ui-row" />;
            """,
        }
    )

    with pytest.raises(RegistryValidationError) as excinfo:
        _extract(repo_builder)

    [diagnostic] = excinfo.value.diagnostics
    assert diagnostic.code == "duplicate-identifier"
    assert diagnostic.file == "components/ui/a.tsx"
    assert "components/ui/b.tsx#B" in diagnostic.message


def test_allowlisted_duplicates_are_accepted(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/a.tsx": """
                export const A = () => <li data-ui="ui-list-item" />;
            """,
            "components/ui/b.tsx": """
                export const B = () => <li data-ui="ui-list-item" />;
            """,
        }
    )

    registry = _extract(repo_builder, allowlist=["ui-list-item"])

    assert registry.get("ui-list-item").distinct_units == 2


def test_repeated_identifier_within_one_component_is_not_a_duplicate(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/menu.tsx": """
                export function Menu({ open }) {
                  if (open) {
                    return <ul data-ui="ui-menu" className="open" />;
                  }
                  return <ul data-ui="ui-menu" />;
                }
            """,
        }
    )

    registry = _extract(repo_builder)

    assert registry.get("ui-menu").distinct_units == 1


def test_non_literal_sites_abort_with_every_site(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/a.tsx": """
                export const A = ({ id }) => <div data-ui={id} />;
            """,
            "components/ui/b.tsx": """
                export const B = ({ name }) => <div {...uiTarget(`ui-${name}`)} />;
            """,
        }
    )

    with pytest.raises(NonLiteralArgumentError) as excinfo:
        _extract(repo_builder)

    assert [(d.file, d.export) for d in excinfo.value.diagnostics] == [
        ("components/ui/a.tsx", "A"),
        ("components/ui/b.tsx", "B"),
    ]


def test_malformed_literals_are_rejected(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/a.tsx": """
                export const A = () => <div data-ui="ui-a1" />;
            """,
        }
    )

    with pytest.raises(RegistryValidationError) as excinfo:
        _extract(repo_builder)

    assert excinfo.value.diagnostics[0].code == "malformed-identifier"


def test_parse_errors_abort_extraction(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"components/ui/a.tsx": "export const A = () => <div;\n"})

    with pytest.raises(SourceParseFailure):
        _extract(repo_builder)


def test_content_hash_ignores_insertion_order() -> None:
    first = Registry()
    first.add("ui-a", ComponentUnit("a.tsx", "A"))
    first.add("ui-b", ComponentUnit("b.tsx", "B"))
    second = Registry()
    second.add("ui-b", ComponentUnit("b.tsx", "B"))
    second.add("ui-a", ComponentUnit("a.tsx", "A"))

    assert first.content_hash("data-ui") == second.content_hash("data-ui")
    assert first.content_hash("data-ui") != first.content_hash("data-test")
    assert first.selectors("data-ui") == ['[data-ui="ui-a"]', '[data-ui="ui-b"]']
