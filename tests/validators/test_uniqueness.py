"""Tests for the registry validators."""

from __future__ import annotations

from uitag.models import ComponentUnit
from uitag.registry import Registry
from uitag.validators import (
    IdentifierFormatValidator,
    UniquenessValidator,
    ValidationContext,
    run_validators,
)


def _registry(*pairs: tuple[str, ComponentUnit]) -> Registry:
    registry = Registry()
    for identifier, unit in pairs:
        registry.add(identifier, unit)
    return registry


def test_uniqueness_flags_each_shared_identifier_once() -> None:
    registry = _registry(
        ("ui-row", ComponentUnit("components/ui/a.tsx", "A")),
        ("ui-row", ComponentUnit("components/ui/b.tsx", "B")),
        ("ui-row", ComponentUnit("components/ui/c.tsx", "C")),
        ("ui-cell", ComponentUnit("components/ui/a.tsx", "A")),
    )

    diagnostics = UniquenessValidator().validate(ValidationContext(registry=registry))

    assert len(diagnostics) == 1
    assert diagnostics[0].export == "A"
    assert "components/ui/b.tsx#B, components/ui/c.tsx#C" in diagnostics[0].message


def test_allowlist_suppresses_duplicates() -> None:
    registry = _registry(
        ("ui-row", ComponentUnit("components/ui/a.tsx", "A")),
        ("ui-row", ComponentUnit("components/ui/b.tsx", "B")),
    )

    context = ValidationContext(registry=registry, allowlist=frozenset({"ui-row"}))

    assert UniquenessValidator().validate(context) == []


def test_format_validator_reports_every_source() -> None:
    registry = _registry(
        ("UI-Row", ComponentUnit("components/ui/a.tsx", "A")),
        ("ui", ComponentUnit("components/ui/b.tsx", "B")),
        ("ui-fine", ComponentUnit("components/ui/c.tsx", "C")),
    )

    diagnostics = run_validators(
        [IdentifierFormatValidator(), UniquenessValidator()], ValidationContext(registry=registry)
    )

    assert sorted((d.code, d.export) for d in diagnostics) == [
        ("malformed-identifier", "A"),
        ("malformed-identifier", "B"),
    ]
