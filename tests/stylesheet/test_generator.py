"""Tests for the two-file stylesheet generator."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from uitag.models import ComponentUnit
from uitag.registry import Registry
from uitag.stylesheet import StylesheetGenerator, read_generated_stylesheet


def _registry() -> Registry:
    registry = Registry()
    registry.add("ui-button", ComponentUnit("components/ui/button.tsx", "Button"))
    registry.add("page-home", ComponentUnit("app/page.tsx", "default", True))
    registry.add("billing-totals", ComponentUnit("components/billing/totals.tsx", "Totals"))
    registry.add("ui-list-item", ComponentUnit("components/ui/list.tsx", "ListItem"))
    registry.add("ui-list-item", ComponentUnit("components/ui/menu.tsx", "MenuItem"))
    return registry


class _Clock:
    def __init__(self) -> None:
        self.ticks = 0

    def __call__(self) -> datetime:
        self.ticks += 1
        return datetime(2026, 1, 1, 12, 0, self.ticks, tzinfo=UTC)


def test_generated_artifact_layout(tmp_path: Path) -> None:
    generator = StylesheetGenerator(clock=_Clock())
    registry = _registry()

    result = generator.generate(tmp_path, registry)
    text = result.generated_path.read_text(encoding="utf-8")

    assert result.written
    assert result.generated_path == tmp_path / "styles" / "ui-targets.generated.css"
    assert "DO NOT EDIT" in text
    assert "generated-at: 2026-01-01T12:00:01Z" in text
    assert f"content-hash: sha256:{registry.content_hash('data-ui')}" in text
    assert text.index("/* == page == */") < text.index("/* == ui == */") < text.index("/* == billing == */")
    assert '[data-ui="ui-button"] {}' in text
    assert (
        "/* ui-list-item <- components/ui/list.tsx#ListItem, components/ui/menu.tsx#MenuItem */" in text
    )


def test_unchanged_input_yields_byte_identical_output(tmp_path: Path) -> None:
    clock = _Clock()
    generator = StylesheetGenerator(clock=clock)

    first = generator.generate(tmp_path, _registry())
    before = first.generated_path.read_bytes()
    second = generator.generate(tmp_path, _registry())

    assert not second.written
    assert second.generated_path.read_bytes() == before
    assert clock.ticks == 1


def test_changed_input_restamps_the_artifact(tmp_path: Path) -> None:
    generator = StylesheetGenerator(clock=_Clock())
    generator.generate(tmp_path, _registry())

    registry = _registry()
    registry.add("ui-badge", ComponentUnit("components/ui/badge.tsx", "Badge"))
    result = generator.generate(tmp_path, registry)
    text = result.generated_path.read_text(encoding="utf-8")

    assert result.written
    assert "generated-at: 2026-01-01T12:00:02Z" in text
    assert '[data-ui="ui-badge"] {}' in text


def test_custom_artifact_is_created_once_and_never_rewritten(tmp_path: Path) -> None:
    generator = StylesheetGenerator(clock=_Clock())

    first = generator.generate(tmp_path, _registry())
    assert first.custom_created
    custom = first.custom_path
    custom.write_text('[data-ui="ui-button"] { color: red; }\n', encoding="utf-8")

    registry = _registry()
    registry.add("ui-badge", ComponentUnit("components/ui/badge.tsx", "Badge"))
    second = generator.generate(tmp_path, registry)

    assert not second.custom_created
    assert custom.read_text(encoding="utf-8") == '[data-ui="ui-button"] { color: red; }\n'


def test_check_mode_reports_staleness_without_writing(tmp_path: Path) -> None:
    generator = StylesheetGenerator(clock=_Clock())

    missing = generator.generate(tmp_path, _registry(), check=True)
    assert missing.stale
    assert not missing.generated_path.exists()
    assert not missing.custom_path.exists()

    generator.generate(tmp_path, _registry())
    fresh = generator.generate(tmp_path, _registry(), check=True)
    assert not fresh.stale

    registry = _registry()
    registry.add("ui-badge", ComponentUnit("components/ui/badge.tsx", "Badge"))
    assert generator.generate(tmp_path, registry, check=True).stale


def test_generated_artifact_round_trips(tmp_path: Path) -> None:
    generator = StylesheetGenerator(clock=_Clock())
    registry = _registry()

    result = generator.generate(tmp_path, registry)
    parsed = read_generated_stylesheet(result.generated_path.read_text(encoding="utf-8"))

    assert parsed.timestamp == "2026-01-01T12:00:01Z"
    assert parsed.content_hash == registry.content_hash("data-ui")
    assert parsed.registry.identifiers() == registry.identifiers()
    for entry in registry:
        assert parsed.registry.get(entry.identifier).sources == entry.sources


def test_round_trip_keeps_hyphenated_domains(tmp_path: Path) -> None:
    registry = Registry()
    registry.add("user-profile-avatar", ComponentUnit("components/user-profile/avatar.tsx", "Avatar"))
    registry.add("user-badge", ComponentUnit("components/user/badge.tsx", "Badge"))

    result = StylesheetGenerator(clock=_Clock()).generate(tmp_path, registry)
    text = result.generated_path.read_text(encoding="utf-8")
    parsed = read_generated_stylesheet(text)

    assert text.index("/* == user == */") < text.index("/* == user-profile == */")
    assert [group for group, _ in parsed.registry.grouped()] == ["user", "user-profile"]
    assert parsed.registry.get("user-profile-avatar").domain == "user-profile"


def test_empty_registry_renders_header_only(tmp_path: Path) -> None:
    generator = StylesheetGenerator(attribute="data-test", clock=_Clock())

    text = generator.render(Registry(), timestamp="2026-01-01T00:00:00Z")

    assert text.endswith(" */\n")
    assert "selectors: 0" in text
    assert "[data-test" not in text
