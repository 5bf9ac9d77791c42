"""Tests for uitag.orchestrator."""

from __future__ import annotations

from pathlib import Path

from tests._fixtures.repo_builder import RepoBuilder
from uitag.orchestrator import Orchestrator
from uitag.stylesheet import read_generated_stylesheet


class RecordingStager:
    """Test double that records stage invocations."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []

    def stage(self, repo_path: str, files) -> list[str]:  # type: ignore[no-untyped-def]
        self.calls.append((repo_path, list(files)))
        return list(files)


def _write_components(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "components/ui/card/card.tsx": """
                import * as React from "react";

                export function Card({ children }) {
                  return <div className="card">{children}</div>;
                }

                export const CardHeader = React.forwardRef((props, ref) => (
                  <>
                    <div ref={ref} {...props} />
                  </>
                ));
            """,
            "components/layout/dashboard-sidebar/index.tsx": """
                export function DashboardSidebar() {
                  return <aside />;
                }
            """,
            "app/(dashboard)/objects/objects-list/page.tsx": """
                export default function ObjectsPage() {
                  return <main />;
                }
            """,
        }
    )


def test_inject_then_generate_round_trips(repo_builder: RepoBuilder) -> None:
    _write_components(repo_builder)
    stager = RecordingStager()
    orchestrator = Orchestrator(stager=stager)  # type: ignore[arg-type]
    root = str(repo_builder.path())

    injected = orchestrator.run_inject(root)
    generated = orchestrator.run_generate(root)

    assert injected.report.ok
    assert len(stager.calls) == 1
    assert sorted(stager.calls[0][1]) == sorted(injected.report.changed_files)
    assert generated.registry.identifiers() == [
        "page-objects-list",
        "layout-sidebar",
        "ui-card",
        "ui-card-header",
    ]
    text = generated.result.generated_path.read_text(encoding="utf-8")
    parsed = read_generated_stylesheet(text)
    assert parsed.registry.identifiers() == generated.registry.identifiers()
    assert parsed.content_hash == generated.result.content_hash


def test_second_inject_reports_zero_changed_files(repo_builder: RepoBuilder) -> None:
    _write_components(repo_builder)
    stager = RecordingStager()
    orchestrator = Orchestrator(stager=stager)  # type: ignore[arg-type]
    root = str(repo_builder.path())

    orchestrator.run_inject(root)
    second = orchestrator.run_inject(root)

    assert second.report.changed_files == []
    assert second.report.diagnostics == []
    assert second.staged == []
    assert len(stager.calls) == 1


def test_inject_respects_stage_setting(repo_builder: RepoBuilder) -> None:
    _write_components(repo_builder)
    repo_builder.write({".uitag.yml": "stage: false\n"})
    stager = RecordingStager()

    outcome = Orchestrator(stager=stager).run_inject(str(repo_builder.path()))  # type: ignore[arg-type]

    assert outcome.report.changed_files
    assert stager.calls == []


def test_check_mode_leaves_tree_untouched(repo_builder: RepoBuilder) -> None:
    _write_components(repo_builder)
    before = repo_builder.read("components/ui/card/card.tsx")
    stager = RecordingStager()

    outcome = Orchestrator(stager=stager).run_inject(str(repo_builder.path()), check=True)  # type: ignore[arg-type]

    assert {diagnostic.code for diagnostic in outcome.report.diagnostics} == {"missing-identifier"}
    assert repo_builder.read("components/ui/card/card.tsx") == before
    assert stager.calls == []


def test_generate_uses_configured_attribute_and_outputs(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".uitag.yml": """
                attribute: data-test
                output:
                  generated: css/targets.css
                  custom: css/custom.css
            """,
            "components/ui/chip.tsx": 'export const Chip = () => <span data-test="ui-chip" />;\n',
        }
    )

    outcome = Orchestrator().run_generate(str(repo_builder.path()))

    assert outcome.result.generated_path == Path(repo_builder.path()).resolve() / "css" / "targets.css"
    assert '[data-test="ui-chip"] {}' in outcome.result.generated_path.read_text(encoding="utf-8")
    assert (repo_builder.path() / "css" / "custom.css").exists()


def test_resolve_delegates_to_naming_rules() -> None:
    assert Orchestrator().resolve("components/ui/button/button.tsx", "Button") == "ui-button"
