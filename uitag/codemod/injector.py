"""Codemod that inserts identifier attributes into component sources."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..analysis.literals import Verdict
from ..locator.locator import LocateResult, TargetLocator, TargetStatus
from ..logging import get_logger
from ..models import (
    MALFORMED_IDENTIFIER,
    MISSING_IDENTIFIER,
    NO_INJECTION_TARGET,
    NON_LITERAL_ARGUMENT,
    ComponentUnit,
    Diagnostic,
)
from ..naming.resolver import NamingError, is_valid_identifier, resolve_identifier
from ..parsing.tree_sitter import SourceParseError, SourceParseFailure, SourceParser
from .edits import TextEdit, apply_edits, build_edit

INJECTED = "injected"
SATISFIED = "satisfied"
SHARED = "shared"
PENDING = "pending"
FAILED = "failed"


@dataclass(frozen=True)
class ComponentOutcome:
    """What the injector decided for one exported component."""

    unit: ComponentUnit
    status: str
    identifier: Optional[str] = None
    shape: Optional[str] = None


@dataclass
class FilePlan:
    """Edits and diagnostics computed for one file, before anything is written."""

    path: str
    source: bytes
    updated: bytes
    edits: List[TextEdit] = field(default_factory=list)
    outcomes: List[ComponentOutcome] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.updated != self.source


@dataclass
class InjectionReport:
    """Summary of an injection run."""

    plans: List[FilePlan]
    changed_files: List[str]
    diagnostics: List[Diagnostic]
    check: bool = False

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def outcomes(self) -> List[ComponentOutcome]:
        return [outcome for plan in self.plans for outcome in plan.outcomes]


class CodemodInjector:
    """Plans and applies identifier insertions across a set of files.

    Planning runs per file on a thread pool and never touches the disk beyond
    reading. Writes happen afterwards, sequentially, and only when every file
    parsed cleanly.
    """

    def __init__(
        self,
        parser: SourceParser | None = None,
        locator: TargetLocator | None = None,
        *,
        workers: int | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.parser = parser or SourceParser()
        self.locator = locator or TargetLocator()
        self.workers = workers
        self.logger = logger or get_logger("injector")

    @property
    def attribute(self) -> str:
        return self.locator.settings.attribute

    def run(self, root: Path, files: Sequence[str], *, check: bool = False) -> InjectionReport:
        """Inject identifiers into ``files`` (paths relative to ``root``)."""
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            results = list(executor.map(lambda rel_path: self._plan_file(root, rel_path, check), files))

        errors = [result for result in results if isinstance(result, SourceParseError)]
        if errors:
            raise SourceParseFailure(errors)
        plans = [result for result in results if isinstance(result, FilePlan)]

        changed_files: List[str] = []
        for plan in plans:
            if not plan.changed:
                continue
            changed_files.append(plan.path)
            if check:
                continue
            (root / plan.path).write_bytes(plan.updated)
            self.logger.info("Injected %d identifier(s) into %s", len(plan.edits), plan.path)

        diagnostics = [diagnostic for plan in plans for diagnostic in plan.diagnostics]
        for diagnostic in diagnostics:
            self.logger.warning("%s", diagnostic)
        self.logger.info(
            "Processed %d file(s); %d %s",
            len(plans),
            len(changed_files),
            "need identifiers" if check else "changed",
        )
        return InjectionReport(plans=plans, changed_files=changed_files, diagnostics=diagnostics, check=check)

    def plan_source(self, path: str, source: bytes, *, check: bool = False) -> FilePlan:
        """Compute the edits for one file's contents without writing anything."""
        parsed = self.parser.parse(path, source)
        module = self.locator.index(parsed)
        claimed: Dict[tuple, ComponentUnit] = {}
        edits: List[TextEdit] = []
        outcomes: List[ComponentOutcome] = []
        diagnostics: List[Diagnostic] = []

        for component in module.components:
            unit = component.unit(path)
            result = self.locator.locate(component, module)
            shape = result.trail[-1].value if result.trail else None

            if result.status is TargetStatus.NO_TARGET or result.handle is None:
                diagnostics.append(_diagnostic(NO_INJECTION_TARGET, unit, result.reason or "no injection target"))
                outcomes.append(ComponentOutcome(unit, FAILED, shape=shape))
                continue

            owner = claimed.get(result.handle.key)
            if owner is not None:
                self.logger.debug("%s shares its target with %s", unit, owner)
                outcomes.append(ComponentOutcome(unit, SHARED, shape=shape))
                continue
            claimed[result.handle.key] = unit

            if result.status is TargetStatus.SATISFIED:
                outcome, problem = self._check_existing(unit, result, shape)
                outcomes.append(outcome)
                if problem is not None:
                    diagnostics.append(problem)
                continue

            try:
                identifier = resolve_identifier(path, component.export_name)
            except NamingError as exc:
                diagnostics.append(_diagnostic(exc.code, unit, str(exc)))
                outcomes.append(ComponentOutcome(unit, FAILED, shape=shape))
                continue

            edits.append(build_edit(result.handle, identifier, self.attribute, source))
            if check:
                diagnostics.append(
                    _diagnostic(MISSING_IDENTIFIER, unit, f"expected {self.attribute}={identifier!r}")
                )
                outcomes.append(ComponentOutcome(unit, PENDING, identifier=identifier, shape=shape))
            else:
                self.logger.debug("%s -> %s (%s)", unit, identifier, shape)
                outcomes.append(ComponentOutcome(unit, INJECTED, identifier=identifier, shape=shape))

        updated = apply_edits(source, edits) if edits else source
        return FilePlan(
            path=path,
            source=source,
            updated=updated,
            edits=edits,
            outcomes=outcomes,
            diagnostics=diagnostics,
        )

    def _plan_file(self, root: Path, rel_path: str, check: bool) -> Union[FilePlan, SourceParseError]:
        try:
            source = (root / rel_path).read_bytes()
        except OSError as exc:
            return SourceParseError(rel_path, detail=f"cannot read file: {exc.strerror or exc}")
        try:
            return self.plan_source(rel_path, source, check=check)
        except SourceParseError as exc:
            return exc

    def _check_existing(
        self, unit: ComponentUnit, result: LocateResult, shape: Optional[str]
    ) -> tuple[ComponentOutcome, Optional[Diagnostic]]:
        site = result.site
        classification = site.classification if site is not None else None
        value = classification.value if classification is not None else None
        outcome = ComponentOutcome(unit, SATISFIED, identifier=value, shape=shape)
        if classification is None or classification.verdict is Verdict.NON_LITERAL:
            line = f" at line {site.line}" if site is not None else ""
            return outcome, _diagnostic(NON_LITERAL_ARGUMENT, unit, f"identifier is not a string literal{line}")
        if classification.verdict is Verdict.ABSENT:
            return outcome, _diagnostic(MALFORMED_IDENTIFIER, unit, f"{self.attribute} has no value")
        if value is None or not is_valid_identifier(value):
            return outcome, _diagnostic(MALFORMED_IDENTIFIER, unit, f"{value!r} is not a valid identifier")
        self.logger.debug("%s already carries %s", unit, value)
        return outcome, None


def _diagnostic(code: str, unit: ComponentUnit, message: str) -> Diagnostic:
    return Diagnostic(code=code, file=unit.file_path, export=unit.export_name, message=message)


__all__ = [
    "CodemodInjector",
    "ComponentOutcome",
    "FAILED",
    "FilePlan",
    "INJECTED",
    "InjectionReport",
    "PENDING",
    "SATISFIED",
    "SHARED",
]
