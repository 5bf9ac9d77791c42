"""Read-only scan that collects every identifier attached in a source tree."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Collection, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from tree_sitter import Node

from ..analysis.attributes import (
    ATTRIBUTE_SITE,
    HELPER_SITE,
    PROPERTY_SITE,
    attribute_name,
    is_helper_call,
    property_key,
)
from ..analysis.literals import Classification, classify_attribute, classify_call, classify_value
from ..locator.locator import DEFAULT_ATTRIBUTE, DEFAULT_HELPERS
from ..logging import get_logger
from ..models import NON_LITERAL_ARGUMENT, ComponentUnit, Diagnostic
from ..parsing.components import DEFAULT_WRAPPER_CALLEES, ModuleIndex
from ..parsing.tree_sitter import (
    ParsedSource,
    SourceParseError,
    SourceParseFailure,
    SourceParser,
    iter_nodes,
    line_of,
)
from ..validators import (
    IdentifierFormatValidator,
    NonLiteralArgumentError,
    RegistryValidationError,
    UniquenessValidator,
    ValidationContext,
    Validator,
    run_validators,
)
from .registry import Registry


@dataclass(frozen=True)
class ExtractedSite:
    """One identifier site and the component unit it belongs to."""

    unit: ComponentUnit
    kind: str
    line: int
    classification: Classification

    @property
    def identifier(self) -> Optional[str]:
        return self.classification.value

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            code=NON_LITERAL_ARGUMENT,
            file=self.unit.file_path,
            export=self.unit.export_name,
            message=f"{self.kind} at line {self.line} is not a string literal",
        )


class SelectorExtractor:
    """Builds a validated Registry from the identifiers present in source files."""

    def __init__(
        self,
        parser: SourceParser | None = None,
        *,
        attribute: str = DEFAULT_ATTRIBUTE,
        helpers: Collection[str] = DEFAULT_HELPERS,
        wrapper_callees: Iterable[str] = DEFAULT_WRAPPER_CALLEES,
        allowlist: Collection[str] = (),
        workers: int | None = None,
        validators: Sequence[Validator] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.parser = parser or SourceParser()
        self.attribute = attribute
        self.helpers = tuple(helpers)
        self.wrapper_callees = tuple(wrapper_callees)
        self.allowlist = frozenset(allowlist)
        self.workers = workers
        self.validators: List[Validator] = (
            list(validators) if validators is not None else [IdentifierFormatValidator(), UniquenessValidator()]
        )
        self.logger = logger or get_logger("extractor")

    def extract(self, root: Path, files: Sequence[str]) -> Registry:
        """Scan ``files`` (relative to ``root``) and return the validated registry."""
        ordered = sorted(files)
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            results = list(executor.map(lambda rel_path: self._scan_file(root, rel_path), ordered))

        errors = [result for result in results if isinstance(result, SourceParseError)]
        if errors:
            raise SourceParseFailure(errors)

        sites = [site for result in results if isinstance(result, list) for site in result]
        self.logger.debug("Collected %d identifier site(s) from %d file(s)", len(sites), len(ordered))

        non_literal = [site for site in sites if not site.classification.is_literal]
        if non_literal:
            raise NonLiteralArgumentError(
                f"{len(non_literal)} identifier site(s) are not string literals",
                [site.to_diagnostic() for site in non_literal],
            )

        registry = self.build_registry(sites)
        problems = run_validators(self.validators, ValidationContext(registry=registry, allowlist=self.allowlist))
        if problems:
            raise RegistryValidationError(f"{len(problems)} registry problem(s) found", problems)

        self.logger.info("Extracted %d identifier(s)", len(registry))
        return registry

    @staticmethod
    def build_registry(sites: Iterable[ExtractedSite]) -> Registry:
        registry = Registry()
        for site in sites:
            if site.identifier is not None:
                registry.add(site.identifier, site.unit)
        return registry

    def scan_source(self, path: str, source: bytes) -> List[ExtractedSite]:
        """Return the identifier sites of one file in source order."""
        parsed = self.parser.parse(path, source)
        module = ModuleIndex(parsed, wrapper_callees=self.wrapper_callees)
        helper_bodies = list(self._helper_definitions(module))
        sites: List[ExtractedSite] = []
        for kind, node, classification in self._iter_sites(parsed):
            if _within(node, helper_bodies):
                continue
            sites.append(
                ExtractedSite(
                    unit=module.unit_at(node.start_byte),
                    kind=kind,
                    line=line_of(node),
                    classification=classification,
                )
            )
        return sites

    # ------------------------------------------------------------------
    # Helpers

    def _scan_file(self, root: Path, rel_path: str) -> Union[List[ExtractedSite], SourceParseError]:
        try:
            source = (root / rel_path).read_bytes()
        except OSError as exc:
            return SourceParseError(rel_path, detail=f"cannot read file: {exc.strerror or exc}")
        try:
            return self.scan_source(rel_path, source)
        except SourceParseError as exc:
            return exc

    def _iter_sites(self, parsed: ParsedSource) -> Iterator[Tuple[str, Node, Classification]]:
        source = parsed.source
        for node in iter_nodes(parsed.root):
            if node.type == "jsx_attribute" and attribute_name(node, source) == self.attribute:
                yield ATTRIBUTE_SITE, node, classify_attribute(node, source)
            elif node.type == "pair" and property_key(node, source) == self.attribute:
                yield PROPERTY_SITE, node, classify_value(node.child_by_field_name("value"), source)
            elif is_helper_call(node, source, self.helpers):
                yield HELPER_SITE, node, classify_call(node, source)

    def _helper_definitions(self, module: ModuleIndex) -> Iterator[Node]:
        # the helper's own body forwards its argument and is not a site
        for name in self.helpers:
            statement = module.declarations.get(name.rsplit(".", 1)[-1])
            if statement is not None:
                yield statement


def _within(node: Node, containers: Sequence[Node]) -> bool:
    return any(container.start_byte <= node.start_byte < container.end_byte for container in containers)


__all__ = ["ExtractedSite", "SelectorExtractor"]
