"""Validators enforcing identifier uniqueness and format across the registry."""

from __future__ import annotations

from typing import List

from ..logging import get_logger
from ..models import DUPLICATE_IDENTIFIER, MALFORMED_IDENTIFIER, Diagnostic
from ..naming.resolver import is_valid_identifier
from .base import ValidationContext


class UniquenessValidator:
    """Rejects identifiers attached by more than one component unit.

    Identifiers on the allowlist (list rows, repeated cards) may be shared.
    """

    name = "uniqueness"

    def __init__(self) -> None:
        self.logger = get_logger("validators.uniqueness")

    def validate(self, context: ValidationContext) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for entry in context.registry.entries():
            if entry.distinct_units < 2:
                continue
            if entry.identifier in context.allowlist:
                self.logger.debug(
                    "%s is allowlisted; shared by %d units", entry.identifier, entry.distinct_units
                )
                continue
            first, *others = entry.sources
            also = ", ".join(str(unit) for unit in others)
            diagnostics.append(
                Diagnostic(
                    code=DUPLICATE_IDENTIFIER,
                    file=first.file_path,
                    export=first.export_name,
                    message=f"{entry.identifier!r} is also attached by {also}",
                )
            )
        return diagnostics


class IdentifierFormatValidator:
    """Rejects literal identifiers that are not 2-4 segment lower-case kebab-case."""

    name = "format"

    def validate(self, context: ValidationContext) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for entry in context.registry.entries():
            if is_valid_identifier(entry.identifier):
                continue
            for unit in entry.sources:
                diagnostics.append(
                    Diagnostic(
                        code=MALFORMED_IDENTIFIER,
                        file=unit.file_path,
                        export=unit.export_name,
                        message=f"{entry.identifier!r} is not a valid identifier",
                    )
                )
        return diagnostics


__all__ = ["IdentifierFormatValidator", "UniquenessValidator"]
