"""Core validation data structures for extracted identifier registries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, AbstractSet, List, Protocol, Sequence

from ..models import Diagnostic

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from uitag.registry.registry import Registry


class ValidationError(RuntimeError):
    """Raised when a registry fails one or more checks."""

    def __init__(self, message: str, diagnostics: Sequence[Diagnostic]) -> None:
        super().__init__(message)
        self.diagnostics = list(diagnostics)


class RegistryValidationError(ValidationError):
    """Duplicate or malformed identifiers were found."""


class NonLiteralArgumentError(ValidationError):
    """One or more identifier sites are not string literals."""


class Validator(Protocol):
    """Protocol implemented by registry validators."""

    name: str

    def validate(self, context: "ValidationContext") -> List[Diagnostic]:
        """Run validation and return any problems found."""


@dataclass
class ValidationContext:
    """Context shared with validators when checking a registry."""

    registry: "Registry"
    allowlist: AbstractSet[str] = field(default_factory=frozenset)


def run_validators(validators: Sequence[Validator], context: ValidationContext) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for validator in validators:
        diagnostics.extend(validator.validate(context))
    return diagnostics


__all__ = [
    "NonLiteralArgumentError",
    "RegistryValidationError",
    "ValidationContext",
    "ValidationError",
    "Validator",
    "run_validators",
]
