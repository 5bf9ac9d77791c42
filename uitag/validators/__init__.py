"""Validation package for extracted identifier registries."""

from .base import (
    NonLiteralArgumentError,
    RegistryValidationError,
    ValidationContext,
    ValidationError,
    Validator,
    run_validators,
)
from .uniqueness import IdentifierFormatValidator, UniquenessValidator

__all__ = [
    "IdentifierFormatValidator",
    "NonLiteralArgumentError",
    "RegistryValidationError",
    "UniquenessValidator",
    "ValidationContext",
    "ValidationError",
    "Validator",
    "run_validators",
]
