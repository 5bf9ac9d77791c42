"""Injection target lookup for component bodies."""

from .locator import (
    HandleKind,
    InjectionHandle,
    LocateResult,
    LocatorSettings,
    TargetLocator,
    TargetStatus,
)
from .shapes import Shape, ShapeRules

__all__ = [
    "HandleKind",
    "InjectionHandle",
    "LocateResult",
    "LocatorSettings",
    "Shape",
    "ShapeRules",
    "TargetLocator",
    "TargetStatus",
]
