"""Identifier injection codemod."""

from .edits import EditConflict, TextEdit, apply_edits, build_edit
from .injector import CodemodInjector, ComponentOutcome, FilePlan, InjectionReport

__all__ = [
    "CodemodInjector",
    "ComponentOutcome",
    "EditConflict",
    "FilePlan",
    "InjectionReport",
    "TextEdit",
    "apply_edits",
    "build_edit",
]
