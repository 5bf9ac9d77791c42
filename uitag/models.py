"""Core data models shared across uitag components."""

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_EXPORT = "default"
MODULE_SCOPE = "<module>"

# Diagnostic codes
UNRESOLVED_LAYER = "unresolved-layer"
IDENTIFIER_TOO_LONG = "identifier-too-long"
MALFORMED_IDENTIFIER = "malformed-identifier"
NO_INJECTION_TARGET = "no-injection-target"
MISSING_IDENTIFIER = "missing-identifier"
NON_LITERAL_ARGUMENT = "non-literal-argument"
DUPLICATE_IDENTIFIER = "duplicate-identifier"
PARSE_ERROR = "parse-error"


@dataclass(frozen=True)
class ComponentUnit:
    """An exported component, identified by its file and export name."""

    file_path: str
    export_name: str
    is_default: bool = False

    def __str__(self) -> str:
        return f"{self.file_path}#{self.export_name}"


@dataclass(frozen=True)
class Diagnostic:
    """A named, file-and-export-qualified problem reported by a run."""

    code: str
    file: str
    export: Optional[str]
    message: str

    def __str__(self) -> str:
        location = f"{self.file}#{self.export}" if self.export else self.file
        return f"{location}: [{self.code}] {self.message}"


@dataclass
class SourceFile:
    """A JSX-capable source file discovered by the scanner."""

    path: str
    language: str
    role: str


@dataclass
class SourceManifest:
    """Sorted list of source files under a repository root."""

    root: str
    files: List[SourceFile] = field(default_factory=list)

    def paths(self) -> List[str]:
        return [file.path for file in self.files]

    def component_paths(self) -> List[str]:
        return [file.path for file in self.files if file.role == "component"]
