"""Repository scanning for JSX/TSX component sources."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .config import ConfigError, load_config
from .logging import get_logger
from .models import SourceFile, SourceManifest
from .naming.resolver import is_component_path

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    ".next",
    ".turbo",
    "node_modules",
    "__pycache__",
    "__tests__",
    "__mocks__",
    "build",
    "coverage",
    "dist",
    "out",
}

_LANGUAGE_BY_SUFFIX = {
    ".tsx": "TypeScript",
    ".ts": "TypeScript",
    ".jsx": "JavaScript",
    ".js": "JavaScript",
    ".mjs": "JavaScript",
}

# test, story and declaration files never render application UI
_EXCLUDED_SUFFIXES = (
    ".test.tsx",
    ".test.ts",
    ".test.jsx",
    ".test.js",
    ".spec.tsx",
    ".spec.ts",
    ".spec.jsx",
    ".spec.js",
    ".stories.tsx",
    ".stories.ts",
    ".stories.jsx",
    ".stories.js",
    ".d.ts",
)


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .uitag.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _rules_from_patterns(patterns: Iterable[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for pattern in patterns:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _parse_config_excludes(root: Path) -> List[IgnoreRule]:
    try:
        config = load_config(root)
    except ConfigError:
        return []
    return _rules_from_patterns(config.exclude_paths)


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        filtered_dirs = []
        for name in dirnames:
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            filtered_dirs.append(name)
        dirnames[:] = filtered_dirs

        for filename in filenames:
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield rel_path


def _detect_language(rel_path: str) -> str | None:
    lowered = rel_path.lower()
    if lowered.endswith(_EXCLUDED_SUFFIXES):
        return None
    return _LANGUAGE_BY_SUFFIX.get(Path(lowered).suffix)


class RepoScanner:
    """Walks the repository to list JSX-capable sources in sorted order."""

    def __init__(self, exclude_paths: Sequence[str] | None = None) -> None:
        self._exclude_paths = list(exclude_paths or [])
        self.logger = get_logger("scanner")

    def scan(self, root: str) -> SourceManifest:
        """Return a manifest of source files, tagging those under a component layer."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        rules = _parse_gitignore(root_path / ".gitignore")
        rules.extend(_parse_config_excludes(root_path))
        rules.extend(_rules_from_patterns(self._exclude_paths))

        files: List[SourceFile] = []
        for rel_path in sorted(_iter_files(root_path, rules)):
            language = _detect_language(rel_path)
            if language is None:
                continue
            role = "component" if is_component_path(rel_path) else "source"
            files.append(SourceFile(path=rel_path, language=language, role=role))

        self.logger.debug("Scanner found %d source file(s) under %s", len(files), root_path)
        return SourceManifest(root=str(root_path), files=files)


__all__ = ["IgnoreRule", "RepoScanner"]
