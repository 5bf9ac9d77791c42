"""Parses a generated stylesheet back into its stamp and registry."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..models import ComponentUnit, DEFAULT_EXPORT
from ..registry.registry import Registry

_TIMESTAMP_PATTERN = re.compile(r"^\s*\*\s*generated-at:\s*(?P<value>\S+)\s*$", re.MULTILINE)
_HASH_PATTERN = re.compile(r"^\s*\*\s*content-hash:\s*sha256:(?P<value>[0-9a-f]{64})\s*$", re.MULTILINE)
_ENTRY_PATTERN = re.compile(r"^/\* (?P<identifier>\S+) <- (?P<sources>.+) \*/$", re.MULTILINE)


@dataclass
class GeneratedStylesheet:
    timestamp: Optional[str]
    content_hash: Optional[str]
    registry: Registry


def read_generated_stylesheet(text: str) -> GeneratedStylesheet:
    """Return the timestamp, content hash and registry recorded in ``text``."""
    timestamp = _TIMESTAMP_PATTERN.search(text)
    content_hash = _HASH_PATTERN.search(text)
    registry = Registry()
    for match in _ENTRY_PATTERN.finditer(text):
        identifier = match.group("identifier")
        for source in match.group("sources").split(", "):
            registry.add(identifier, _parse_unit(source))
    return GeneratedStylesheet(
        timestamp=timestamp.group("value") if timestamp else None,
        content_hash=content_hash.group("value") if content_hash else None,
        registry=registry,
    )


def _parse_unit(text: str) -> ComponentUnit:
    file_path, _, export_name = text.strip().rpartition("#")
    return ComponentUnit(
        file_path=file_path,
        export_name=export_name,
        is_default=export_name == DEFAULT_EXPORT,
    )


__all__ = ["GeneratedStylesheet", "read_generated_stylesheet"]
