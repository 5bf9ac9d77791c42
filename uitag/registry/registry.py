"""In-memory registry of every identifier found in a source tree."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from ..models import ComponentUnit
from ..naming.resolver import UnresolvedLayer, detect_layer, layer_of_identifier

LAYER_ORDER: tuple[str, ...] = ("page", "layout", "ui")


@dataclass
class RegistryEntry:
    """An identifier together with the component units that attach it."""

    identifier: str
    layer: str
    domain: Optional[str]
    sources: List[ComponentUnit] = field(default_factory=list)

    @property
    def group(self) -> str:
        return self.domain or self.layer

    def add_source(self, unit: ComponentUnit) -> None:
        if unit not in self.sources:
            self.sources.append(unit)

    @property
    def distinct_units(self) -> int:
        return len(self.sources)


class Registry:
    """Identifier -> entry mapping with a stable, layer-first iteration order."""

    def __init__(self) -> None:
        self._entries: Dict[str, RegistryEntry] = {}
        self._first_seen: Dict[str, int] = {}

    def add(self, identifier: str, unit: ComponentUnit) -> RegistryEntry:
        entry = self._entries.get(identifier)
        if entry is None:
            layer, domain = _layer_and_domain(identifier, unit)
            entry = RegistryEntry(identifier=identifier, layer=layer, domain=domain)
            self._entries[identifier] = entry
            self._first_seen[identifier] = len(self._first_seen)
        entry.add_source(unit)
        return entry

    def get(self, identifier: str) -> Optional[RegistryEntry]:
        return self._entries.get(identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self.entries())

    def entries(self) -> List[RegistryEntry]:
        """Return entries ordered by layer, then domain, then first-seen order."""
        return sorted(self._entries.values(), key=self._sort_key)

    def identifiers(self) -> List[str]:
        return [entry.identifier for entry in self.entries()]

    def grouped(self) -> List[Tuple[str, List[RegistryEntry]]]:
        """Return ``(group, entries)`` pairs where a group is a layer or a domain."""
        groups: List[Tuple[str, List[RegistryEntry]]] = []
        for entry in self.entries():
            if groups and groups[-1][0] == entry.group:
                groups[-1][1].append(entry)
            else:
                groups.append((entry.group, [entry]))
        return groups

    def selectors(self, attribute: str) -> List[str]:
        return [selector_for(attribute, identifier) for identifier in self.identifiers()]

    def content_hash(self, attribute: str) -> str:
        """SHA-256 over the sorted selector set."""
        digest = hashlib.sha256()
        for selector in sorted(self.selectors(attribute)):
            digest.update(selector.encode("utf-8"))
            digest.update(b"\n")
        return digest.hexdigest()

    def _sort_key(self, entry: RegistryEntry) -> tuple[int, str, int]:
        if entry.domain is None:
            rank = LAYER_ORDER.index(entry.layer)
        else:
            rank = len(LAYER_ORDER)
        return (rank, entry.domain or "", self._first_seen[entry.identifier])


def selector_for(attribute: str, identifier: str) -> str:
    return f'[{attribute}="{identifier}"]'


def _layer_and_domain(identifier: str, unit: ComponentUnit) -> Tuple[str, Optional[str]]:
    # a hyphenated domain folder (components/user-profile) owns the whole prefix
    try:
        layer = detect_layer(unit.file_path)
    except UnresolvedLayer:
        return layer_of_identifier(identifier)
    if layer.kind == "domain" and identifier.startswith(f"{layer.name}-"):
        return "domain", layer.name
    return layer_of_identifier(identifier)


__all__ = ["LAYER_ORDER", "Registry", "RegistryEntry", "selector_for"]
