"""Writes the regenerated selector stylesheet and the write-once custom stylesheet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from ..locator.locator import DEFAULT_ATTRIBUTE
from ..logging import get_logger
from ..registry.registry import Registry, RegistryEntry, selector_for
from .reader import read_generated_stylesheet

DEFAULT_GENERATED_PATH = Path("styles") / "ui-targets.generated.css"
DEFAULT_CUSTOM_PATH = Path("styles") / "ui-overrides.css"

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass
class GenerationResult:
    """Outcome of a ``generate`` run."""

    generated_path: Path
    custom_path: Path
    content_hash: str
    selector_count: int
    stale: bool
    written: bool = False
    custom_created: bool = False


class StylesheetGenerator:
    """Renders the registry into the two stylesheet artifacts."""

    def __init__(
        self,
        *,
        attribute: str = DEFAULT_ATTRIBUTE,
        generated_path: Path = DEFAULT_GENERATED_PATH,
        custom_path: Path = DEFAULT_CUSTOM_PATH,
        templates_dir: Path | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.attribute = attribute
        self.generated_path = Path(generated_path)
        self.custom_path = Path(custom_path)
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._clock = clock or (lambda: datetime.now(UTC))
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.logger = logger or get_logger("stylesheet")

    def render(self, registry: Registry, *, timestamp: str) -> str:
        template = self._env.get_template("generated.css.j2")
        groups = [
            (group, [self._entry_context(entry) for entry in entries]) for group, entries in registry.grouped()
        ]
        return template.render(
            custom_name=self.custom_path.name,
            timestamp=timestamp,
            content_hash=registry.content_hash(self.attribute),
            count=len(registry),
            groups=groups,
        )

    def render_custom(self) -> str:
        template = self._env.get_template("custom.css.j2")
        return template.render(attribute=self.attribute, generated_name=self.generated_path.name)

    def generate(self, root: Path, registry: Registry, *, check: bool = False) -> GenerationResult:
        """Bring both artifacts under ``root`` up to date (or only report, in check mode)."""
        generated = root / self.generated_path
        custom = root / self.custom_path
        content_hash = registry.content_hash(self.attribute)
        existing = self._read_existing(generated)

        result = GenerationResult(
            generated_path=generated,
            custom_path=custom,
            content_hash=content_hash,
            selector_count=len(registry),
            stale=self._is_stale(existing, content_hash),
        )
        if check:
            if result.stale:
                self.logger.warning("%s is stale", self.generated_path.as_posix())
            return result

        rendered = self._render_reusing_stamp(registry, existing)
        if rendered != existing:
            generated.parent.mkdir(parents=True, exist_ok=True)
            generated.write_text(rendered, encoding="utf-8")
            result.written = True
            self.logger.info(
                "Wrote %d selector(s) to %s", len(registry), self.generated_path.as_posix()
            )
        else:
            self.logger.info("%s is up to date", self.generated_path.as_posix())

        result.custom_created = self.ensure_custom(custom)
        return result

    def ensure_custom(self, path: Path) -> bool:
        """Create the custom stylesheet if it does not exist; never touch it otherwise."""
        if path.exists():
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with path.open("x", encoding="utf-8") as handle:
                handle.write(self.render_custom())
        except FileExistsError:
            return False
        self.logger.info("Created %s", self.custom_path.as_posix())
        return True

    # ------------------------------------------------------------------
    # Helpers

    def _entry_context(self, entry: RegistryEntry) -> Dict[str, object]:
        sources: List[str] = [str(unit) for unit in entry.sources]
        return {
            "identifier": entry.identifier,
            "selector": selector_for(self.attribute, entry.identifier),
            "sources": sources,
        }

    def _render_reusing_stamp(self, registry: Registry, existing: Optional[str]) -> str:
        if existing is not None:
            previous = read_generated_stylesheet(existing)
            if previous.timestamp is not None:
                candidate = self.render(registry, timestamp=previous.timestamp)
                if candidate == existing:
                    return candidate
        return self.render(registry, timestamp=self._clock().strftime(_TIMESTAMP_FORMAT))

    @staticmethod
    def _is_stale(existing: Optional[str], content_hash: str) -> bool:
        if existing is None:
            return True
        return read_generated_stylesheet(existing).content_hash != content_hash

    @staticmethod
    def _read_existing(path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None


__all__ = [
    "DEFAULT_CUSTOM_PATH",
    "DEFAULT_GENERATED_PATH",
    "GenerationResult",
    "StylesheetGenerator",
]
