"""Configuration loading for uitag (.uitag.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .locator.locator import DEFAULT_ATTRIBUTE, DEFAULT_HELPERS, LocatorSettings
from .locator.shapes import (
    DEFAULT_CLONE_CALLEES,
    DEFAULT_PRIMITIVE_SOURCES,
    DEFAULT_SLOT_COMPONENTS,
    ShapeRules,
)
from .parsing.components import DEFAULT_WRAPPER_CALLEES
from .stylesheet.generator import DEFAULT_CUSTOM_PATH, DEFAULT_GENERATED_PATH

CONFIG_FILENAME = ".uitag.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LocatorConfig:
    """Names that steer injection target lookup."""

    slot_components: List[str] = field(default_factory=lambda: list(DEFAULT_SLOT_COMPONENTS))
    primitive_sources: List[str] = field(default_factory=lambda: list(DEFAULT_PRIMITIVE_SOURCES))
    wrapper_callees: List[str] = field(default_factory=lambda: list(DEFAULT_WRAPPER_CALLEES))
    clone_callees: List[str] = field(default_factory=lambda: list(DEFAULT_CLONE_CALLEES))


@dataclass
class OutputConfig:
    """Stylesheet artifact locations, relative to the repository root."""

    generated: Path = DEFAULT_GENERATED_PATH
    custom: Path = DEFAULT_CUSTOM_PATH


@dataclass
class UitagConfig:
    """Represents the settings defined in .uitag.yml."""

    root: Path
    attribute: str = DEFAULT_ATTRIBUTE
    helpers: List[str] = field(default_factory=lambda: list(DEFAULT_HELPERS))
    allowlist: List[str] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)
    workers: Optional[int] = None
    stage: bool = True
    locator: LocatorConfig = field(default_factory=LocatorConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def locator_settings(self) -> LocatorSettings:
        return LocatorSettings(
            attribute=self.attribute,
            helpers=tuple(self.helpers),
            wrapper_callees=tuple(self.locator.wrapper_callees),
            rules=ShapeRules(
                slot_components=tuple(self.locator.slot_components),
                primitive_sources=tuple(self.locator.primitive_sources),
                clone_callees=tuple(self.locator.clone_callees),
            ),
        )


def load_config(config_path: Path) -> UitagConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return UitagConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = UitagConfig(root=root)

    attribute = _as_str(data.get("attribute"))
    if attribute:
        config.attribute = attribute
    if "helpers" in data:
        config.helpers = _as_str_list(data.get("helpers"))
    config.allowlist = _as_str_list(data.get("allowlist"))
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    workers = _as_int(data.get("workers"))
    if workers is not None:
        if workers < 1:
            raise ConfigError("workers must be a positive integer")
        config.workers = workers

    stage = _as_bool(data.get("stage"))
    if stage is not None:
        config.stage = stage

    locator_data = _as_dict(data.get("locator"))
    for key in ("slot_components", "primitive_sources", "wrapper_callees", "clone_callees"):
        if key in locator_data:
            setattr(config.locator, key, _as_str_list(locator_data.get(key)))

    output_data = _as_dict(data.get("output"))
    generated = _as_str(output_data.get("generated"))
    custom = _as_str(output_data.get("custom"))
    if generated:
        config.output.generated = Path(generated)
    if custom:
        config.output.custom = Path(custom)
    if config.output.generated == config.output.custom:
        raise ConfigError("output.generated and output.custom must be different files")

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "LocatorConfig",
    "OutputConfig",
    "UitagConfig",
    "load_config",
]
