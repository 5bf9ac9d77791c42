"""Pipeline orchestration for the inject/generate/resolve flows."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .codemod.injector import CodemodInjector, InjectionReport
from .config import UitagConfig, load_config
from .git.stager import GitStager
from .locator.locator import TargetLocator
from .logging import get_logger
from .naming.resolver import resolve_identifier
from .parsing.tree_sitter import SourceParser
from .registry.extractor import SelectorExtractor
from .registry.registry import Registry
from .repo_scanner import RepoScanner
from .stylesheet.generator import GenerationResult, StylesheetGenerator


@dataclass
class InjectOutcome:
    """Result of an inject run."""

    report: InjectionReport
    staged: List[str]


@dataclass
class GenerateOutcome:
    """Result of a generate run."""

    registry: Registry
    result: GenerationResult


class Orchestrator:
    """Coordinates scanning, injection, extraction and stylesheet generation."""

    def __init__(
        self,
        scanner: RepoScanner | None = None,
        parser: SourceParser | None = None,
        stager: GitStager | None = None,
    ) -> None:
        self.scanner = scanner or RepoScanner()
        self.parser = parser or SourceParser()
        self.stager = stager or GitStager()
        self.logger = get_logger("orchestrator")

    def run_inject(
        self,
        path: str,
        *,
        check: bool = False,
        stage: Optional[bool] = None,
        workers: Optional[int] = None,
    ) -> InjectOutcome:
        """Insert missing identifiers across the repository at ``path``."""
        repo_path = Path(path).expanduser().resolve()
        config = self._load_config(repo_path)
        self.logger.info("Starting inject run for %s%s", repo_path, " (check)" if check else "")

        manifest = self.scanner.scan(str(repo_path))
        files = manifest.component_paths()
        self.logger.debug("Scanner discovered %d component file(s)", len(files))

        injector = CodemodInjector(
            self.parser,
            TargetLocator(config.locator_settings()),
            workers=workers or config.workers,
        )
        report = injector.run(repo_path, files, check=check)

        staged: List[str] = []
        should_stage = config.stage if stage is None else stage
        if not check and should_stage and report.changed_files:
            staged = self.stager.stage(str(repo_path), report.changed_files)
        return InjectOutcome(report=report, staged=staged)

    def run_generate(
        self,
        path: str,
        *,
        check: bool = False,
        workers: Optional[int] = None,
    ) -> GenerateOutcome:
        """Extract the registry and bring the stylesheet artifacts up to date."""
        repo_path = Path(path).expanduser().resolve()
        config = self._load_config(repo_path)
        self.logger.info("Starting generate run for %s%s", repo_path, " (check)" if check else "")

        manifest = self.scanner.scan(str(repo_path))
        extractor = SelectorExtractor(
            self.parser,
            attribute=config.attribute,
            helpers=config.helpers,
            wrapper_callees=config.locator.wrapper_callees,
            allowlist=config.allowlist,
            workers=workers or config.workers,
        )
        registry = extractor.extract(repo_path, manifest.paths())

        generator = StylesheetGenerator(
            attribute=config.attribute,
            generated_path=config.output.generated,
            custom_path=config.output.custom,
        )
        result = generator.generate(repo_path, registry, check=check)
        return GenerateOutcome(registry=registry, result=result)

    def resolve(self, file_path: str, export_name: str) -> str:
        """Return the identifier the resolver assigns to one export."""
        return resolve_identifier(Path(file_path).as_posix(), export_name)

    def _load_config(self, repo_path: Path) -> UitagConfig:
        if not repo_path.exists():
            raise FileNotFoundError(f"Repository path not found: {repo_path}")
        config = load_config(repo_path)
        self.logger.debug(
            "Using attribute %s with helpers %s", config.attribute, ", ".join(config.helpers) or "(none)"
        )
        return config


__all__ = ["GenerateOutcome", "InjectOutcome", "Orchestrator"]
