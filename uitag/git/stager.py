"""Stages files the injector rewrote so a pre-commit hook can include them."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..logging import get_logger


class StagingError(RuntimeError):
    """Raised when ``git add`` fails for the rewritten files."""


class GitStager:
    """Runs ``git add`` for changed files inside a git work tree."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git")

    def stage(self, repo_path: str, files: Sequence[Path | str]) -> List[str]:
        """Stage ``files`` and return the repository-relative paths that were added."""
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            self.logger.debug("%s is not a git work tree; skipping staging", repo)
            return []
        if not files:
            return []

        relative_files = [self._to_relative(repo, Path(file)) for file in files]
        try:
            self._run(["git", "add", "--", *relative_files], cwd=repo)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise StagingError(f"git add failed in {repo}: {exc}") from exc
        self.logger.info("Staged %d file(s)", len(relative_files))
        return relative_files

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _to_relative(repo: Path, file_path: Path) -> str:
        if not file_path.is_absolute():
            return file_path.as_posix()
        try:
            return file_path.relative_to(repo).as_posix()
        except ValueError:
            return file_path.as_posix()

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        if capture_output:
            return completed.stdout
        return ""


__all__ = ["GitStager", "StagingError"]
