"""Git integration."""

from .stager import GitStager, StagingError

__all__ = ["GitStager", "StagingError"]
