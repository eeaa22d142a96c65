"""Database models."""

from .project import Project
from .file import ProjectFile
from .version import FileVersion

__all__ = ["Project", "ProjectFile", "FileVersion"]
