"""Data access repositories."""

from .base import BaseRepository
from .version_store import VersionStore
from .version_repository import VersionRepository
from .file_repository import FileRepository
from .project_repository import ProjectRepository

__all__ = [
    "BaseRepository",
    "VersionStore",
    "VersionRepository",
    "FileRepository",
    "ProjectRepository",
]
