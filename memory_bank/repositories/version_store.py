"""Storage contract for file versions.

Defines the interface every version backend must implement. The store owns
no policy: it does not compute version numbers and it does not decide what
to keep, apart from applying a retention decision in
``cleanup_old_versions``.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import FileVersion
from ..schemas.version import VersionCreate
from ..services.retention import RetentionConfig


class VersionStore(ABC):
    """Durable record of versions keyed by (project, file, version)."""

    @abstractmethod
    def create_version(self, data: VersionCreate) -> FileVersion:
        """Assign an id and persist.

        Raises:
            StorageError: On any persistence failure, including a duplicate
                (project, file, version).
        """

    @abstractmethod
    def get_versions(self, project_name: str, file_name: str) -> List[FileVersion]:
        """All versions of a file, newest first. Empty list if none."""

    @abstractmethod
    def get_version(self, project_name: str, file_name: str, version: int) -> Optional[FileVersion]:
        """Exact match, or None."""

    @abstractmethod
    def get_latest_version_number(self, project_name: str, file_name: str) -> int:
        """Highest version number, or 0 when the file has no versions."""

    @abstractmethod
    def cleanup_old_versions(self, project_name: str, file_name: str, config: RetentionConfig) -> int:
        """Apply the retention policy to one file. Returns the number deleted."""

    @abstractmethod
    def delete_all_versions(self, project_name: str, file_name: str) -> bool:
        """Delete every version of a file. True iff at least one was deleted."""

    @abstractmethod
    def delete_project_versions(self, project_name: str) -> bool:
        """Delete every version in a project. True iff at least one was deleted."""
