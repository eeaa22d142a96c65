"""Version lifecycle: the use-case layer over the version store.

Versions are append-only. Reading, comparing and cleaning up go straight to
the store; reverting goes through the file store so the restored content is
recorded as a brand-new version and history is never rewritten.
"""

import logging
from typing import Callable, List, Optional, Protocol

from ..models import FileVersion
from ..repositories import VersionStore
from ..schemas.version import DiffEntry, VersionComparison
from .retention import RetentionConfig
from .version_diff import diff_lines

logger = logging.getLogger(__name__)


class FileStore(Protocol):
    """The file operations the version lifecycle depends on."""

    def list_files(self, project_name: str) -> list: ...

    def update_file(
        self,
        project_name: str,
        file_name: str,
        content: str,
        change_description: Optional[str] = None,
    ): ...


class VersionService:
    """Get, compare, revert and clean up file versions.

    Args:
        version_store: Version persistence.
        file_store: Lists a project's files and writes reverted content back.
        default_retention: Settings used by ``cleanup_old_versions``; its
            ``max_versions_per_file`` can be overridden per call.
        differ: Line diff used by ``compare_file_versions``.
    """

    def __init__(
        self,
        version_store: VersionStore,
        file_store: FileStore,
        default_retention: Optional[RetentionConfig] = None,
        differ: Callable[[str, str], List[DiffEntry]] = diff_lines,
    ):
        self.version_store = version_store
        self.file_store = file_store
        self.default_retention = default_retention or RetentionConfig()
        self.differ = differ

    def get_file_versions(self, project_name: str, file_name: str) -> List[FileVersion]:
        """All versions of a file, newest first."""
        return self.version_store.get_versions(project_name, file_name)

    def get_file_version(self, project_name: str, file_name: str, version: int) -> Optional[FileVersion]:
        """One version, or None. *version* is trusted to be a positive integer."""
        return self.version_store.get_version(project_name, file_name, version)

    def get_latest_version_number(self, project_name: str, file_name: str) -> int:
        return self.version_store.get_latest_version_number(project_name, file_name)

    def compare_file_versions(
        self,
        project_name: str,
        file_name: str,
        version1: int,
        version2: int,
    ) -> Optional[VersionComparison]:
        """Diff *version1* (old side) against *version2* (new side).

        Returns None when either version is missing; that is a normal
        negative result, not an error.
        """
        # Independent reads. They share one session, so they run back to back.
        ver1 = self.version_store.get_version(project_name, file_name, version1)
        ver2 = self.version_store.get_version(project_name, file_name, version2)

        if ver1 is None or ver2 is None:
            return None

        return VersionComparison(
            version1_content=ver1.content,
            version2_content=ver2.content,
            differences=self.differ(ver1.content, ver2.content),
        )

    def revert_file_to_version(self, project_name: str, file_name: str, version: int) -> bool:
        """Write an old version's content back as the file's current content.

        The write appends a new version (reverting a file at version 7 to
        version 3 creates version 8). Returns False when the version does not
        exist or the file itself is gone.
        """
        target = self.version_store.get_version(project_name, file_name, version)
        if target is None:
            return False

        updated = self.file_store.update_file(
            project_name,
            file_name,
            target.content,
            change_description=f"Reverted to version {version}",
        )
        if updated is None:
            logger.info(
                "Revert of %s/%s to version %d skipped: file no longer exists",
                project_name, file_name, version,
                extra={"project_name": project_name, "file_name": file_name, "version": version},
            )
            return False
        return True

    def cleanup_old_versions(self, project_name: str, max_versions_per_file: Optional[int] = None) -> int:
        """Apply retention to every file of a project. Returns the total deleted.

        Each file is cleaned independently. A failure on one file is
        logged and that file is skipped; the total only counts files that
        succeeded.
        """
        config = self.default_retention
        if max_versions_per_file is not None:
            config = RetentionConfig(
                max_versions_per_file=max_versions_per_file,
                auto_cleanup_old_versions=config.auto_cleanup_old_versions,
                preserve_versions_for_days=config.preserve_versions_for_days,
            )

        # Plain names: each per-file cleanup commits, which expires loaded rows.
        file_names = [f.name for f in self.file_store.list_files(project_name)]
        total_deleted = 0
        failed = 0

        for file_name in file_names:
            try:
                total_deleted += self.version_store.cleanup_old_versions(project_name, file_name, config)
            except Exception as e:
                failed += 1
                logger.warning(
                    "Failed to cleanup versions for %s/%s: %s", project_name, file_name, e,
                    exc_info=True,
                    extra={"project_name": project_name, "file_name": file_name},
                )

        logger.info(
            "Cleaned up %d version(s) in project %s", total_deleted, project_name,
            extra={
                "project_name": project_name,
                "files": len(file_names),
                "failed_files": failed,
                "max_versions_per_file": config.max_versions_per_file,
            },
        )
        return total_deleted
