"""File service: the file content store and the version-creation hook.

Every successful content write (create, update, revert) appends exactly one
version with number ``latest + 1``. The file row and its version are flushed
in the same session and committed together.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..exceptions import FileAlreadyExistsError, ValidationError
from ..models import ProjectFile
from ..repositories import FileRepository, ProjectRepository, VersionStore
from ..schemas.version import VersionCreate, VersionMetadata
from .content_utils import build_content_metadata, compute_checksum, content_size
from .retention import RetentionConfig

logger = logging.getLogger(__name__)

INITIAL_CHANGE_DESCRIPTION = "Initial version"


class FileService:
    """Create, read, update and delete project files.

    Args:
        db: Session shared with *version_store*.
        version_store: Where new versions are appended.
        allowed_extensions: Accepted file extensions, e.g. ``[".md", ".txt"]``.
            ``None`` accepts any name.
        max_file_size: Content limit in bytes. ``None`` disables the check.
        write_cleanup: When set, retention runs for a file after each write.
    """

    def __init__(
        self,
        db: Session,
        version_store: VersionStore,
        allowed_extensions: Optional[List[str]] = None,
        max_file_size: Optional[int] = None,
        write_cleanup: Optional[RetentionConfig] = None,
    ):
        self.db = db
        self.file_repo = FileRepository(db)
        self.project_repo = ProjectRepository(db)
        self.version_store = version_store
        self.allowed_extensions = allowed_extensions
        self.max_file_size = max_file_size
        self.write_cleanup = write_cleanup

    def _validate(self, file_name: str, content: str) -> None:
        if self.allowed_extensions is not None:
            lowered = file_name.lower()
            if not any(lowered.endswith(ext) for ext in self.allowed_extensions):
                raise ValidationError(
                    f"File extension not allowed for '{file_name}'. "
                    f"Allowed: {', '.join(self.allowed_extensions)}",
                    field="name",
                )
        if self.max_file_size is not None and content_size(content) > self.max_file_size:
            raise ValidationError(
                f"Content exceeds maximum file size of {self.max_file_size} bytes",
                field="content",
            )

    def _append_version(
        self,
        db_file: ProjectFile,
        change_description: Optional[str],
        is_auto_save: bool = False,
    ) -> int:
        """Record the file's current content as a new version. Returns its number."""
        next_version = self.version_store.get_latest_version_number(
            db_file.project_name, db_file.name
        ) + 1

        meta = dict(db_file.file_metadata or {})
        meta.pop("version", None)
        self.version_store.create_version(
            VersionCreate(
                file_id=db_file.id,
                project_name=db_file.project_name,
                file_name=db_file.name,
                version=next_version,
                content=db_file.content,
                size=db_file.size,
                checksum=db_file.checksum,
                metadata=VersionMetadata(
                    **meta,
                    change_description=change_description,
                    is_auto_save=is_auto_save,
                ),
            )
        )
        db_file.file_metadata = {**(db_file.file_metadata or {}), "version": next_version}
        return next_version

    def _refresh_project_stats(self, project_name: str) -> None:
        project = self.project_repo.get_by_name(project_name)
        if project is None:
            return
        file_count, total_size = self.file_repo.get_stats(project_name)
        self.project_repo.update_stats(project, file_count, total_size)

    def _cleanup_after_write(self, project_name: str, file_name: str) -> None:
        if self.write_cleanup is None:
            return
        deleted = self.version_store.cleanup_old_versions(project_name, file_name, self.write_cleanup)
        if deleted:
            logger.info(
                "Auto-cleanup removed %d version(s) of %s/%s",
                deleted, project_name, file_name,
                extra={"project_name": project_name, "file_name": file_name},
            )

    def write_file(self, project_name: str, file_name: str, content: str) -> ProjectFile:
        """Create a new file (and its project if needed).

        Raises:
            FileAlreadyExistsError: The name is taken; use update_file.
            ValidationError: Extension or size limits violated.
        """
        self._validate(file_name, content)
        if self.file_repo.get(project_name, file_name) is not None:
            raise FileAlreadyExistsError(project_name, file_name)

        self.project_repo.ensure(project_name)
        db_file = self.file_repo.create(
            project_name,
            file_name,
            content,
            size=content_size(content),
            checksum=compute_checksum(content),
            metadata=build_content_metadata(content, file_name),
        )
        version = self._append_version(db_file, INITIAL_CHANGE_DESCRIPTION)
        self._refresh_project_stats(project_name)
        self.db.commit()
        self.db.refresh(db_file)

        logger.info(
            "Wrote %s/%s (version %d)", project_name, file_name, version,
            extra={"project_name": project_name, "file_name": file_name, "version": version},
        )
        self._cleanup_after_write(project_name, file_name)
        return db_file

    def read_file(self, project_name: str, file_name: str) -> Optional[ProjectFile]:
        """Get a file. Returns None if not found (caller decides on 404)."""
        return self.file_repo.get(project_name, file_name)

    def list_files(self, project_name: str) -> List[ProjectFile]:
        return self.file_repo.list_files(project_name)

    def update_file(
        self,
        project_name: str,
        file_name: str,
        content: str,
        change_description: Optional[str] = None,
    ) -> Optional[ProjectFile]:
        """Replace a file's content and append a version.

        Returns None when the file does not exist.
        """
        self._validate(file_name, content)
        db_file = self.file_repo.get(project_name, file_name)
        if db_file is None:
            return None

        self.file_repo.update(
            db_file,
            content,
            size=content_size(content),
            checksum=compute_checksum(content),
            metadata=build_content_metadata(content, file_name),
        )
        version = self._append_version(db_file, change_description)
        self._refresh_project_stats(project_name)
        self.db.commit()
        self.db.refresh(db_file)

        logger.info(
            "Updated %s/%s (version %d)", project_name, file_name, version,
            extra={"project_name": project_name, "file_name": file_name, "version": version},
        )
        self._cleanup_after_write(project_name, file_name)
        return db_file

    def delete_file(self, project_name: str, file_name: str) -> bool:
        """Delete a file together with its whole version history."""
        deleted = self.file_repo.delete(project_name, file_name)
        if not deleted:
            return False
        self.version_store.delete_all_versions(project_name, file_name)
        self._refresh_project_stats(project_name)
        self.db.commit()
        logger.info(
            "Deleted %s/%s", project_name, file_name,
            extra={"project_name": project_name, "file_name": file_name},
        )
        return True
