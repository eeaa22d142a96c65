"""SQLAlchemy implementation of the version store."""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func

from ..core.timeutils import utcnow
from ..exceptions import StorageError
from ..models import FileVersion
from ..schemas.version import VersionCreate
from ..services.retention import RetentionConfig, select_versions_to_delete
from .base import BaseRepository
from .version_store import VersionStore

logger = logging.getLogger(__name__)


class VersionRepository(BaseRepository[FileVersion], VersionStore):
    """Version records in the ``file_versions`` table.

    Writes are flushed, not committed: the file-update path commits the file
    row and its new version together. ``cleanup_old_versions`` is the
    exception and is its own unit of work (commit on success, rollback on
    failure) so a project-wide cleanup can survive a failing file.
    """

    model_class = FileVersion

    def _file_query(self, project_name: str, file_name: str):
        return self._base_query().filter(
            FileVersion.project_name == project_name,
            FileVersion.file_name == file_name,
        )

    def create_version(self, data: VersionCreate) -> FileVersion:
        with self._storage_errors(
            f"Failed to create version {data.version} for file {data.file_name}"
        ):
            db_version = FileVersion(
                id=str(uuid.uuid4()),
                file_id=data.file_id,
                project_name=data.project_name,
                file_name=data.file_name,
                version=data.version,
                content=data.content,
                size=data.size,
                checksum=data.checksum,
                created_at=data.created_at or utcnow(),
                version_metadata=data.metadata.model_dump() if data.metadata else None,
            )
            self.db.add(db_version)
            self.db.flush()
            self.db.refresh(db_version)
        return db_version

    def get_versions(self, project_name: str, file_name: str) -> List[FileVersion]:
        with self._storage_errors(
            f"Failed to get versions for file {file_name} in project {project_name}"
        ):
            return self._file_query(project_name, file_name).order_by(
                FileVersion.version.desc()
            ).all()

    def get_version(self, project_name: str, file_name: str, version: int) -> Optional[FileVersion]:
        with self._storage_errors(
            f"Failed to get version {version} for file {file_name} in project {project_name}"
        ):
            return self._file_query(project_name, file_name).filter(
                FileVersion.version == version
            ).first()

    def get_latest_version_number(self, project_name: str, file_name: str) -> int:
        with self._storage_errors(
            f"Failed to get latest version number for file {file_name} in project {project_name}"
        ):
            latest = self.db.query(func.max(FileVersion.version)).filter(
                FileVersion.project_name == project_name,
                FileVersion.file_name == file_name,
            ).scalar()
        return latest or 0

    def cleanup_old_versions(
        self,
        project_name: str,
        file_name: str,
        config: RetentionConfig,
        now: Optional[datetime] = None,
    ) -> int:
        try:
            versions = self.get_versions(project_name, file_name)
            doomed = select_versions_to_delete(versions, config, now=now)
            if not doomed:
                return 0

            with self._storage_errors(
                f"Failed to cleanup old versions for file {file_name} in project {project_name}"
            ):
                deleted = self._base_query().filter(
                    FileVersion.id.in_([v.id for v in doomed])
                ).delete(synchronize_session=False)
                self.db.commit()
        except StorageError:
            self.db.rollback()
            raise

        logger.debug(
            "Deleted %d old version(s) of %s/%s", deleted, project_name, file_name,
            extra={"project_name": project_name, "file_name": file_name, "deleted": deleted},
        )
        return deleted

    def delete_all_versions(self, project_name: str, file_name: str) -> bool:
        with self._storage_errors(
            f"Failed to delete all versions for file {file_name} in project {project_name}"
        ):
            deleted = self._file_query(project_name, file_name).delete(synchronize_session=False)
            self.db.flush()
        return deleted > 0

    def delete_project_versions(self, project_name: str) -> bool:
        with self._storage_errors(f"Failed to delete all versions for project {project_name}"):
            deleted = self._base_query().filter(
                FileVersion.project_name == project_name
            ).delete(synchronize_session=False)
            self.db.flush()
        return deleted > 0
