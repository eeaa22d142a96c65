"""File repository for database operations."""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func

from ..core.timeutils import utcnow
from ..models import ProjectFile
from .base import BaseRepository


class FileRepository(BaseRepository[ProjectFile]):
    """Current-content rows of project files. Flushes; the service commits."""

    model_class = ProjectFile

    def list_files(self, project_name: str) -> List[ProjectFile]:
        """Files of a project, most recently updated first."""
        with self._storage_errors(f"Failed to list files for project {project_name}"):
            return self._base_query().filter(
                ProjectFile.project_name == project_name
            ).order_by(ProjectFile.updated_at.desc(), ProjectFile.name).all()

    def get(self, project_name: str, name: str) -> Optional[ProjectFile]:
        with self._storage_errors(f"Failed to load file {name} from project {project_name}"):
            return self._base_query().filter(
                ProjectFile.project_name == project_name,
                ProjectFile.name == name,
            ).first()

    def create(self, project_name: str, name: str, content: str, size: int, checksum: str, metadata: dict) -> ProjectFile:
        now = utcnow()
        with self._storage_errors(f"Failed to write file {name} to project {project_name}"):
            db_file = ProjectFile(
                id=str(uuid.uuid4()),
                project_name=project_name,
                name=name,
                content=content,
                size=size,
                checksum=checksum,
                created_at=now,
                updated_at=now,
                file_metadata=metadata,
            )
            self.db.add(db_file)
            self.db.flush()
            self.db.refresh(db_file)
        return db_file

    def update(self, db_file: ProjectFile, content: str, size: int, checksum: str, metadata: dict) -> ProjectFile:
        with self._storage_errors(
            f"Failed to update file {db_file.name} in project {db_file.project_name}"
        ):
            db_file.content = content
            db_file.size = size
            db_file.checksum = checksum
            db_file.file_metadata = metadata
            db_file.updated_at = utcnow()
            self.db.flush()
            self.db.refresh(db_file)
        return db_file

    def delete(self, project_name: str, name: str) -> bool:
        with self._storage_errors(f"Failed to delete file {name} from project {project_name}"):
            deleted = self._base_query().filter(
                ProjectFile.project_name == project_name,
                ProjectFile.name == name,
            ).delete(synchronize_session=False)
            self.db.flush()
        return deleted > 0

    def delete_project_files(self, project_name: str) -> int:
        with self._storage_errors(f"Failed to delete files of project {project_name}"):
            deleted = self._base_query().filter(
                ProjectFile.project_name == project_name
            ).delete(synchronize_session=False)
            self.db.flush()
        return deleted

    def get_stats(self, project_name: str) -> Tuple[int, int]:
        """(file_count, total_size) for a project."""
        with self._storage_errors(f"Failed to get project stats for {project_name}"):
            count, total = self.db.query(
                func.count(ProjectFile.id), func.coalesce(func.sum(ProjectFile.size), 0)
            ).filter(ProjectFile.project_name == project_name).one()
        return count, total
