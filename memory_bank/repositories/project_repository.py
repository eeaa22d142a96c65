"""Project repository for database operations."""

import uuid
from typing import List, Optional

from ..models import Project
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for project rows."""

    model_class = Project

    def list_all(self) -> List[Project]:
        with self._storage_errors("Failed to list projects"):
            return self._base_query().order_by(Project.updated_at.desc(), Project.name).all()

    def get_by_name(self, name: str) -> Optional[Project]:
        with self._storage_errors(f"Failed to load project {name}"):
            return self._base_query().filter(Project.name == name).first()

    def ensure(self, name: str) -> Project:
        """Return the project, creating it on first use."""
        project = self.get_by_name(name)
        if project:
            return project

        with self._storage_errors(f"Failed to create project {name}"):
            project = Project(
                id=str(uuid.uuid4()),
                name=name,
                description=f"Project {name}",
                file_count=0,
                total_size=0,
                project_metadata={"tags": [], "version": "1.0.0"},
            )
            self.db.add(project)
            self.db.flush()
            self.db.refresh(project)
        return project

    def update_stats(self, project: Project, file_count: int, total_size: int) -> None:
        with self._storage_errors(f"Failed to update stats for project {project.name}"):
            project.file_count = file_count
            project.total_size = total_size
            self.db.flush()

    def delete(self, name: str) -> bool:
        with self._storage_errors(f"Failed to delete project {name}"):
            deleted = self._base_query().filter(Project.name == name).delete(synchronize_session=False)
            self.db.flush()
        return deleted > 0
