"""Project service: listing and deletion of projects."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Project
from ..repositories import FileRepository, ProjectRepository, VersionStore

logger = logging.getLogger(__name__)


class ProjectService:
    """Projects are created implicitly by the first file write."""

    def __init__(self, db: Session, version_store: VersionStore):
        self.db = db
        self.project_repo = ProjectRepository(db)
        self.file_repo = FileRepository(db)
        self.version_store = version_store

    def list_projects(self) -> List[Project]:
        return self.project_repo.list_all()

    def get_project(self, name: str) -> Optional[Project]:
        """Get project by name. Returns None if not found."""
        return self.project_repo.get_by_name(name)

    def delete_project(self, name: str) -> bool:
        """Delete a project, its files and every version in it.

        Returns False when the project does not exist.
        """
        if self.project_repo.get_by_name(name) is None:
            return False

        files_deleted = self.file_repo.delete_project_files(name)
        self.version_store.delete_project_versions(name)
        self.project_repo.delete(name)
        self.db.commit()

        logger.info(
            "Deleted project %s (%d file(s))", name, files_deleted,
            extra={"project_name": name, "files_deleted": files_deleted},
        )
        return True
