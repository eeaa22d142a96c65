"""FastAPI dependency providers.

Everything is wired explicitly from the request's session; there is no
process-wide repository registry. FastAPI caches each provider per request,
so the file service and the version service share one version store.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import get_db
from ..repositories import VersionRepository, VersionStore
from ..services.file_service import FileService
from ..services.project_service import ProjectService
from ..services.retention import RetentionConfig
from ..services.version_service import VersionService


def get_version_store(db: Session = Depends(get_db)) -> VersionStore:
    return VersionRepository(db)


def get_file_service(
    db: Session = Depends(get_db),
    version_store: VersionStore = Depends(get_version_store),
) -> FileService:
    return FileService(
        db,
        version_store,
        allowed_extensions=settings.get_allowed_extensions(),
        max_file_size=settings.max_file_size,
        write_cleanup=RetentionConfig.from_settings(settings) if settings.auto_cleanup_on_write else None,
    )


def get_project_service(
    db: Session = Depends(get_db),
    version_store: VersionStore = Depends(get_version_store),
) -> ProjectService:
    return ProjectService(db, version_store)


def get_version_service(
    version_store: VersionStore = Depends(get_version_store),
    file_service: FileService = Depends(get_file_service),
) -> VersionService:
    return VersionService(
        version_store,
        file_service,
        default_retention=RetentionConfig.from_settings(settings),
    )
