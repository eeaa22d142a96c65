"""Version API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from ..core.timeutils import utcnow
from ..exceptions import ComparisonUnavailableError, VersionNotFoundError
from ..schemas.version import (
    CleanupRequest,
    CleanupResponse,
    RevertResponse,
    VersionComparisonResponse,
    VersionHistoryResponse,
    VersionResponse,
    VersionSummary,
)
from ..services.version_service import VersionService
from .deps import get_version_service

router = APIRouter(prefix="/api/projects/{project_name}/files/{file_name}/versions", tags=["versions"])

# Project-wide maintenance lives outside the per-file prefix.
cleanup_router = APIRouter(prefix="/api/projects/{project_name}/versions", tags=["versions"])


@router.get("", response_model=VersionHistoryResponse)
def list_versions(
    project_name: str,
    file_name: str,
    service: VersionService = Depends(get_version_service),
):
    """Version history of a file, newest first. Empty when there is none."""
    versions = service.get_file_versions(project_name, file_name)
    return VersionHistoryResponse(
        project_name=project_name,
        file_name=file_name,
        versions=[VersionSummary.from_model(v) for v in versions],
        total_versions=len(versions),
        latest_version=versions[0].version if versions else 0,
    )


@router.get("/compare", response_model=VersionComparisonResponse)
def compare_versions(
    project_name: str,
    file_name: str,
    version1: int = Query(..., ge=1),
    version2: int = Query(..., ge=1),
    service: VersionService = Depends(get_version_service),
):
    """Positional line diff from version1 to version2."""
    comparison = service.compare_file_versions(project_name, file_name, version1, version2)
    if comparison is None:
        raise ComparisonUnavailableError(project_name, file_name, version1, version2)
    return VersionComparisonResponse(
        project_name=project_name,
        file_name=file_name,
        version1=version1,
        version2=version2,
        comparison=comparison,
        differences_count=len(comparison.differences),
    )


@router.get("/{version}", response_model=VersionResponse)
def get_version(
    project_name: str,
    file_name: str,
    version: int = Path(..., ge=1),
    service: VersionService = Depends(get_version_service),
):
    """Get one version including its content."""
    db_version = service.get_file_version(project_name, file_name, version)
    if db_version is None:
        raise VersionNotFoundError(project_name, file_name, version)
    return VersionResponse.from_model(db_version)


@router.post("/{version}/revert", response_model=RevertResponse)
def revert_to_version(
    project_name: str,
    file_name: str,
    version: int = Path(..., ge=1),
    service: VersionService = Depends(get_version_service),
):
    """Restore an old version's content as a new version."""
    if not service.revert_file_to_version(project_name, file_name, version):
        raise VersionNotFoundError(project_name, file_name, version)
    return RevertResponse(
        project_name=project_name,
        file_name=file_name,
        reverted_to_version=version,
        new_version=service.get_latest_version_number(project_name, file_name),
        timestamp=utcnow(),
    )


@cleanup_router.post("/cleanup", response_model=CleanupResponse)
def cleanup_versions(
    project_name: str,
    payload: Optional[CleanupRequest] = None,
    service: VersionService = Depends(get_version_service),
):
    """Apply retention to every file of the project."""
    payload = payload or CleanupRequest()
    deleted = service.cleanup_old_versions(project_name, payload.max_versions_per_file)
    return CleanupResponse(
        project_name=project_name,
        deleted_versions=deleted,
        max_versions_per_file=(
            payload.max_versions_per_file
            if payload.max_versions_per_file is not None
            else service.default_retention.max_versions_per_file
        ),
    )
