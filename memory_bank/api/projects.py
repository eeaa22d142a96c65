"""Project API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Response

from ..exceptions import ProjectNotFoundError
from ..schemas.project import ProjectResponse
from ..services.project_service import ProjectService
from .deps import get_project_service

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=List[ProjectResponse])
def list_projects(service: ProjectService = Depends(get_project_service)):
    """List all projects."""
    return [ProjectResponse.from_model(p) for p in service.list_projects()]


@router.get("/{project_name}", response_model=ProjectResponse)
def get_project(project_name: str, service: ProjectService = Depends(get_project_service)):
    """Get a project with its file count and total size."""
    project = service.get_project(project_name)
    if project is None:
        raise ProjectNotFoundError(project_name)
    return ProjectResponse.from_model(project)


@router.delete("/{project_name}", status_code=204)
def delete_project(project_name: str, service: ProjectService = Depends(get_project_service)):
    """Delete a project with all its files and versions."""
    if not service.delete_project(project_name):
        raise ProjectNotFoundError(project_name)
    return Response(status_code=204)
