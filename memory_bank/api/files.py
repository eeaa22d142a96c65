"""File API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Response

from ..exceptions import ProjectFileNotFoundError
from ..schemas.file import FileCreate, FileListItem, FileResponse, FileUpdate
from ..services.file_service import FileService
from .deps import get_file_service

router = APIRouter(prefix="/api/projects/{project_name}/files", tags=["files"])


@router.get("", response_model=List[FileListItem])
def list_files(project_name: str, service: FileService = Depends(get_file_service)):
    """List files of a project, most recently updated first."""
    return [FileListItem.from_model(f) for f in service.list_files(project_name)]


@router.post("", response_model=FileResponse, status_code=201)
def write_file(
    project_name: str,
    payload: FileCreate,
    service: FileService = Depends(get_file_service),
):
    """Create a new file. Creates version 1 and the project if needed."""
    db_file = service.write_file(project_name, payload.name, payload.content)
    return FileResponse.from_model(db_file)


@router.get("/{file_name}", response_model=FileResponse)
def read_file(project_name: str, file_name: str, service: FileService = Depends(get_file_service)):
    """Get a file's current content."""
    db_file = service.read_file(project_name, file_name)
    if db_file is None:
        raise ProjectFileNotFoundError(project_name, file_name)
    return FileResponse.from_model(db_file)


@router.put("/{file_name}", response_model=FileResponse)
def update_file(
    project_name: str,
    file_name: str,
    payload: FileUpdate,
    service: FileService = Depends(get_file_service),
):
    """Replace a file's content. Appends a new version."""
    db_file = service.update_file(
        project_name, file_name, payload.content, change_description=payload.change_description
    )
    if db_file is None:
        raise ProjectFileNotFoundError(project_name, file_name)
    return FileResponse.from_model(db_file)


@router.delete("/{file_name}", status_code=204)
def delete_file(project_name: str, file_name: str, service: FileService = Depends(get_file_service)):
    """Delete a file and its version history."""
    if not service.delete_file(project_name, file_name):
        raise ProjectFileNotFoundError(project_name, file_name)
    return Response(status_code=204)
