"""Project schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..core.timeutils import as_utc


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    file_count: int
    total_size: int
    metadata: Optional[dict] = None

    @classmethod
    def from_model(cls, project) -> "ProjectResponse":
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            created_at=as_utc(project.created_at),
            updated_at=as_utc(project.updated_at),
            file_count=project.file_count or 0,
            total_size=project.total_size or 0,
            metadata=project.project_metadata,
        )
