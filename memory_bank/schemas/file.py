"""File schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.timeutils import as_utc


class FileCreate(BaseModel):
    """Schema for writing a new file."""
    name: str = Field(min_length=1, max_length=255)
    content: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("File name cannot be empty")
        if '/' in v or '\\' in v:
            raise ValueError("File name cannot contain path separators")
        if '..' in v:
            raise ValueError("File name cannot contain '..'")
        return v


class FileUpdate(BaseModel):
    """Schema for replacing a file's content."""
    content: str
    change_description: Optional[str] = None


class FileMetadata(BaseModel):
    encoding: str = "utf-8"
    mime_type: str = "text/plain"
    word_count: Optional[int] = None
    line_count: Optional[int] = None
    keywords: Optional[List[str]] = None
    summary: Optional[str] = None
    version: Optional[int] = None  # Latest version number at time of write


class FileListItem(BaseModel):
    """File listing entry, without content."""
    id: str
    project_name: str
    name: str
    size: int
    checksum: str
    created_at: datetime
    updated_at: datetime
    metadata: Optional[FileMetadata] = None

    @classmethod
    def from_model(cls, f) -> "FileListItem":
        return cls(
            id=f.id,
            project_name=f.project_name,
            name=f.name,
            size=f.size,
            checksum=f.checksum,
            created_at=as_utc(f.created_at),
            updated_at=as_utc(f.updated_at),
            metadata=FileMetadata(**f.file_metadata) if f.file_metadata else None,
        )


class FileResponse(FileListItem):
    content: str

    @classmethod
    def from_model(cls, f) -> "FileResponse":
        item = FileListItem.from_model(f)
        return cls(**item.model_dump(), content=f.content)
