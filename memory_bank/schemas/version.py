"""Version schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.timeutils import as_utc


class VersionMetadata(BaseModel):
    """Descriptive metadata captured when a version is written."""
    encoding: str = "utf-8"
    mime_type: str = "text/plain"
    tags: Optional[List[str]] = None
    word_count: Optional[int] = None
    line_count: Optional[int] = None
    keywords: Optional[List[str]] = None
    summary: Optional[str] = None
    change_description: Optional[str] = None  # What changed in this version
    is_auto_save: bool = False  # System-triggered rather than explicit save


class VersionCreate(BaseModel):
    """A version record before the store assigns its id.

    The caller computes ``version`` (latest + 1); the store only enforces
    uniqueness of (project_name, file_name, version).
    """
    file_id: str
    project_name: str
    file_name: str
    version: int = Field(ge=1)
    content: str
    size: int = Field(ge=0)
    checksum: str
    created_at: Optional[datetime] = None
    metadata: Optional[VersionMetadata] = None


class VersionSummaryMetadata(BaseModel):
    word_count: Optional[int] = None
    line_count: Optional[int] = None
    change_description: Optional[str] = None
    is_auto_save: Optional[bool] = None


class VersionSummary(BaseModel):
    """Version history entry, without content."""
    version: int
    size: int
    checksum: str
    created_at: datetime
    metadata: VersionSummaryMetadata

    @classmethod
    def from_model(cls, version) -> "VersionSummary":
        meta = version.version_metadata or {}
        return cls(
            version=version.version,
            size=version.size,
            checksum=version.checksum,
            created_at=as_utc(version.created_at),
            metadata=VersionSummaryMetadata(
                word_count=meta.get("word_count"),
                line_count=meta.get("line_count"),
                change_description=meta.get("change_description"),
                is_auto_save=meta.get("is_auto_save"),
            ),
        )


class VersionHistoryResponse(BaseModel):
    project_name: str
    file_name: str
    versions: List[VersionSummary]
    total_versions: int
    latest_version: int


class VersionResponse(BaseModel):
    """Full version record including content."""
    id: str
    file_id: str
    project_name: str
    file_name: str
    version: int
    content: str
    size: int
    checksum: str
    created_at: datetime
    metadata: Optional[VersionMetadata] = None

    @classmethod
    def from_model(cls, version) -> "VersionResponse":
        return cls(
            id=version.id,
            file_id=version.file_id,
            project_name=version.project_name,
            file_name=version.file_name,
            version=version.version,
            content=version.content,
            size=version.size,
            checksum=version.checksum,
            created_at=as_utc(version.created_at),
            metadata=VersionMetadata(**version.version_metadata) if version.version_metadata else None,
        )


class DiffEntry(BaseModel):
    """One positional difference between two versions."""
    model_config = ConfigDict(frozen=True)

    type: Literal["addition", "deletion", "modification"]
    line: int  # 1-based
    content: str


class VersionComparison(BaseModel):
    version1_content: str
    version2_content: str
    differences: List[DiffEntry]


class VersionComparisonResponse(BaseModel):
    project_name: str
    file_name: str
    version1: int
    version2: int
    comparison: VersionComparison
    differences_count: int


class RevertResponse(BaseModel):
    success: bool = True
    project_name: str
    file_name: str
    reverted_to_version: int
    new_version: int
    timestamp: datetime


class CleanupRequest(BaseModel):
    max_versions_per_file: Optional[int] = Field(default=None, ge=1)


class CleanupResponse(BaseModel):
    project_name: str
    deleted_versions: int
    max_versions_per_file: int
