"""Pydantic schemas for API validation."""

from .project import ProjectResponse
from .file import FileCreate, FileUpdate, FileMetadata, FileListItem, FileResponse
from .version import (
    VersionMetadata,
    VersionCreate,
    VersionSummary,
    VersionHistoryResponse,
    VersionResponse,
    DiffEntry,
    VersionComparison,
    VersionComparisonResponse,
    RevertResponse,
    CleanupRequest,
    CleanupResponse,
)

__all__ = [
    "ProjectResponse",
    "FileCreate",
    "FileUpdate",
    "FileMetadata",
    "FileListItem",
    "FileResponse",
    "VersionMetadata",
    "VersionCreate",
    "VersionSummary",
    "VersionHistoryResponse",
    "VersionResponse",
    "DiffEntry",
    "VersionComparison",
    "VersionComparisonResponse",
    "RevertResponse",
    "CleanupRequest",
    "CleanupResponse",
]
