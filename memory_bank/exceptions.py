"""Custom exception hierarchy for the memory bank."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Project errors
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"

    # File errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_ALREADY_EXISTS = "FILE_ALREADY_EXISTS"

    # Version errors
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"
    COMPARISON_UNAVAILABLE = "COMPARISON_UNAVAILABLE"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Storage errors
    STORAGE_ERROR = "STORAGE_ERROR"

    # Rate limiting
    RATE_LIMITED = "RATE_LIMITED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MemoryBankException(Exception):
    """
    Base exception for all memory bank errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class ProjectNotFoundError(MemoryBankException):
    """Project not found in database."""

    def __init__(self, project_name: str):
        super().__init__(
            f"Project not found: {project_name}",
            ErrorCode.PROJECT_NOT_FOUND,
            status_code=404,
            details={"project_name": project_name}
        )


class ProjectFileNotFoundError(MemoryBankException):
    """File not found in a project."""

    def __init__(self, project_name: str, file_name: str):
        super().__init__(
            f"File '{file_name}' not found in project '{project_name}'",
            ErrorCode.FILE_NOT_FOUND,
            status_code=404,
            details={"project_name": project_name, "file_name": file_name}
        )


class FileAlreadyExistsError(MemoryBankException):
    """Write refused because the file already exists (use update instead)."""

    def __init__(self, project_name: str, file_name: str):
        super().__init__(
            f"File '{file_name}' already exists in project '{project_name}'",
            ErrorCode.FILE_ALREADY_EXISTS,
            status_code=409,
            details={"project_name": project_name, "file_name": file_name}
        )


class VersionNotFoundError(MemoryBankException):
    """Version not found for a file."""

    def __init__(self, project_name: str, file_name: str, version: int):
        super().__init__(
            f"Version {version} not found for file {file_name} in project {project_name}",
            ErrorCode.VERSION_NOT_FOUND,
            status_code=404,
            details={"project_name": project_name, "file_name": file_name, "version": version}
        )


class ComparisonUnavailableError(MemoryBankException):
    """One or both versions of a comparison do not exist."""

    def __init__(self, project_name: str, file_name: str, version1: int, version2: int):
        super().__init__(
            "Could not compare file versions",
            ErrorCode.COMPARISON_UNAVAILABLE,
            status_code=404,
            details={
                "project_name": project_name,
                "file_name": file_name,
                "version1": version1,
                "version2": version2,
            }
        )


class ValidationError(MemoryBankException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class StorageError(MemoryBankException):
    """The store was unreachable or rejected a read or write.

    Constraint violations (e.g. a duplicate version number) surface as this
    same error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.STORAGE_ERROR,
            status_code=500,
            details=details
        )
        self.original_error = original_error
