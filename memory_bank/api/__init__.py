"""API routes."""

from .projects import router as projects_router
from .files import router as files_router
from .versions import router as versions_router, cleanup_router as version_cleanup_router

__all__ = [
    "projects_router",
    "files_router",
    "versions_router",
    "version_cleanup_router",
]
