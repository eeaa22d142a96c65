"""Main FastAPI application."""

import logging
import re
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import __version__
from . import models  # noqa: F401  (registers tables on Base.metadata)
from .api import files_router, projects_router, version_cleanup_router, versions_router
from .core.config import settings
from .core.logging_config import setup_logging
from .database import DATABASE_URL, Base, engine, get_db, is_postgresql
from .exceptions import MemoryBankException
from .middleware.exception_handler import memory_bank_exception_handler
from .middleware.request_context import RequestContextMiddleware

setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


def _mask_url(url: str) -> str:
    """Mask password in database URL for safe logging."""
    return re.sub(r'://([^:]+):([^@]+)@', r'://\1:***@', url)


def _init_database() -> None:
    """Verify connectivity and create missing tables. Exits on failure."""
    masked = _mask_url(DATABASE_URL)
    logger.info(f"Connecting to database: {masked}")
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.critical(
            "Database initialisation failed.\n"
            f"  DATABASE_URL: {masked}\n"
            "  Check that the server is reachable (PostgreSQL) or the directory is writable (SQLite).\n"
            f"  Error: {e}"
        )
        raise SystemExit(1) from e
    logger.info("Database ready")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the memory bank API."""
    logger.info(f"Environment: {settings.environment.value}")
    _init_database()

    db_type = "PostgreSQL" if is_postgresql() else "SQLite"
    logger.info(
        "Memory bank API started | env=%s | db=%s | retention=%d versions/%d days",
        settings.environment.value,
        db_type,
        settings.max_versions_per_file,
        settings.preserve_versions_for_days,
    )

    yield


app = FastAPI(
    title="Memory Bank API",
    description=(
        "Project-scoped file store with full version history. Every write of a file "
        "appends an immutable version; versions can be listed, read, compared with a "
        "positional line diff, reverted to (as a new version) and cleaned up by a "
        "retention policy."
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(MemoryBankException, memory_bank_exception_handler)

app.include_router(projects_router)
app.include_router(files_router)
app.include_router(versions_router)
app.include_router(version_cleanup_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "Memory Bank API",
        "version": __version__,
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check with database status, uptime and version count.

    Never raises; reports ``degraded`` when the database is unreachable.
    """
    db_status = "ok"
    version_count = 0
    try:
        db.execute(text("SELECT 1"))
        version_count = db.execute(text("SELECT COUNT(*) FROM file_versions")).scalar() or 0
    except Exception:
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": __version__,
        "version_count": version_count,
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("memory_bank.main:app", host=settings.api_host, port=settings.api_port)
