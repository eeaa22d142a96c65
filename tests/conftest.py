"""Shared test fixtures for the memory bank test suite.

Every test runs against a fresh in-memory SQLite database. A ``StaticPool``
keeps the single connection alive so the TestClient's worker threads and
the test body see the same data.
"""

import os

# Configure the app before any memory_bank imports read settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FORMAT"] = "text"
os.environ["AUTO_CLEANUP_ON_WRITE"] = "false"

from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from memory_bank import models  # noqa: F401  (registers tables)
from memory_bank.core.timeutils import utcnow
from memory_bank.database import Base, build_engine, get_db
from memory_bank.main import app
from memory_bank.middleware.request_context import _rate_buckets
from memory_bank.repositories import VersionRepository
from memory_bank.schemas.version import VersionCreate, VersionMetadata
from memory_bank.services.content_utils import compute_checksum, content_size


@pytest.fixture()
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def db(engine):
    """Per-test database session."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture()
def override_db(db):
    """Route the app's get_db dependency to the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    _rate_buckets.clear()  # Reset rate limiter so tests don't hit 429
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(override_db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""
    with TestClient(app) as c:
        yield c


def make_file(name: str = "notes.md", content: str = "# Notes\n\nHello world.", **overrides) -> dict:
    """Factory for file creation payloads."""
    payload = {"name": name, "content": content}
    payload.update(overrides)
    return payload


def add_version(
    db,
    version: int,
    content: Optional[str] = None,
    project_name: str = "proj",
    file_name: str = "notes.md",
    created_at: Optional[datetime] = None,
    change_description: Optional[str] = None,
):
    """Insert a version record directly through the repository and commit."""
    content = content if content is not None else f"content v{version}"
    repo = VersionRepository(db)
    record = repo.create_version(
        VersionCreate(
            file_id="file-1",
            project_name=project_name,
            file_name=file_name,
            version=version,
            content=content,
            size=content_size(content),
            checksum=compute_checksum(content),
            created_at=created_at or utcnow(),
            metadata=VersionMetadata(change_description=change_description),
        )
    )
    db.commit()
    return record
