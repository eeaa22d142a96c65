"""Project model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from ..database import Base


class Project(Base):
    """A named container of files."""

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True)  # uuid4
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Denormalized stats, refreshed after every file write/update/delete
    file_count = Column(Integer, default=0, nullable=False)
    total_size = Column(Integer, default=0, nullable=False)

    # tags, owner, version
    project_metadata = Column("metadata", JSON, nullable=True)
