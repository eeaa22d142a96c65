"""Project file model."""

from sqlalchemy import Column, Index, Integer, String, Text, DateTime, JSON, UniqueConstraint
from sqlalchemy.sql import func
from ..database import Base


class ProjectFile(Base):
    """Current content of a named file within a project.

    History lives in ``file_versions``; this row only holds the latest write.
    """

    __tablename__ = "files"
    __table_args__ = (
        UniqueConstraint("project_name", "name", name="uq_files_project_name"),
        Index("ix_files_project_updated_at", "project_name", "updated_at"),
    )

    id = Column(String(36), primary_key=True)  # uuid4
    project_name = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)

    content = Column(Text, nullable=False)
    size = Column(Integer, nullable=False)
    checksum = Column(String(64), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # encoding, mime_type, word_count, line_count, keywords, summary, version
    file_metadata = Column("metadata", JSON, nullable=True)
