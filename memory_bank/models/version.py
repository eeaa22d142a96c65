"""File version model."""

from sqlalchemy import Column, Index, Integer, String, Text, DateTime, JSON, UniqueConstraint
from sqlalchemy.sql import func
from ..database import Base


class FileVersion(Base):
    """Immutable snapshot of a file's full content."""

    __tablename__ = "file_versions"
    __table_args__ = (
        UniqueConstraint("project_name", "file_name", "version", name="uq_file_versions_project_file_version"),
        Index("ix_file_versions_project_file_version", "project_name", "file_name", "version"),
        Index("ix_file_versions_created_at", "created_at"),
    )

    id = Column(String(36), primary_key=True)  # uuid4

    # Opaque reference to the owning file. Not a foreign key: versions are only
    # removed by explicit deletes, never cascaded.
    file_id = Column(String(36), nullable=False)

    # Denormalized for direct querying
    project_name = Column(String(255), nullable=False)
    file_name = Column(String(255), nullable=False)

    version = Column(Integer, nullable=False)

    # Full text, not a delta
    content = Column(Text, nullable=False)
    size = Column(Integer, nullable=False)  # UTF-8 byte length
    checksum = Column(String(64), nullable=False)  # SHA256, display only

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # encoding, mime_type, word_count, line_count, keywords, summary,
    # change_description, is_auto_save
    version_metadata = Column("metadata", JSON, nullable=True)
