"""File access log model.

Append-only record of downloads, generated URLs, uploads and deletions.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from memberfiles.db.base import Base


class FileAccessLog(Base):
    __tablename__ = "file_access_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    file_id = Column(String(36), ForeignKey("files.id"), nullable=False, index=True)

    # Actor; NULL for anonymous access to public files
    accessed_by_id = Column(String(64), nullable=True, index=True)
    access_type = Column(String(32), nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    expires_at = Column(DateTime, nullable=True)  # For generated URLs
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    file = relationship("File", back_populates="access_logs")
