"""File record model.

Visibility and object type are stored as plain strings so that a bad value
written by another system surfaces as an access configuration fault when
the row is read, instead of failing inside the ORM.
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, Index, String
from sqlalchemy.orm import relationship

from memberfiles.db.base import Base
from memberfiles.core.access.model import FileRef, ObjectType, Visibility


class File(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Attachment
    object_type = Column(String(32), nullable=False)
    object_id = Column(String(64), nullable=False)

    # Access
    visibility = Column(String(32), nullable=False, default=Visibility.MEMBERS_ONLY.value)
    owner_id = Column(String(64), nullable=True, index=True)  # Member (PRIVATE) or committee (COMMITTEE_ONLY)

    # Content
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(127), nullable=False)
    size = Column(BigInteger, nullable=False)
    storage_key = Column(String(512), nullable=False, unique=True)

    uploaded_by_id = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    access_logs = relationship("FileAccessLog", back_populates="file")

    __table_args__ = (
        Index("ix_files_object", "object_type", "object_id"),
        Index("ix_files_visibility_owner", "visibility", "owner_id"),
    )

    def to_ref(self) -> FileRef:
        """Access-relevant view of this row; raises on unknown enum values."""
        return FileRef(
            id=self.id,
            visibility=Visibility.parse(self.visibility),
            object_type=ObjectType.parse(self.object_type),
            owner_id=self.owner_id,
            object_id=self.object_id,
            uploaded_by_id=self.uploaded_by_id,
            deleted=self.deleted_at is not None,
        )
