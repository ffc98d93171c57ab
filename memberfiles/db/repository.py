"""File repository.

Data access for file records and the access log. Read access is always
narrowed with the requester's ``VisibilityFilter`` so that listings agree
with single-file authorization.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from memberfiles.core.access.filters import build_filter
from memberfiles.core.access.model import AccessType, FileRef, ObjectType, Requester, Visibility
from memberfiles.db.models import File, FileAccessLog
from memberfiles.schemas.common import PaginatedResponse, PaginationParams
from memberfiles.schemas.files import FileCreate, FileSummary


class FileRepository:
    """Persistence collaborator for file authorization; implements ``FileLookup``."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, file_id: str, include_deleted: bool = False) -> Optional[File]:
        query = self.db.query(File).filter(File.id == file_id)
        if not include_deleted:
            query = query.filter(File.deleted_at.is_(None))
        return query.first()

    def get_file(self, file_id: str) -> Optional[FileRef]:
        """Access view of a file, soft-deleted rows included (flagged)."""
        row = self.get(file_id, include_deleted=True)
        return row.to_ref() if row else None

    def _visible_query(
        self,
        requester: Requester,
        object_type: Optional[ObjectType] = None,
        object_id: Optional[str] = None,
    ):
        query = self.db.query(File).filter(
            File.deleted_at.is_(None),
            build_filter(requester).to_clause(File),
        )
        if object_type is not None:
            query = query.filter(File.object_type == ObjectType.parse(object_type).value)
        if object_id is not None:
            query = query.filter(File.object_id == object_id)
        return query

    def list_visible(
        self,
        requester: Requester,
        object_type: Optional[ObjectType] = None,
        object_id: Optional[str] = None,
    ) -> List[File]:
        """All live files the requester may see, newest first."""
        return (
            self._visible_query(requester, object_type, object_id)
            .order_by(File.created_at.desc(), File.id)
            .all()
        )

    def list_page(
        self,
        requester: Requester,
        pagination: Optional[PaginationParams] = None,
        object_type: Optional[ObjectType] = None,
        object_id: Optional[str] = None,
    ) -> PaginatedResponse[FileSummary]:
        """One page of the requester's visible files."""
        pagination = pagination or PaginationParams()
        query = self._visible_query(requester, object_type, object_id)
        total = query.count()
        rows = (
            query.order_by(File.created_at.desc(), File.id)
            .offset(pagination.offset)
            .limit(pagination.limit)
            .all()
        )
        return PaginatedResponse[FileSummary].create(
            items=[self._summary(r) for r in rows],
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
        )

    @staticmethod
    def _summary(row: File) -> FileSummary:
        # to_ref raises AccessConfigurationError for rows with unknown values
        row.to_ref()
        return FileSummary.model_validate(row)

    def create(
        self,
        data: FileCreate,
        uploaded_by_id: Optional[str],
        default_visibility: Visibility = Visibility.MEMBERS_ONLY,
    ) -> File:
        """Insert a file record. Authorization is the caller's job."""
        visibility = data.visibility or default_visibility
        owner_id = data.owner_id
        if visibility is Visibility.PRIVATE and owner_id is None:
            owner_id = uploaded_by_id

        storage_key = data.storage_key or (
            f"{data.object_type.value.lower()}/{data.object_id}/{uuid.uuid4()}-{data.filename}"
        )
        row = File(
            object_type=data.object_type.value,
            object_id=data.object_id,
            visibility=visibility.value,
            owner_id=owner_id,
            filename=data.filename,
            original_name=data.original_name,
            mime_type=data.mime_type,
            size=data.size,
            storage_key=storage_key,
            uploaded_by_id=uploaded_by_id,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def soft_delete(self, file_id: str) -> bool:
        row = self.get(file_id)
        if row is None:
            return False
        row.deleted_at = datetime.utcnow()
        self.db.flush()
        return True

    def log_access(
        self,
        file_id: str,
        requester: Requester,
        access_type: AccessType,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> FileAccessLog:
        """Append an access-log entry."""
        entry = FileAccessLog(
            file_id=file_id,
            accessed_by_id=requester.member_id,
            access_type=AccessType(access_type).value,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=expires_at,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def access_history(self, file_id: str) -> List[FileAccessLog]:
        return (
            self.db.query(FileAccessLog)
            .filter(FileAccessLog.file_id == file_id)
            .order_by(FileAccessLog.created_at)
            .all()
        )
