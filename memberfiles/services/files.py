"""File service.

Provides the operations file endpoints need, each one authorizing first
and then touching storage:
- Reading a single file (with an access-log entry)
- Listing visible files
- Uploading with visibility checks
- Soft-deleting (uploader or admin)

Denials are returned, not raised, so a route can pick the HTTP status via
``memberfiles.core.access.enforcement``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from memberfiles.common.config import AccessConfig
from memberfiles.core.config import get_config
from memberfiles.core.access.authorizer import (
    authorize_file_access,
    authorize_file_delete,
    authorize_file_list,
    authorize_file_upload,
)
from memberfiles.core.access.model import AccessType, AuthorizationResult, ObjectType, Requester
from memberfiles.db.repository import FileRepository
from memberfiles.schemas.common import PaginationParams
from memberfiles.schemas.files import FileCreate

logger = logging.getLogger(__name__)


@dataclass
class FileOutcome:
    """Authorization result plus whatever the operation produced."""
    result: AuthorizationResult
    value: Any = None

    @property
    def authorized(self) -> bool:
        return self.result.authorized


class FileService:
    """
    High-level file operations for one database session.

    The service flushes but never commits; the caller owns the transaction.
    """

    def __init__(self, db: Session, access_config: Optional[AccessConfig] = None):
        """
        Args:
            db: Database session
            access_config: Access settings (loaded via ``get_config`` when omitted)
        """
        self.db = db
        self.config = access_config or get_config().access
        self.repo = FileRepository(db)

    def _denied(self, action: str, requester: Requester, result: AuthorizationResult,
                file_id: Optional[str] = None) -> FileOutcome:
        logger.info(
            "File %s denied: file=%s member=%s reason=%s",
            action, file_id or "-", requester.member_id or "anonymous", result.reason,
        )
        return FileOutcome(result=result)

    def read(
        self,
        requester: Requester,
        file_id: str,
        access_type: AccessType = AccessType.VIEW,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> FileOutcome:
        """Authorize and fetch one file, recording the access."""
        result = authorize_file_access(requester, file_id, self.repo)
        if not result.authorized:
            return self._denied("read", requester, result, file_id)

        row = self.repo.get(file_id)
        self.repo.log_access(
            file_id,
            requester,
            access_type,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=expires_at,
        )
        return FileOutcome(result=result, value=row)

    def list(
        self,
        requester: Requester,
        pagination: Optional[PaginationParams] = None,
        object_type: Optional[ObjectType] = None,
        object_id: Optional[str] = None,
    ) -> FileOutcome:
        """Authorize a listing and return one page of visible files."""
        result = authorize_file_list(requester)
        if not result.authorized:
            return self._denied("list", requester, result)

        page = self.repo.list_page(
            requester, pagination, object_type=object_type, object_id=object_id
        )
        return FileOutcome(result=result, value=page)

    def upload(
        self,
        requester: Requester,
        data: FileCreate,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> FileOutcome:
        """Authorize and create a file record."""
        visibility = data.visibility or self.config.default_upload_visibility
        result = authorize_file_upload(
            requester,
            data.object_type,
            visibility,
            object_id=data.object_id,
            owner_id=data.owner_id,
        )
        if not result.authorized:
            return self._denied("upload", requester, result)

        row = self.repo.create(
            data,
            uploaded_by_id=requester.member_id,
            default_visibility=self.config.default_upload_visibility,
        )
        self.repo.log_access(
            row.id, requester, AccessType.UPLOAD,
            ip_address=ip_address, user_agent=user_agent,
        )
        logger.info("File uploaded: file=%s member=%s visibility=%s",
                    row.id, requester.member_id, row.visibility)
        return FileOutcome(result=result, value=row)

    def delete(
        self,
        requester: Requester,
        file_id: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> FileOutcome:
        """Authorize and soft-delete a file."""
        result = authorize_file_delete(requester, file_id, self.repo)
        if not result.authorized:
            return self._denied("delete", requester, result, file_id)

        self.repo.soft_delete(file_id)
        self.repo.log_access(
            file_id, requester, AccessType.DELETE,
            ip_address=ip_address, user_agent=user_agent,
        )
        logger.info("File deleted: file=%s member=%s", file_id, requester.member_id)
        return FileOutcome(result=result, value=True)
