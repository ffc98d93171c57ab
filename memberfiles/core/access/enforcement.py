"""HTTP enforcement helpers for file endpoints.

Route handlers call the authorizer and hand the result to these helpers,
which turn a denial into an ``HTTPException``:

- anonymous requester denied -> 401 with a ``WWW-Authenticate`` challenge
- any other denial, including a missing file -> one uniform status
  (403 by default, 404 when configured) with a generic detail

The denial reason is logged, never sent to the client.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import HTTPException, Request, status

from memberfiles.common.config import ALLOWED_DENIED_STATUSES
from memberfiles.core.config import get_config
from .authorizer import FileLookup, authorize_file_access, authorize_file_list
from .model import AccessType, AuthorizationResult, Requester

logger = logging.getLogger(__name__)

DENIED_DETAILS = {
    status.HTTP_403_FORBIDDEN: "Insufficient permissions for this file",
    status.HTTP_404_NOT_FOUND: "File not found",
}


def ensure_authorized(
    result: AuthorizationResult,
    requester: Requester,
    denied_status: Optional[int] = None,
    action: str = "read",
    file_id: Optional[str] = None,
) -> None:
    """
    Raise the HTTP error for a denied result; return quietly otherwise.

    Args:
        result: Outcome from the authorizer
        requester: Requester the result was computed for
        denied_status: Status for authenticated denials (403 or 404);
            the configured ``access.denied_status`` when omitted
        action: What was attempted, for the log line
        file_id: File involved, for the log line
    """
    if denied_status is None:
        denied_status = get_config().access.denied_status
    if denied_status not in ALLOWED_DENIED_STATUSES:
        raise ValueError(f"Unsupported denied status: {denied_status}")

    if result.authorized:
        return

    logger.info(
        "File %s denied: file=%s member=%s role=%s reason=%s",
        action,
        file_id or "-",
        requester.member_id or "anonymous",
        requester.role.value,
        result.reason,
    )

    if not requester.role.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    raise HTTPException(status_code=denied_status, detail=DENIED_DETAILS[denied_status])


def require_file_access(
    requester: Requester,
    file_id: str,
    files: FileLookup,
    denied_status: Optional[int] = None,
) -> AuthorizationResult:
    """Authorize reading one file, raising ``HTTPException`` on denial."""
    result = authorize_file_access(requester, file_id, files)
    ensure_authorized(result, requester, denied_status, action="read", file_id=file_id)
    return result


def require_file_list(
    requester: Requester,
    denied_status: Optional[int] = None,
) -> AuthorizationResult:
    """Authorize calling a file listing, raising ``HTTPException`` on denial."""
    result = authorize_file_list(requester)
    ensure_authorized(result, requester, denied_status, action="list")
    return result


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # First entry is the original client
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def record_access(
    access_log: Any,
    request: Request,
    requester: Requester,
    file_id: str,
    access_type: AccessType,
    expires_at: Optional[datetime] = None,
):
    """Write an access-log entry for an authorized request.

    ``access_log`` is anything with a ``log_access`` method, normally a
    ``FileRepository``.
    """
    return access_log.log_access(
        file_id=file_id,
        requester=requester,
        access_type=access_type,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
        expires_at=expires_at,
    )
