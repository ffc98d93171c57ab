"""Access authorizer for member files.

Decides whether a requester may read, list, upload or delete files. All
functions are pure: they never touch storage themselves (file lookups go
through a caller-supplied ``FileLookup``) and never log. Denials come back
as ``AuthorizationResult``; only malformed input raises.
"""

from typing import Any, Optional, Protocol

from memberfiles.core.errors import MalformedInputError
from .model import AuthorizationResult, FileRef, ObjectType, Requester, Visibility
from .policy import (
    BOARD_ROLES,
    Requirement,
    denial_reason,
    is_ownership_requirement,
    required_capability,
)


FILE_NOT_FOUND = "file not found"
NOT_UPLOADER = "not the uploader"


class FileLookup(Protocol):
    """Anything that can fetch a file reference by id."""

    def get_file(self, file_id: str) -> Optional[FileRef]:
        ...


def validate_requester(requester: Requester) -> Requester:
    """Check a requester and return it, raising on malformed input."""
    if requester is None:
        raise MalformedInputError("Requester is required; use Requester.anonymous()")
    requester.validate()
    return requester


def resolve_requirement(file: FileRef) -> Requirement:
    """
    Validate a file and return what it takes to read it.

    Raises:
        AccessConfigurationError: visibility or object type is unknown
        MalformedInputError: an ownership-scoped file has no owner
    """
    if file is None:
        raise MalformedInputError("File is required")
    requirement = required_capability(file.visibility, file.object_type)
    if is_ownership_requirement(requirement) and not file.owner_id:
        raise MalformedInputError(
            f"{Visibility.parse(file.visibility).value} file {file.id or '<unsaved>'} has no owner"
        )
    return requirement


def meets_requirement(requirement: Requirement, requester: Requester, file: FileRef) -> bool:
    """Evaluate one requirement, without the admin override."""
    role = requester.role
    if requirement is Requirement.ANYONE:
        return True
    if requirement is Requirement.MEMBER:
        return role.is_authenticated
    if requirement is Requirement.BOARD_ROLE:
        return role in BOARD_ROLES
    if requirement is Requirement.COMMITTEE_MEMBERSHIP:
        return file.owner_id in requester.committee_ids
    if requirement is Requirement.OWNERSHIP:
        return requester.member_id is not None and requester.member_id == file.owner_id
    raise MalformedInputError(f"Unhandled requirement: {requirement!r}")


def authorize(requester: Requester, file: FileRef) -> AuthorizationResult:
    """
    Decide whether ``requester`` may read ``file``.

    Inputs are validated before the admin override, so malformed data is
    never allowed just because the requester is an admin.

    Args:
        requester: Who is asking
        file: The file being read

    Returns:
        AuthorizationResult, with a reason naming the failed rule on denial
    """
    validate_requester(requester)
    requirement = resolve_requirement(file)

    if requester.is_admin:
        return AuthorizationResult.allow()

    if meets_requirement(requirement, requester, file):
        return AuthorizationResult.allow()
    return AuthorizationResult.deny(denial_reason(requirement))


def authorize_file_access(
    requester: Requester,
    file_id: str,
    files: FileLookup,
) -> AuthorizationResult:
    """Look up a file by id and authorize reading it.

    Missing and soft-deleted files are denied the same way for every
    requester, admins included.
    """
    validate_requester(requester)
    file = files.get_file(file_id)
    if file is None or file.deleted:
        return AuthorizationResult.deny(FILE_NOT_FOUND)
    return authorize(requester, file)


def authorize_file_list(requester: Requester) -> AuthorizationResult:
    """Check that a requester may call a file listing at all.

    Listing requires an authenticated requester; which files appear is
    decided per file by ``get_visibility_filter``.
    """
    validate_requester(requester)
    if not requester.role.is_authenticated:
        return AuthorizationResult.deny(denial_reason(Requirement.MEMBER))
    return AuthorizationResult.allow()


def authorize_file_upload(
    requester: Requester,
    object_type: Any,
    visibility: Any,
    object_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> AuthorizationResult:
    """
    Decide whether a requester may upload a file with the given settings.

    Rules:
    - Anonymous requesters cannot upload
    - BOARD_RECORD attachments require a board role
    - The uploader must be able to read the file they create; a PRIVATE
      upload without an explicit owner is owned by the uploader

    Args:
        requester: Who is uploading
        object_type: Kind of entity the file attaches to
        visibility: Requested visibility
        object_id: Id of the entity the file attaches to
        owner_id: Owning member (PRIVATE) or committee (COMMITTEE_ONLY)
    """
    validate_requester(requester)
    vis = Visibility.parse(visibility)
    obj_type = ObjectType.parse(object_type)

    if not requester.role.is_authenticated:
        return AuthorizationResult.deny(denial_reason(Requirement.MEMBER))

    if vis is Visibility.PRIVATE and owner_id is None:
        owner_id = requester.member_id

    prospective = FileRef(
        visibility=vis,
        object_type=obj_type,
        owner_id=owner_id,
        object_id=object_id,
        uploaded_by_id=requester.member_id,
    )
    resolve_requirement(prospective)

    if requester.is_admin:
        return AuthorizationResult.allow()

    if obj_type is ObjectType.BOARD_RECORD and requester.role not in BOARD_ROLES:
        return AuthorizationResult.deny(denial_reason(Requirement.BOARD_ROLE))

    return authorize(requester, prospective)


def authorize_file_delete(
    requester: Requester,
    file_id: str,
    files: FileLookup,
) -> AuthorizationResult:
    """Only the uploader or an admin may delete a file."""
    validate_requester(requester)
    if not requester.role.is_authenticated:
        return AuthorizationResult.deny(denial_reason(Requirement.MEMBER))

    file = files.get_file(file_id)
    if file is None or file.deleted:
        return AuthorizationResult.deny(FILE_NOT_FOUND)

    if requester.is_admin:
        return AuthorizationResult.allow()

    if file.uploaded_by_id and file.uploaded_by_id == requester.member_id:
        return AuthorizationResult.allow()
    return AuthorizationResult.deny(NOT_UPLOADER)
