"""File access authorization for memberfiles.

This module defines the visibility policy, the access authorizer and the
listing filter, plus helpers for enforcing decisions over HTTP.
"""

from .model import (
    AccessType,
    AuthorizationResult,
    FileRef,
    ObjectType,
    Requester,
    Role,
    Visibility,
)
from .policy import Requirement, required_capability
from .authorizer import (
    FileLookup,
    authorize,
    authorize_file_access,
    authorize_file_delete,
    authorize_file_list,
    authorize_file_upload,
)
from .filters import VisibilityFilter, build_filter, get_visibility_filter
from .roles import requester_from_claims, role_for_title

__all__ = [
    "AccessType",
    "AuthorizationResult",
    "FileRef",
    "ObjectType",
    "Requester",
    "Role",
    "Visibility",
    "Requirement",
    "required_capability",
    "FileLookup",
    "authorize",
    "authorize_file_access",
    "authorize_file_delete",
    "authorize_file_list",
    "authorize_file_upload",
    "VisibilityFilter",
    "build_filter",
    "get_visibility_filter",
    "requester_from_claims",
    "role_for_title",
]
