"""Data model for file access decisions.

Every value the authorizer branches on comes from a closed enum. Raw values
(strings from a database row or a token claim) go through the ``parse``
classmethods, which raise instead of guessing.

Visibility is evaluated on two independent axes:
  - tier: PUBLIC < MEMBERS_ONLY < BOARD_ONLY
  - ownership: COMMITTEE_ONLY (committee membership), PRIVATE (member identity)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional

from memberfiles.core.errors import (
    MalformedInputError,
    UnknownObjectTypeError,
    UnknownRoleError,
    UnknownVisibilityError,
)


class Visibility(str, Enum):
    """Declared access tier of a file."""

    PUBLIC = "PUBLIC"                   # Anyone, including anonymous
    MEMBERS_ONLY = "MEMBERS_ONLY"       # Any authenticated member
    COMMITTEE_ONLY = "COMMITTEE_ONLY"   # Members of the owning committee
    BOARD_ONLY = "BOARD_ONLY"           # Board role holders
    PRIVATE = "PRIVATE"                 # The designated owner only

    @classmethod
    def parse(cls, value: Any) -> "Visibility":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownVisibilityError(value) from None


class ObjectType(str, Enum):
    """Kind of entity a file is attached to."""

    EVENT = "EVENT"
    MEMBER = "MEMBER"
    COMMITTEE = "COMMITTEE"
    BOARD_RECORD = "BOARD_RECORD"
    GENERAL = "GENERAL"

    @classmethod
    def parse(cls, value: Any) -> "ObjectType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownObjectTypeError(value) from None


class Role(str, Enum):
    """Requester role tiers, lowest first."""

    ANONYMOUS = "anonymous"
    MEMBER = "member"
    COMMITTEE_MEMBER = "committee-member"
    BOARD_MEMBER = "board-member"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return ROLE_RANK[self]

    @property
    def is_authenticated(self) -> bool:
        return self.rank >= ROLE_RANK[Role.MEMBER]

    @classmethod
    def _missing_(cls, value):
        # Session claims and config files also spell roles with underscores
        if isinstance(value, str) and "_" in value:
            return cls._value2member_map_.get(value.replace("_", "-"))
        return None

    @classmethod
    def parse(cls, value: Any) -> "Role":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownRoleError(value) from None


ROLE_RANK: Dict[Role, int] = {
    Role.ANONYMOUS: 0,
    Role.MEMBER: 1,
    Role.COMMITTEE_MEMBER: 2,
    Role.BOARD_MEMBER: 3,
    Role.ADMIN: 4,
}


class AccessType(str, Enum):
    """Kinds of file access recorded in the access log."""

    VIEW = "view"
    DOWNLOAD = "download"
    URL_GENERATED = "url_generated"
    UPLOAD = "upload"
    DELETE = "delete"


@dataclass(frozen=True)
class Requester:
    """
    The identity and role context performing an access check.

    Requesters are always passed explicitly; nothing in this package looks
    up a current user from ambient state.
    """

    role: Role
    member_id: Optional[str] = None
    committee_ids: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "role", Role.parse(self.role))
        committee_ids = self.committee_ids or ()
        # A bare string would otherwise iterate into one-character ids
        if isinstance(committee_ids, (str, bytes)):
            raise MalformedInputError(
                f"committee_ids must be a collection of ids, got {type(committee_ids).__name__}"
            )
        try:
            committee_ids = frozenset(committee_ids)
        except TypeError:
            raise MalformedInputError(
                f"committee_ids must be a collection of ids, got {type(committee_ids).__name__}"
            ) from None
        if not all(isinstance(c, str) and c for c in committee_ids):
            raise MalformedInputError("committee_ids must contain non-empty string ids")
        object.__setattr__(self, "committee_ids", committee_ids)

    @classmethod
    def anonymous(cls) -> "Requester":
        return cls(role=Role.ANONYMOUS)

    @classmethod
    def create(
        cls,
        role: Any,
        member_id: Optional[str] = None,
        committee_ids: Optional[Iterable[str]] = None,
    ) -> "Requester":
        """Build a validated requester from raw values."""
        requester = cls(
            role=role,
            member_id=member_id,
            committee_ids=committee_ids,
        )
        requester.validate()
        return requester

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def validate(self) -> None:
        """Raise ``MalformedInputError`` if the requester is inconsistent."""
        role = self.role
        if role is Role.ANONYMOUS:
            if self.member_id is not None or self.committee_ids:
                raise MalformedInputError(
                    "Anonymous requester cannot carry a member id or memberships"
                )
            return
        if not self.member_id:
            raise MalformedInputError(f"Requester with role {role.value} has no member id")


@dataclass(frozen=True)
class FileRef:
    """
    The access-relevant view of a stored file.

    ``owner_id`` is the member id for PRIVATE files and the committee id for
    COMMITTEE_ONLY files. Other visibilities ignore it.
    """

    visibility: Visibility
    object_type: ObjectType
    id: Optional[str] = None
    owner_id: Optional[str] = None
    object_id: Optional[str] = None
    uploaded_by_id: Optional[str] = None
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRef":
        """Create a file reference from a mapping of raw values."""
        if "visibility" not in data or "object_type" not in data:
            raise MalformedInputError("File requires visibility and object_type")
        return cls(
            visibility=Visibility.parse(data["visibility"]),
            object_type=ObjectType.parse(data["object_type"]),
            id=data.get("id"),
            owner_id=data.get("owner_id"),
            object_id=data.get("object_id"),
            uploaded_by_id=data.get("uploaded_by_id"),
            deleted=bool(data.get("deleted", False)),
        )


@dataclass(frozen=True)
class AuthorizationResult:
    """Outcome of an access check. ``reason`` is set only on denial."""

    authorized: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.authorized

    @classmethod
    def allow(cls) -> "AuthorizationResult":
        return cls(authorized=True)

    @classmethod
    def deny(cls, reason: str) -> "AuthorizationResult":
        return cls(authorized=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        if self.authorized:
            return {"authorized": True}
        return {"authorized": False, "reason": self.reason}
