"""Visibility policy for member files.

Maps a file's visibility and object type to the capability a requester
needs to read it. The table is checked for completeness at import time so
that a visibility added to the enum without a rule fails loudly instead of
falling through to a default.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet

from memberfiles.core.errors import AccessConfigurationError
from .model import ObjectType, Role, Visibility


class Requirement(str, Enum):
    """Capability a requester must hold."""

    ANYONE = "anyone"                              # No authentication needed
    MEMBER = "member"                              # Any authenticated role
    COMMITTEE_MEMBERSHIP = "committee_membership"  # Belongs to the owning committee
    BOARD_ROLE = "board_role"                      # Holds a board role
    OWNERSHIP = "ownership"                        # Is the designated owner


VISIBILITY_REQUIREMENTS: Dict[Visibility, Requirement] = {
    Visibility.PUBLIC: Requirement.ANYONE,
    Visibility.MEMBERS_ONLY: Requirement.MEMBER,
    Visibility.COMMITTEE_ONLY: Requirement.COMMITTEE_MEMBERSHIP,
    Visibility.BOARD_ONLY: Requirement.BOARD_ROLE,
    Visibility.PRIVATE: Requirement.OWNERSHIP,
}

# Tier requirements compare the requester's role; ownership requirements
# compare the requester's identity with the file's owner.
TIER_REQUIREMENTS: FrozenSet[Requirement] = frozenset([
    Requirement.ANYONE, Requirement.MEMBER, Requirement.BOARD_ROLE,
])
OWNERSHIP_REQUIREMENTS: FrozenSet[Requirement] = frozenset([
    Requirement.COMMITTEE_MEMBERSHIP, Requirement.OWNERSHIP,
])

# Roles that satisfy BOARD_ROLE without the admin override.
BOARD_ROLES: FrozenSet[Role] = frozenset([Role.BOARD_MEMBER])

DENIAL_REASONS: Dict[Requirement, str] = {
    Requirement.MEMBER: "requires member",
    Requirement.COMMITTEE_MEMBERSHIP: "requires committee membership",
    Requirement.BOARD_ROLE: "requires board role",
    Requirement.OWNERSHIP: "not the file owner",
}


def _check_tables() -> None:
    missing = [v.value for v in Visibility if v not in VISIBILITY_REQUIREMENTS]
    if missing:
        raise AccessConfigurationError(f"No access rule for visibility: {', '.join(missing)}")
    for requirement in Requirement:
        if (requirement in TIER_REQUIREMENTS) == (requirement in OWNERSHIP_REQUIREMENTS):
            raise AccessConfigurationError(
                f"Requirement {requirement.value} must be exactly one of tier or ownership"
            )


_check_tables()


def required_capability(visibility: Any, object_type: Any) -> Requirement:
    """
    Return the capability needed to read a file.

    Args:
        visibility: Visibility member or its raw value
        object_type: ObjectType member or its raw value

    Returns:
        The Requirement for that file

    Raises:
        UnknownVisibilityError: visibility is not a known value
        UnknownObjectTypeError: object_type is not a known value
    """
    vis = Visibility.parse(visibility)
    # The object type does not change the read rule but must still be valid.
    ObjectType.parse(object_type)
    return VISIBILITY_REQUIREMENTS[vis]


def is_ownership_requirement(requirement: Requirement) -> bool:
    return requirement in OWNERSHIP_REQUIREMENTS


def denial_reason(requirement: Requirement) -> str:
    """Human-readable reason for failing ``requirement``."""
    if requirement not in DENIAL_REASONS:
        raise AccessConfigurationError(f"Requirement {requirement.value} cannot be denied")
    return DENIAL_REASONS[requirement]
