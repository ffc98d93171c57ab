"""Organization titles and their access roles.

Members hold organization titles (president, event chair, webmaster, ...).
For file access every title collapses onto one of the five ``Role`` tiers:
1. Admin - full access
2. Board member - president, past president, vice presidents
3. Committee member - chairs who run committees and events
4. Member - everyone else with an account
5. Anonymous - no account
"""

from typing import Any, Dict, Mapping, Optional

from memberfiles.core.errors import MalformedInputError, UnknownRoleError
from .model import Requester, Role


DEFAULT_ROLE_TITLES: Dict[str, dict] = {
    "admin": {
        "name": "Administrator",
        "description": "Site administrators; may read and delete every file",
        "role": Role.ADMIN,
    },
    "president": {
        "name": "President",
        "description": "Board officer",
        "role": Role.BOARD_MEMBER,
    },
    "past-president": {
        "name": "Past President",
        "description": "Board officer",
        "role": Role.BOARD_MEMBER,
    },
    "vp-activities": {
        "name": "VP Activities",
        "description": "Board officer responsible for events",
        "role": Role.BOARD_MEMBER,
    },
    "event-chair": {
        "name": "Event Chair",
        "description": "Runs an activity committee",
        "role": Role.COMMITTEE_MEMBER,
    },
    "webmaster": {
        "name": "Webmaster",
        "description": "Maintains site content; member-level file access",
        "role": Role.MEMBER,
    },
    "member": {
        "name": "Member",
        "description": "Any member in good standing",
        "role": Role.MEMBER,
    },
}


def get_title_roles(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Role]:
    """Title -> Role table, with ``overrides`` (raw role values) applied."""
    table = {title: entry["role"] for title, entry in DEFAULT_ROLE_TITLES.items()}
    for title, role in (overrides or {}).items():
        table[title.lower()] = Role.parse(role)
    return table


def role_for_title(title: str, overrides: Optional[Mapping[str, Any]] = None) -> Role:
    """Get the access role for an organization title."""
    table = get_title_roles(overrides)
    role = table.get(title.lower()) if title else None
    if role is None:
        raise UnknownRoleError(title)
    return role


def requester_from_claims(
    claims: Optional[Mapping[str, Any]],
    title_overrides: Optional[Mapping[str, Any]] = None,
) -> Requester:
    """
    Build a requester from authenticated session claims.

    Args:
        claims: Mapping with ``member_id``, either ``role`` (a Role value) or
            ``title`` (an organization title), and optional ``committee_ids``.
            ``None`` or an empty mapping means an anonymous request.
        title_overrides: Extra or replacement title -> role entries; the
            configured ``access.role_titles`` when omitted

    Returns:
        A validated Requester
    """
    if not claims:
        return Requester.anonymous()

    if claims.get("role"):
        role = Role.parse(claims["role"])
    elif claims.get("title"):
        if title_overrides is None:
            # Imported here: memberfiles.core.config loads this package first
            from memberfiles.core.config import get_config
            title_overrides = get_config().access.role_titles
        role = role_for_title(claims["title"], title_overrides)
    else:
        raise MalformedInputError("Claims carry neither a role nor a title")

    return Requester.create(
        role=role,
        member_id=claims.get("member_id"),
        committee_ids=claims.get("committee_ids"),
    )
