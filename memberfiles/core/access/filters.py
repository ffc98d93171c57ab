"""List filter for member files.

``build_filter`` turns a requester into a declarative ``VisibilityFilter``
that can run in memory (it is callable on a ``FileRef``) or be rendered as a
SQLAlchemy clause for the storage query. Both forms are derived from the
same policy table and requirement checks as ``authorize``, so a listing never
shows a file that a direct read would refuse, or hides one it would allow.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from sqlalchemy import and_, false, or_, true

from .authorizer import meets_requirement, resolve_requirement, validate_requester
from .model import FileRef, Requester, Visibility
from .policy import TIER_REQUIREMENTS, VISIBILITY_REQUIREMENTS, Requirement


def _visibilities_for(requirement: Requirement) -> FrozenSet[Visibility]:
    return frozenset(v for v, r in VISIBILITY_REQUIREMENTS.items() if r is requirement)


COMMITTEE_VISIBILITIES = _visibilities_for(Requirement.COMMITTEE_MEMBERSHIP)
OWNER_VISIBILITIES = _visibilities_for(Requirement.OWNERSHIP)


@dataclass(frozen=True)
class VisibilityFilter:
    """
    Which files a requester may see.

    A file matches when any of these holds:
    - ``allow_all`` (admin)
    - its visibility is in ``visibilities`` (tier granted outright)
    - it is committee-scoped and owned by one of ``committee_ids``
    - it is owner-scoped and owned by ``owner_id``
    """

    allow_all: bool = False
    visibilities: FrozenSet[Visibility] = field(default_factory=frozenset)
    committee_ids: FrozenSet[str] = field(default_factory=frozenset)
    owner_id: Optional[str] = None

    def __call__(self, file: FileRef) -> bool:
        resolve_requirement(file)
        if self.allow_all:
            return True
        visibility = Visibility.parse(file.visibility)
        if visibility in self.visibilities:
            return True
        if visibility in COMMITTEE_VISIBILITIES:
            return file.owner_id in self.committee_ids
        if visibility in OWNER_VISIBILITIES:
            return self.owner_id is not None and file.owner_id == self.owner_id
        return False

    def apply(self, files: Iterable[FileRef]) -> List[FileRef]:
        """Filter files in memory."""
        return [f for f in files if self(f)]

    def to_clause(self, model: Any):
        """
        Render the filter as a SQLAlchemy boolean clause.

        Args:
            model: Mapped class (or table columns holder) with ``visibility``
                and ``owner_id`` string columns

        Returns:
            A clause usable in ``Query.filter`` / ``Select.where``
        """
        if self.allow_all:
            return true()

        clauses = []
        if self.visibilities:
            clauses.append(model.visibility.in_(sorted(v.value for v in self.visibilities)))
        if self.committee_ids:
            clauses.append(and_(
                model.visibility.in_(sorted(v.value for v in COMMITTEE_VISIBILITIES)),
                model.owner_id.in_(sorted(self.committee_ids)),
            ))
        if self.owner_id is not None:
            clauses.append(and_(
                model.visibility.in_(sorted(v.value for v in OWNER_VISIBILITIES)),
                model.owner_id == self.owner_id,
            ))

        if not clauses:
            return false()
        return or_(*clauses)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form, for logs and debugging."""
        return {
            "allow_all": self.allow_all,
            "visibilities": sorted(v.value for v in self.visibilities),
            "committee_ids": sorted(self.committee_ids),
            "owner_id": self.owner_id,
        }


def build_filter(requester: Requester) -> VisibilityFilter:
    """Build the listing filter for a requester."""
    validate_requester(requester)

    if requester.is_admin:
        return VisibilityFilter(allow_all=True)

    granted = frozenset(
        visibility
        for visibility, requirement in VISIBILITY_REQUIREMENTS.items()
        if requirement in TIER_REQUIREMENTS and meets_requirement(requirement, requester, None)
    )
    return VisibilityFilter(
        visibilities=granted,
        committee_ids=requester.committee_ids,
        owner_id=requester.member_id,
    )


def get_visibility_filter(requester: Requester) -> VisibilityFilter:
    """Filter to apply when listing files for ``requester``."""
    return build_filter(requester)
