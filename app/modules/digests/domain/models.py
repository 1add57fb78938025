"""Domain models for the digest engine.

Lightweight frozen dataclasses (not Pydantic) describing the facts the
engine evaluates. They do NOT validate at runtime; inbound collaborator
records are validated by ``modules.digests.schemas`` and converted here.

Key distinctions:
  - models.py: Internal structures the engine computes over (dataclasses)
  - schemas.py: Inbound record contracts with Pydantic (full validation)
  - types.py: Closed enumerations (Cadence)

None of these objects carry cached state. Per-run caches live in
``modules.digests.visibility.VisibilityCache``.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from modules.digests.domain.types import Cadence


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class SubgroupMembership:
    """Join record between a membership and one subgroup of its group.

    Attributes:
        subgroup_id: The subgroup this record grants access to.
        manager: Whether the membership manages this subgroup. Independent
            of the group-level manager flag.
    """

    subgroup_id: str
    manager: bool = False


@dataclass(frozen=True)
class Subgroup:
    id: str
    group_id: str
    identifier: Optional[str] = None
    deleted: bool = False


@dataclass(frozen=True)
class Group:
    """A group with its default cadence and globally visible subgroups.

    Attributes:
        id: The unique identifier of the group.
        default_notification_schedule: Cadence inherited by memberships that
            have none of their own.
        visible_subgroup_ids: Subgroups every member can see without an
            explicit subgroup membership.
        subgroups: Known subgroups of the group, if loaded.
    """

    id: str
    default_notification_schedule: Cadence = Cadence.NEVER
    visible_subgroup_ids: FrozenSet[str] = frozenset()
    subgroups: Tuple[Subgroup, ...] = ()

    def has_live_subgroup(self, subgroup_id: str) -> bool:
        """True if ``subgroup_id`` is a loaded, non-deleted subgroup."""
        return any(s.id == subgroup_id and not s.deleted for s in self.subgroups)


@dataclass(frozen=True)
class Membership:
    """One user's participation in one group.

    Attributes:
        id: The unique identifier of the membership.
        group_id: The group this membership belongs to.
        manager: Whether the membership manages the group.
        suspended: Whether the membership is suspended.
        notification_schedule: Own cadence; None inherits the group default.
        last_notification: Watermark of the last confirmed digest.
        subgroup_memberships: Explicit subgroup join records.
    """

    id: str
    group_id: str
    manager: bool = False
    suspended: bool = False
    notification_schedule: Optional[Cadence] = None
    last_notification: Optional[datetime] = None
    subgroup_memberships: Tuple[SubgroupMembership, ...] = ()

    @property
    def active(self) -> bool:
        return not self.suspended

    @property
    def member_status(self) -> str:
        return "manager" if self.manager else "member"

    @property
    def role(self) -> str:
        """Display label combining the suspended and manager flags."""
        if self.suspended:
            return "Suspended (Manager)" if self.manager else "Suspended"
        return "Manager" if self.manager else "Member"

    @property
    def subgroup_ids(self) -> List[str]:
        return [sm.subgroup_id for sm in self.subgroup_memberships]

    def last_notified_before(self, time: datetime) -> bool:
        """True if never notified or last notified strictly before ``time``."""
        if self.last_notification is None:
            return True
        return to_utc(self.last_notification) < to_utc(time)


@dataclass(frozen=True)
class AuditEvent:
    """A read-only activity event from the external audit log.

    Attributes:
        id: The unique identifier of the audit.
        category: Opaque category key used to group digest entries.
        created_at: When the audited activity happened.
        subgroup_id: Subgroup the activity is scoped to, if any.
        only_managers: Restrict the event to group managers.
        deleted_subgroup: The scoped subgroup no longer exists.
    """

    id: Any
    category: str
    created_at: datetime
    subgroup_id: Optional[str] = None
    only_managers: bool = False
    deleted_subgroup: bool = False


@dataclass(frozen=True)
class DigestPlan:
    """Per-membership planner output.

    The caller delivers ``categorized`` and, only once delivery is
    confirmed, persists ``new_watermark`` as the membership's
    ``last_notification``.

    Attributes:
        membership_id: The membership the digest is for.
        categorized: Category to audit ids, in input order, no empty lists.
        new_watermark: The single value to persist after delivery.
        cadence: Effective cadence that made this tick a send moment.
    """

    membership_id: str
    categorized: Dict[str, List[Any]]
    new_watermark: datetime
    cadence: Cadence = Cadence.UNRECOGNIZED

    @property
    def is_empty(self) -> bool:
        return not self.categorized

    @property
    def audit_count(self) -> int:
        return sum(len(ids) for ids in self.categorized.values())

    def to_payload(self) -> Dict[str, Any]:
        """Return a JSON-serializable dict for rendering and persistence."""
        return {
            "membership_id": self.membership_id,
            "categorized": {k: list(v) for k, v in self.categorized.items()},
            "new_watermark": self.new_watermark.isoformat(),
            "cadence": self.cadence.value,
        }
