"""Audit eligibility: may this membership be notified about this event?

An audit is eligible for a membership when all of the following hold:

1. its subgroup has not been deleted;
2. it is not manager-only, or the membership manages the group;
3. it was created no later than ``now``;
4. it was created strictly after the membership's last notification;
5. the membership can view the audit's subgroup (unscoped audits are
   visible to everyone).
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from modules.digests.domain.models import AuditEvent, Group, Membership
from modules.digests.schedule import to_utc
from modules.digests.visibility import VisibilityCache, can_view


def is_eligible(
    membership: Membership,
    group: Group,
    audit: AuditEvent,
    now: datetime,
    visibility: Optional[VisibilityCache] = None,
) -> bool:
    if audit.deleted_subgroup:
        return False
    if audit.only_managers and not membership.manager:
        return False

    created_at = to_utc(audit.created_at)
    if created_at > to_utc(now):
        return False
    if (
        membership.last_notification is not None
        and created_at <= to_utc(membership.last_notification)
    ):
        return False

    if visibility is not None:
        return visibility.can_view(membership, group, audit.subgroup_id)
    return can_view(membership, group, audit.subgroup_id)


def categorize_eligible(
    membership: Membership,
    group: Group,
    audits: Iterable[AuditEvent],
    now: datetime,
    visibility: Optional[VisibilityCache] = None,
) -> Dict[str, List[Any]]:
    """Group the ids of eligible audits by category.

    Ids keep input order and categories appear in first-seen order.
    Categories with no eligible audit are left out entirely.
    """
    if visibility is None:
        # One resolution for the whole call instead of one per audit.
        visibility = VisibilityCache()

    categorized: Dict[str, List[Any]] = {}
    for audit in audits:
        if is_eligible(membership, group, audit, now, visibility=visibility):
            categorized.setdefault(audit.category, []).append(audit.id)
    return categorized
