"""Activity digest module.

Decides, for each group membership, whether the current scheduler tick is a
send moment for its notification cadence and which audit events belong in
its digest.

Features:
- Cadence evaluation with weekday gates and minimum gaps
- Subgroup visibility with a per-run cache
- Audit eligibility filtering grouped by category
- Batch planning across a membership population
"""

from modules.digests.domain import (
    AuditEvent,
    Cadence,
    DigestPlan,
    Group,
    Membership,
    Subgroup,
    SubgroupMembership,
)
from modules.digests.eligibility import categorize_eligible, is_eligible
from modules.digests.planner import NotificationBatchPlanner, effective_cadence
from modules.digests.schedule import is_scheduled_now
from modules.digests.visibility import (
    VisibilityCache,
    can_view,
    managed_subgroups,
    visible_subgroups,
)

__all__ = [
    "AuditEvent",
    "Cadence",
    "DigestPlan",
    "Group",
    "Membership",
    "Subgroup",
    "SubgroupMembership",
    "NotificationBatchPlanner",
    "VisibilityCache",
    "can_view",
    "categorize_eligible",
    "effective_cadence",
    "is_eligible",
    "is_scheduled_now",
    "managed_subgroups",
    "visible_subgroups",
]
