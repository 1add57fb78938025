"""Domain layer - data models and enumerations."""

from modules.digests.domain.models import (
    AuditEvent,
    DigestPlan,
    Group,
    Membership,
    Subgroup,
    SubgroupMembership,
)
from modules.digests.domain.types import Cadence

__all__ = [
    "AuditEvent",
    "Cadence",
    "DigestPlan",
    "Group",
    "Membership",
    "Subgroup",
    "SubgroupMembership",
]
