"""Shared fixtures for the digest engine tests."""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import pytest

from modules.digests.domain.models import (
    AuditEvent,
    Group,
    Membership,
    SubgroupMembership,
)
from modules.digests.domain.types import Cadence

# Wednesday 2025-01-08, 00:00 UTC
WEDNESDAY = datetime(2025, 1, 8, tzinfo=timezone.utc)


@pytest.fixture
def wednesday():
    return WEDNESDAY


@pytest.fixture
def group_factory():
    """Factory for creating Group test instances.

    Usage:
        group = group_factory(visible_subgroup_ids={"sg-public"})
    """

    def _factory(
        id: str = "group-1",
        default_notification_schedule: Cadence = Cadence.ONCE_WEEKLY,
        visible_subgroup_ids: Iterable[str] = (),
        subgroups: tuple = (),
    ) -> Group:
        return Group(
            id=id,
            default_notification_schedule=default_notification_schedule,
            visible_subgroup_ids=frozenset(visible_subgroup_ids),
            subgroups=subgroups,
        )

    return _factory


@pytest.fixture
def membership_factory():
    """Factory for creating Membership test instances.

    Usage:
        membership = membership_factory(
            manager=True,
            subgroups={"sg-1": False, "sg-2": True},
        )

    ``subgroups`` maps subgroup id to that record's manager flag.
    """

    def _factory(
        id: str = "m-1",
        group_id: str = "group-1",
        manager: bool = False,
        suspended: bool = False,
        notification_schedule: Optional[Cadence] = None,
        last_notification: Optional[datetime] = None,
        subgroups: Optional[dict] = None,
    ) -> Membership:
        return Membership(
            id=id,
            group_id=group_id,
            manager=manager,
            suspended=suspended,
            notification_schedule=notification_schedule,
            last_notification=last_notification,
            subgroup_memberships=tuple(
                SubgroupMembership(subgroup_id=sid, manager=is_manager)
                for sid, is_manager in (subgroups or {}).items()
            ),
        )

    return _factory


@pytest.fixture
def audit_factory():
    """Factory for creating AuditEvent test instances.

    Defaults to an unscoped "posts" audit created one hour before
    WEDNESDAY.
    """

    def _factory(
        id: Any = 1,
        category: str = "posts",
        created_at: datetime = datetime(2025, 1, 7, 23, tzinfo=timezone.utc),
        subgroup_id: Optional[str] = None,
        only_managers: bool = False,
        deleted_subgroup: bool = False,
    ) -> AuditEvent:
        return AuditEvent(
            id=id,
            category=category,
            created_at=created_at,
            subgroup_id=subgroup_id,
            only_managers=only_managers,
            deleted_subgroup=deleted_subgroup,
        )

    return _factory
