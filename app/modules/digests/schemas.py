"""Inbound record contracts for the digest engine.

Collaborators (the membership store and the audit log) hand records to the
engine as plain mappings. These Pydantic models validate them, accept the
collaborators' camelCase field names, and convert them to the domain
dataclasses via ``to_domain()``.

Cadence fields never fail validation: unknown values resolve to
``Cadence.UNRECOGNIZED`` so that configuration gaps end up as "never
scheduled" instead of a rejected record.
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)

from modules.digests.domain.models import (
    AuditEvent,
    Group,
    Membership,
    Subgroup,
    SubgroupMembership,
)
from modules.digests.domain.types import Cadence
from modules.digests.schedule import to_utc


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _as_str_id(v: Any) -> Any:
    if isinstance(v, (int, str)) and not isinstance(v, bool):
        return str(v)
    return v


StrId = Annotated[str, BeforeValidator(_as_str_id)]
UtcDatetime = Annotated[datetime, AfterValidator(to_utc)]


class SubgroupMembershipRecord(_Record):
    """Schema for a subgroup membership join record."""

    subgroup_id: Annotated[
        StrId,
        Field(
            ...,
            alias="subgroupId",
            min_length=1,
            json_schema_extra={"example": "sg-42"},
        ),
    ]
    manager: bool = False

    def to_domain(self) -> SubgroupMembership:
        return SubgroupMembership(subgroup_id=self.subgroup_id, manager=self.manager)


class SubgroupRecord(_Record):
    """Schema for a subgroup of a group."""

    id: Annotated[StrId, Field(..., min_length=1)]
    group_id: Annotated[StrId, Field(..., alias="groupId", min_length=1)]
    identifier: Optional[str] = None
    deleted: bool = False

    def to_domain(self) -> Subgroup:
        return Subgroup(
            id=self.id,
            group_id=self.group_id,
            identifier=self.identifier,
            deleted=self.deleted,
        )


class GroupRecord(_Record):
    """Schema for a group as loaded from the membership store."""

    id: Annotated[
        StrId, Field(..., min_length=1, json_schema_extra={"example": "group-123"})
    ]
    default_notification_schedule: Annotated[
        Cadence,
        Field(
            alias="defaultNotificationSchedule",
            description="Cadence inherited by memberships without their own",
        ),
    ] = Cadence.NEVER
    visible_subgroup_ids: Annotated[
        List[str],
        Field(
            default_factory=list,
            alias="globallyVisibleSubgroupIds",
            description="Subgroups visible to every member of the group",
        ),
    ]
    subgroups: List[SubgroupRecord] = Field(default_factory=list)

    @field_validator("default_notification_schedule", mode="before")
    @classmethod
    def _parse_cadence(cls, v: Any) -> Cadence:
        return Cadence.parse(v)

    @field_validator("visible_subgroup_ids", mode="before")
    @classmethod
    def _coerce_visible_ids(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple, set, frozenset)):
            return [_as_str_id(item) for item in v]
        return v

    def to_domain(self) -> Group:
        return Group(
            id=self.id,
            default_notification_schedule=self.default_notification_schedule,
            visible_subgroup_ids=frozenset(self.visible_subgroup_ids),
            subgroups=tuple(s.to_domain() for s in self.subgroups),
        )


class MembershipRecord(_Record):
    """Schema for a membership and its subgroup memberships."""

    id: Annotated[
        StrId, Field(..., min_length=1, json_schema_extra={"example": "m-1001"})
    ]
    group_id: Annotated[StrId, Field(..., alias="groupId", min_length=1)]
    manager: bool = False
    suspended: bool = False
    notification_schedule: Annotated[
        Optional[Cadence],
        Field(
            alias="notificationSchedule",
            description="Own cadence; null inherits the group default",
        ),
    ] = None
    last_notification: Annotated[
        Optional[UtcDatetime],
        Field(
            alias="lastNotification",
            json_schema_extra={"example": "2025-01-08T13:00:00+00:00"},
        ),
    ] = None
    subgroup_memberships: Annotated[
        List[SubgroupMembershipRecord],
        Field(default_factory=list, alias="subgroupMemberships"),
    ]

    @field_validator("notification_schedule", mode="before")
    @classmethod
    def _parse_cadence(cls, v: Any) -> Optional[Cadence]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return Cadence.parse(v)

    def to_domain(self) -> Membership:
        return Membership(
            id=self.id,
            group_id=self.group_id,
            manager=self.manager,
            suspended=self.suspended,
            notification_schedule=self.notification_schedule,
            last_notification=self.last_notification,
            subgroup_memberships=tuple(
                sm.to_domain() for sm in self.subgroup_memberships
            ),
        )


class AuditEventRecord(_Record):
    """Schema for a candidate audit event from the audit log."""

    id: Annotated[Union[int, str], Field(..., json_schema_extra={"example": 501})]
    category: Annotated[
        str, Field(..., min_length=1, json_schema_extra={"example": "posts"})
    ]
    subgroup_id: Annotated[
        Optional[StrId], Field(alias="subgroupId")
    ] = None
    only_managers: Annotated[bool, Field(alias="onlyManagers")] = False
    created_at: Annotated[UtcDatetime, Field(..., alias="createdAt")]
    deleted_subgroup: Annotated[
        bool, Field(alias="deletedSubgroup")
    ] = False

    def to_domain(self, group: Optional[Group] = None) -> AuditEvent:
        """Convert to an AuditEvent.

        When ``group`` has its subgroups loaded, a reference to a subgroup
        that is missing or deleted there also marks the audit as
        ``deleted_subgroup``.
        """
        deleted = self.deleted_subgroup
        if (
            not deleted
            and self.subgroup_id is not None
            and group is not None
            and group.subgroups
        ):
            deleted = not group.has_live_subgroup(self.subgroup_id)
        return AuditEvent(
            id=self.id,
            category=self.category,
            created_at=self.created_at,
            subgroup_id=self.subgroup_id,
            only_managers=self.only_managers,
            deleted_subgroup=deleted,
        )
