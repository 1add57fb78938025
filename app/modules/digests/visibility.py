"""Subgroup visibility for memberships.

A membership sees a subgroup when the group makes it visible to everyone,
or when the membership has its own subgroup membership record for it.

The module-level functions are uncached. Batch callers should hold a
``VisibilityCache`` for the duration of one batch so both sets are resolved
once per membership rather than once per candidate audit.
"""

from threading import Lock
from typing import Dict, FrozenSet, NamedTuple, Optional

from modules.digests.domain.models import Group, Membership


class ResolvedVisibility(NamedTuple):
    visible: FrozenSet[str]
    managed: FrozenSet[str]


def visible_subgroups(membership: Membership, group: Group) -> FrozenSet[str]:
    """Globally visible subgroups of ``group`` plus the membership's own."""
    own = {sm.subgroup_id for sm in membership.subgroup_memberships}
    return frozenset(group.visible_subgroup_ids) | own


def managed_subgroups(membership: Membership) -> FrozenSet[str]:
    """Subgroups whose subgroup membership record carries the manager flag."""
    return frozenset(
        sm.subgroup_id for sm in membership.subgroup_memberships if sm.manager
    )


def can_view(
    membership: Membership, group: Group, subgroup_id: Optional[str]
) -> bool:
    """True for unscoped content, or content in a visible subgroup."""
    if subgroup_id is None:
        return True
    return subgroup_id in visible_subgroups(membership, group)


class VisibilityCache:
    """Per-batch cache of resolved visibility keyed by membership id.

    Entries are computed from immutable inputs, so concurrent workers may
    race to fill the same key without harm; the lock only keeps the dict
    consistent. An entry is never refreshed, so a cache must not outlive the
    membership data it was filled from.
    """

    def __init__(self):
        self._entries: Dict[str, ResolvedVisibility] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, membership: Membership, group: Group) -> ResolvedVisibility:
        entry = self._entries.get(membership.id)
        if entry is not None:
            return entry
        entry = ResolvedVisibility(
            visible=visible_subgroups(membership, group),
            managed=managed_subgroups(membership),
        )
        with self._lock:
            return self._entries.setdefault(membership.id, entry)

    def visible_subgroups(self, membership: Membership, group: Group) -> FrozenSet[str]:
        return self.resolve(membership, group).visible

    def managed_subgroups(self, membership: Membership) -> FrozenSet[str]:
        """Managed set from the cached entry, or computed directly if absent."""
        entry = self._entries.get(membership.id)
        if entry is not None:
            return entry.managed
        return managed_subgroups(membership)

    def can_view(
        self, membership: Membership, group: Group, subgroup_id: Optional[str]
    ) -> bool:
        if subgroup_id is None:
            return True
        return subgroup_id in self.resolve(membership, group).visible

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
