"""Per-membership digest planning.

For each membership the planner answers two questions in order: is this
tick a send moment for its cadence, and if so which audits belong in the
digest, grouped by category. It performs no I/O. Delivering the digest and
persisting ``DigestPlan.new_watermark`` are the caller's job, in that
order.

Usage:
    planner = NotificationBatchPlanner()
    plans = planner.plan_batch(memberships, groups, audits_by_group, now)
    for plan in plans:
        if deliver(plan):
            store.commit_watermark(plan.membership_id, plan.new_watermark)

The planner keeps no state between calls. ``plan`` resolves visibility from
its arguments each time; ``plan_batch`` shares one ``VisibilityCache`` across
the memberships of a single batch and discards it afterwards.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Sequence

from infrastructure.configuration import settings
from infrastructure.logging import get_module_logger
from modules.digests.domain.models import AuditEvent, DigestPlan, Group, Membership
from modules.digests.domain.types import Cadence
from modules.digests.eligibility import categorize_eligible
from modules.digests.schedule import is_scheduled_now
from modules.digests.visibility import VisibilityCache

logger = get_module_logger()


def effective_cadence(membership: Membership, group: Optional[Group]) -> Cadence:
    """The membership's own cadence, else its group's default."""
    if membership.notification_schedule is not None:
        return Cadence.parse(membership.notification_schedule)
    if group is None:
        return Cadence.UNRECOGNIZED
    return Cadence.parse(group.default_notification_schedule)


class NotificationBatchPlanner:
    """Decides, per membership, whether and what to notify.

    Args:
        send_empty_digests: Return a plan even when nothing is eligible.
            Defaults to ``settings.digests.send_empty_digests``.
        skip_suspended: Leave suspended memberships out of ``plan_batch``.
            Defaults to ``settings.digests.skip_suspended``.
        max_workers: Threads used by ``plan_batch``. Defaults to
            ``settings.digests.max_workers``.
    """

    def __init__(
        self,
        send_empty_digests: Optional[bool] = None,
        skip_suspended: Optional[bool] = None,
        max_workers: Optional[int] = None,
    ):
        self.send_empty_digests = (
            settings.digests.send_empty_digests
            if send_empty_digests is None
            else send_empty_digests
        )
        self.skip_suspended = (
            settings.digests.skip_suspended if skip_suspended is None else skip_suspended
        )
        self.max_workers = max_workers or settings.digests.max_workers

    def plan(
        self,
        membership: Membership,
        group: Group,
        candidate_audits: Sequence[AuditEvent],
        now: datetime,
        visibility: Optional[VisibilityCache] = None,
    ) -> Optional[DigestPlan]:
        """Plan one membership's digest for this tick.

        Args:
            visibility: Cache to resolve subgroup visibility through. Only
                share one across calls that see the same membership data;
                a fresh cache is used when omitted.

        Returns:
            None when the cadence does not fire now, or when nothing is
            eligible and empty digests are disabled. Otherwise a DigestPlan
            whose watermark is ``now``.
        """
        if visibility is None:
            visibility = VisibilityCache()
        return self._plan(membership, group, candidate_audits, now, visibility)

    def _plan(
        self,
        membership: Membership,
        group: Group,
        candidate_audits: Sequence[AuditEvent],
        now: datetime,
        visibility: VisibilityCache,
    ) -> Optional[DigestPlan]:
        cadence = effective_cadence(membership, group)

        if not is_scheduled_now(cadence, now, membership.last_notification):
            logger.debug(
                "digest_skipped",
                membership_id=membership.id,
                cadence=cadence.value,
                reason="not_scheduled",
            )
            return None

        categorized = categorize_eligible(
            membership, group, candidate_audits, now, visibility=visibility
        )
        if not categorized and not self.send_empty_digests:
            logger.debug(
                "digest_skipped",
                membership_id=membership.id,
                cadence=cadence.value,
                reason="nothing_eligible",
            )
            return None

        plan = DigestPlan(
            membership_id=membership.id,
            categorized=categorized,
            new_watermark=now,
            cadence=cadence,
        )
        logger.debug(
            "digest_planned",
            membership_id=membership.id,
            cadence=cadence.value,
            audit_count=plan.audit_count,
            categories=list(categorized),
        )
        return plan

    def plan_batch(
        self,
        memberships: Iterable[Membership],
        groups: Mapping[str, Group],
        audits_by_group: Mapping[str, Sequence[AuditEvent]],
        now: datetime,
        max_workers: Optional[int] = None,
    ) -> List[DigestPlan]:
        """Plan every membership of a sweep.

        Suspended memberships are skipped when ``skip_suspended`` is set.
        Memberships whose group is not in ``groups`` are skipped with a
        warning. Plans come back in membership input order regardless of
        the worker count.
        """
        visibility = VisibilityCache()
        workers = max_workers or self.max_workers

        targets = []
        for membership in memberships:
            if self.skip_suspended and membership.suspended:
                continue
            group = groups.get(membership.group_id)
            if group is None:
                logger.warning(
                    "digest_group_missing",
                    membership_id=membership.id,
                    group_id=membership.group_id,
                )
                continue
            targets.append((membership, group))

        def _run(target):
            membership, group = target
            return self._plan(
                membership,
                group,
                audits_by_group.get(group.id, ()),
                now,
                visibility,
            )

        if workers > 1 and len(targets) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(_run, targets))
        else:
            results = [_run(target) for target in targets]

        plans = [plan for plan in results if plan is not None]
        logger.info(
            "digest_batch_planned",
            memberships=len(targets),
            plans=len(plans),
            workers=workers,
        )
        return plans
