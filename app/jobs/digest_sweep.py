"""Daily activity digest sweep.

Loads the membership population from a ``DigestSource``, plans every
membership with ``NotificationBatchPlanner``, and hands each plan to a
``DigestSink``. Planning and committing are separate steps: a watermark is
committed only after the sink confirms delivery, so a failed delivery
leaves the membership eligible for the same audits on its next send
moment.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from infrastructure.configuration import settings
from infrastructure.logging import bind_run_context, get_module_logger
from modules.digests import (
    AuditEvent,
    DigestPlan,
    Group,
    Membership,
    NotificationBatchPlanner,
)
from modules.digests.schedule import to_utc

logger = get_module_logger()


class DigestSource(Protocol):
    """Read side of the membership store and audit log."""

    def memberships(self) -> Iterable[Membership]: ...

    def groups(self) -> Iterable[Group]: ...

    def audits_for_group(
        self, group_id: str, since: datetime
    ) -> Sequence[AuditEvent]: ...


class DigestSink(Protocol):
    """Delivery transport plus the membership watermark store."""

    def deliver(self, plan: DigestPlan) -> bool: ...

    def commit_watermark(self, membership_id: str, watermark: datetime) -> None: ...


@dataclass
class SweepResult:
    correlation_id: str
    now: datetime
    planned: List[str] = field(default_factory=list)
    committed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def audit_window_start(
    memberships: Iterable[Membership], now: datetime, lookback_days: int
) -> datetime:
    """Earliest audit time any of ``memberships`` could still be owed.

    That is the oldest watermark in the group, or ``now - lookback_days``
    when some membership has never been notified.
    """
    floor = to_utc(now) - timedelta(days=lookback_days)
    watermarks = []
    for membership in memberships:
        if membership.last_notification is None:
            return floor
        watermarks.append(to_utc(membership.last_notification))
    return min(watermarks) if watermarks else floor


def load_candidate_audits(
    source: DigestSource,
    memberships: Sequence[Membership],
    now: datetime,
    lookback_days: int,
) -> Dict[str, Sequence[AuditEvent]]:
    by_group: Dict[str, List[Membership]] = {}
    for membership in memberships:
        by_group.setdefault(membership.group_id, []).append(membership)

    return {
        group_id: source.audits_for_group(
            group_id, audit_window_start(members, now, lookback_days)
        )
        for group_id, members in by_group.items()
    }


def commit_plans(
    sink: DigestSink, plans: Iterable[DigestPlan], result: SweepResult
) -> SweepResult:
    """Deliver each plan, then commit its watermark once delivery is confirmed."""
    for plan in plans:
        try:
            delivered = sink.deliver(plan)
        except Exception as e:
            logger.exception(
                "digest_delivery_failed",
                membership_id=plan.membership_id,
                error=str(e),
            )
            result.failed.append(plan.membership_id)
            continue

        if not delivered:
            logger.warning("digest_delivery_rejected", membership_id=plan.membership_id)
            result.failed.append(plan.membership_id)
            continue

        try:
            sink.commit_watermark(plan.membership_id, plan.new_watermark)
        except Exception as e:
            logger.exception(
                "digest_watermark_commit_failed",
                membership_id=plan.membership_id,
                error=str(e),
            )
            result.failed.append(plan.membership_id)
            continue
        result.committed.append(plan.membership_id)
    return result


def run_digest_sweep(
    source: DigestSource,
    sink: DigestSink,
    now: Optional[datetime] = None,
    planner: Optional[NotificationBatchPlanner] = None,
) -> SweepResult:
    """Plan, deliver and commit digests for every membership of ``source``."""
    now = now or datetime.now(timezone.utc)
    planner = planner or NotificationBatchPlanner()

    with bind_run_context(run_type="digest_sweep") as correlation_id:
        result = SweepResult(correlation_id=correlation_id, now=now)
        logger.info("digest_sweep_started", now=now.isoformat())

        memberships = [
            m
            for m in source.memberships()
            if not (planner.skip_suspended and m.suspended)
        ]
        groups: Mapping[str, Group] = {g.id: g for g in source.groups()}
        audits_by_group = load_candidate_audits(
            source, memberships, now, settings.digests.lookback_days
        )

        plans = planner.plan_batch(memberships, groups, audits_by_group, now)
        result.planned = [plan.membership_id for plan in plans]
        commit_plans(sink, plans, result)

        logger.info(
            "digest_sweep_completed",
            memberships=len(memberships),
            planned=len(result.planned),
            committed=len(result.committed),
            failed=len(result.failed),
        )
        return result
