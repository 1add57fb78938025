"""Cadence evaluation: is this tick a send moment for a membership?

Each cadence is a set of eligible weekdays plus a minimum gap since the
last notification. Weekdays are numbered 0=Sunday through 6=Saturday.

| Cadence        | Weekdays  | Minimum gap |
|----------------|-----------|-------------|
| DAILY          | Mon-Fri   | none        |
| TWICE_WEEKLY   | Tue, Thu  | 2 days      |
| ONCE_WEEKLY    | Wed       | 6 days      |
| TWICE_MONTHLY  | Wed       | 13 days     |

NEVER, UNRECOGNIZED and None are never scheduled.
"""

from datetime import datetime, timedelta
from typing import Dict, FrozenSet, NamedTuple, Optional

from modules.digests.domain.models import to_utc
from modules.digests.domain.types import Cadence

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)


class CadenceRule(NamedTuple):
    weekdays: FrozenSet[int]
    minimum_gap: Optional[timedelta]


CADENCE_RULES: Dict[Cadence, CadenceRule] = {
    # No gap: sends on every eligible weekday the sweep runs.
    Cadence.DAILY: CadenceRule(
        frozenset({MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY}), None
    ),
    Cadence.TWICE_WEEKLY: CadenceRule(
        frozenset({TUESDAY, THURSDAY}), timedelta(days=2)
    ),
    Cadence.ONCE_WEEKLY: CadenceRule(frozenset({WEDNESDAY}), timedelta(days=6)),
    Cadence.TWICE_MONTHLY: CadenceRule(frozenset({WEDNESDAY}), timedelta(days=13)),
}


def weekday(now: datetime, localized: bool = False) -> int:
    """Weekday of ``now`` with Sunday as 0.

    Unless ``localized`` is set, ``now`` is converted to UTC first.
    """
    moment = now if localized else to_utc(now)
    return moment.isoweekday() % 7


def eligible_weekdays(cadence: Optional[Cadence]) -> FrozenSet[int]:
    rule = CADENCE_RULES.get(cadence)
    return rule.weekdays if rule else frozenset()


def minimum_gap(cadence: Optional[Cadence]) -> Optional[timedelta]:
    rule = CADENCE_RULES.get(cadence)
    return rule.minimum_gap if rule else None


def is_scheduled_now(
    cadence: Optional[Cadence],
    now: datetime,
    last_notification: Optional[datetime] = None,
    localized: bool = False,
) -> bool:
    """Decide whether ``now`` is a valid send moment for ``cadence``.

    Args:
        cadence: The effective cadence. Unknown or unset never schedules.
        now: The current tick.
        last_notification: Watermark of the last confirmed digest, if any.
        localized: Use ``now``'s own weekday instead of converting to UTC.

    Returns:
        True iff the weekday is eligible and either there is no previous
        notification or at least the cadence's minimum gap has elapsed. A
        ``last_notification`` in the future yields a negative gap and so
        reads as "not yet due".
    """
    rule = CADENCE_RULES.get(cadence)
    if rule is None:
        return False
    if weekday(now, localized=localized) not in rule.weekdays:
        return False
    if rule.minimum_gap is None or last_notification is None:
        return True
    return to_utc(now) - to_utc(last_notification) >= rule.minimum_gap
