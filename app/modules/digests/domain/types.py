"""Closed enumerations used by the digest engine."""

from enum import Enum
from typing import Any


class Cadence(str, Enum):
    """Recurrence rule controlling how often a membership receives a digest.

    ``UNRECOGNIZED`` stands in for any stored value that does not map to a
    known cadence; it is never scheduled.
    """

    DAILY = "daily"
    TWICE_WEEKLY = "twice_weekly"
    ONCE_WEEKLY = "once_weekly"
    TWICE_MONTHLY = "twice_monthly"
    NEVER = "never"
    UNRECOGNIZED = "unrecognized"

    @property
    def label(self) -> str:
        """Human-readable schedule label shown in membership settings."""
        return _LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> "Cadence":
        """Resolve a member, stored value, member name or label to a Cadence.

        Matching ignores case and surrounding whitespace. Anything that does
        not match resolves to ``UNRECOGNIZED``; this never raises.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNRECOGNIZED
        key = value.strip().lower()
        return _LOOKUP.get(key, cls.UNRECOGNIZED)


_LABELS = {
    Cadence.DAILY: "Once a day",
    Cadence.TWICE_WEEKLY: "Twice a week",
    Cadence.ONCE_WEEKLY: "Once a week",
    Cadence.TWICE_MONTHLY: "Twice a month",
    Cadence.NEVER: "Never",
    Cadence.UNRECOGNIZED: "Unrecognized",
}

_LOOKUP = {}
for _cadence in Cadence:
    if _cadence is Cadence.UNRECOGNIZED:
        continue
    _LOOKUP[_cadence.value] = _cadence
    _LOOKUP[_cadence.name.lower()] = _cadence
    _LOOKUP[_LABELS[_cadence].lower()] = _cadence
