"""Activity digest feature settings."""

import re

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings

_SWEEP_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class DigestFeatureSettings(FeatureSettings):
    """Configuration for activity digest planning and the daily sweep.

    Environment Variables:
        DIGEST_SEND_EMPTY: Send a digest even when no audit is eligible
        DIGEST_SKIP_SUSPENDED: Exclude suspended memberships from the sweep
        DIGEST_MAX_WORKERS: Worker threads used to plan one sweep
        DIGEST_SWEEP_TIME: Daily time (HH:MM, scheduler process local time)
            at which the sweep runs
        DIGEST_LOOKBACK_DAYS: Audit window used when a group has a member
            that was never notified

    Example:
        ```python
        from infrastructure.configuration import settings

        if settings.digests.send_empty_digests:
            # Deliver "nothing new" digests...
        ```
    """

    send_empty_digests: bool = Field(
        default=False,
        alias="DIGEST_SEND_EMPTY",
        description="Send a digest even when no audit is eligible",
    )
    skip_suspended: bool = Field(
        default=True,
        alias="DIGEST_SKIP_SUSPENDED",
        description="Exclude suspended memberships from the sweep",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        alias="DIGEST_MAX_WORKERS",
        description="Worker threads used to plan one sweep",
    )
    sweep_time: str = Field(
        default="13:00",
        alias="DIGEST_SWEEP_TIME",
        description="Daily sweep time in HH:MM (scheduler process local time)",
    )
    lookback_days: int = Field(
        default=31,
        ge=1,
        alias="DIGEST_LOOKBACK_DAYS",
        description="Audit window for memberships that were never notified",
    )

    @field_validator("sweep_time", mode="before")
    @classmethod
    def _validate_sweep_time(cls, v):
        """Accept HH:MM only; the scheduler rejects anything else at runtime."""
        s = str(v).strip()
        if not _SWEEP_TIME_PATTERN.match(s):
            raise ValueError(f"DIGEST_SWEEP_TIME must be HH:MM, got: {v!r}")
        return s
