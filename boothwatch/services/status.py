"""
Derive a booth's display status from its last ping, latest health log and operating hours.

Precedence (first match wins): Maintenance mode, outside operating hours (expected offline),
stale, then the raw status of the latest log.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from boothwatch.core.clock import to_utc
from boothwatch.core.constants import (
    MODE_MAINTENANCE,
    SECONDS_PER_MINUTE,
    STATUS_ERROR,
    STATUS_MAINTENANCE,
    STATUS_OFFLINE,
    STATUS_STALE,
    STATUS_UNKNOWN,
    STATUS_WARNING,
)


@dataclass(frozen=True)
class DerivedStatus:
    status: str
    is_stale: bool
    is_within_operating_hours: bool
    minutes_since_last_ping: int

    @property
    def has_issue(self) -> bool:
        """Needs attention: stale while expected up, any error, or a warning while expected up.
        Stale outside operating hours is expected offline, not an issue."""
        return (
            (self.is_stale and self.is_within_operating_hours)
            or self.status == STATUS_ERROR
            or (self.status == STATUS_WARNING and self.is_within_operating_hours)
        )


def minutes_since(last_ping: datetime, now: datetime) -> int:
    """Whole minutes between last_ping and now; 0 when the ping is in the future (clock skew)."""
    seconds = (to_utc(now) - to_utc(last_ping)).total_seconds()
    return max(0, math.floor(seconds / SECONDS_PER_MINUTE))


def is_stale(last_ping: datetime, now: datetime, threshold_minutes: int) -> bool:
    return to_utc(last_ping) < to_utc(now) - timedelta(minutes=threshold_minutes)


def resolve_status(
    last_ping: datetime,
    latest_status: str | None,
    latest_mode: str | None,
    within_hours: bool,
    now: datetime,
    threshold_minutes: int,
) -> DerivedStatus:
    stale = is_stale(last_ping, now, threshold_minutes)
    if latest_mode == MODE_MAINTENANCE:
        status = STATUS_MAINTENANCE
    elif not within_hours:
        status = STATUS_OFFLINE
    elif stale:
        status = STATUS_STALE
    else:
        status = latest_status or STATUS_UNKNOWN
    return DerivedStatus(
        status=status,
        is_stale=stale,
        is_within_operating_hours=within_hours,
        minutes_since_last_ping=minutes_since(last_ping, now),
    )
