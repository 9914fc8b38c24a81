"""
How long a booth has continuously reported its current mode.

Recomputed from the retained health logs on every call (no stored "entered mode at").
Cost is bounded by HEALTH_LOG_RETENTION_DAYS; if retention grows, persist the mode-entry time
on the booth instead.
"""
from datetime import datetime
from typing import Iterable

from boothwatch.core.clock import to_utc
from boothwatch.core.constants import ORDINARY_MODES, SECONDS_PER_HOUR
from boothwatch.models.health_log import HealthLog
from boothwatch.services.parsing import parse_metadata


def tracks_mode(mode: str | None) -> bool:
    """Only non-empty, non-Normal, non-Unknown modes are tracked."""
    return bool(mode) and mode not in ORDINARY_MODES


def oldest_contiguous_log(logs_newest_first: Iterable[HealthLog], current_mode: str) -> HealthLog | None:
    """Oldest log of the run of current_mode at the newest end of history.

    Logs without metadata or with unparseable metadata are skipped, not treated as a boundary.
    """
    oldest = None
    for log in logs_newest_first:
        parsed = parse_metadata(log.metadata_json)
        if not parsed.ok or parsed.value is None:
            continue
        if parsed.value.get("mode") == current_mode:
            oldest = log
        else:
            break
    return oldest


def hours_in_mode(
    logs_newest_first: Iterable[HealthLog],
    current_mode: str | None,
    now: datetime,
) -> float | None:
    if not tracks_mode(current_mode):
        return None
    oldest = oldest_contiguous_log(logs_newest_first, current_mode)
    if oldest is None:
        return None
    return (to_utc(now) - to_utc(oldest.created_at)).total_seconds() / SECONDS_PER_HOUR
