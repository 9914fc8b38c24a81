"""
Clock helpers. Services take a Clock so tests can pin "now".

SQLite hands back naive datetimes even for DateTime(timezone=True) columns; to_utc
treats naive values as UTC so comparisons against an aware "now" are safe.
"""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return to_utc(dt).isoformat()
