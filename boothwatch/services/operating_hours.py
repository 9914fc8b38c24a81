"""
Operating hours: the weekly schedule a booth is expected to be up.

Schedule entries use day 0=Sunday and zero-padded "HH:MM" strings (end may be "24:00"); an entry
matches when the booth-local time falls in [start, end]. No overnight wrap: start > end never matches.
"""
import logging
from datetime import datetime

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from boothwatch.services.parsing import Parsed
from boothwatch.services.timezones import resolve_timezone

logger = logging.getLogger(__name__)

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
# "24:00" closes a day at midnight; it sorts after every other HH:MM
END_PATTERN = r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$"


class ScheduleEntry(BaseModel):
    day: int = Field(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    start: str = Field(..., pattern=HHMM_PATTERN)
    end: str = Field(..., pattern=END_PATTERN)


class OperatingHours(BaseModel):
    enabled: bool = False
    schedule: list[ScheduleEntry] = Field(default_factory=list)

    @property
    def always_on(self) -> bool:
        return not self.enabled or not self.schedule


DEFAULT_OPERATING_HOURS = OperatingHours()


def parse_operating_hours(raw: str | None) -> Parsed[OperatingHours]:
    """Parse the booths.operating_hours column. Empty column -> success with None (always on)."""
    if not raw:
        return Parsed.success(None)
    try:
        return Parsed.success(OperatingHours.model_validate_json(raw))
    except PydanticValidationError as e:
        return Parsed.failure(f"operating hours invalid: {e.error_count()} error(s)")


def serialize_operating_hours(hours: OperatingHours) -> str:
    return hours.model_dump_json()


def local_day_and_time(now: datetime, timezone_name: str | None) -> tuple[int, str]:
    """(day with Sunday=0, "HH:MM") of `now` in the booth's timezone."""
    local = now.astimezone(resolve_timezone(timezone_name))
    return (local.weekday() + 1) % 7, local.strftime("%H:%M")


def is_within_operating_hours(
    hours: OperatingHours | None,
    timezone_name: str | None,
    now: datetime,
) -> bool:
    if hours is None or hours.always_on:
        return True
    day, hhmm = local_day_and_time(now, timezone_name)
    for entry in hours.schedule:
        if entry.day == day and entry.start <= hhmm <= entry.end:
            return True
    return False


def evaluate_stored_hours(raw: str | None, timezone_name: str | None, now: datetime) -> bool:
    """Evaluate a serialized schedule. Malformed data fails open (always on)."""
    parsed = parse_operating_hours(raw)
    if not parsed.ok:
        logger.debug("Treating booth as always on: %s", parsed.error)
        return True
    return is_within_operating_hours(parsed.value, timezone_name, now)
