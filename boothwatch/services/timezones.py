"""
Resolve booth timezone names to ZoneInfo.

Booths running Windows report names like "Eastern Standard Time". Those are mapped through
WINDOWS_TO_IANA; anything unknown falls back to UTC.
"""
import logging
from datetime import timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

UTC_NAME = "UTC"

WINDOWS_TO_IANA: dict[str, str] = {
    "Eastern Standard Time": "America/New_York",
    "Central Standard Time": "America/Chicago",
    "Mountain Standard Time": "America/Denver",
    "Pacific Standard Time": "America/Los_Angeles",
    "Alaska Standard Time": "America/Anchorage",
    "Hawaiian Standard Time": "Pacific/Honolulu",
    "Atlantic Standard Time": "America/Halifax",
    "Newfoundland Standard Time": "America/St_Johns",
    "Central European Standard Time": "Europe/Budapest",
    "GMT Standard Time": "Europe/London",
    "W. Europe Standard Time": "Europe/Berlin",
    "Romance Standard Time": "Europe/Paris",
    "Russian Standard Time": "Europe/Moscow",
    "Tokyo Standard Time": "Asia/Tokyo",
    "China Standard Time": "Asia/Shanghai",
    "India Standard Time": "Asia/Kolkata",
    "AUS Eastern Standard Time": "Australia/Sydney",
    "Cen. Australia Standard Time": "Australia/Adelaide",
    "AUS Central Standard Time": "Australia/Darwin",
    "E. Australia Standard Time": "Australia/Brisbane",
    "W. Australia Standard Time": "Australia/Perth",
}


def normalize_timezone_name(name: str | None) -> str:
    """IANA name for a booth timezone string. Names containing '/' are taken as IANA already."""
    name = (name or "").strip()
    if not name:
        return UTC_NAME
    if "/" in name:
        return name
    return WINDOWS_TO_IANA.get(name, UTC_NAME)


def resolve_timezone(name: str | None):
    """tzinfo for a booth timezone string; UTC when missing or unrecognized."""
    iana = normalize_timezone_name(name)
    if iana == UTC_NAME:
        return timezone.utc
    try:
        return ZoneInfo(iana)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError covers tz folder names such as "America/Argentina"
        logger.debug("Unknown timezone %r; using UTC", name)
        return timezone.utc
