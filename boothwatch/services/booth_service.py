"""
Operator-facing booth operations: list with derived status, create, rename, edit operating hours.
"""
import logging
from datetime import datetime
from typing import Any

from boothwatch.core.clock import to_iso
from boothwatch.core.constants import MODE_MAINTENANCE, MODE_UNKNOWN
from boothwatch.core.errors import ConflictError, NotFoundError, ValidationError
from boothwatch.models.booth import Booth
from boothwatch.models.health_log import HealthLog
from boothwatch.services.operating_hours import (
    DEFAULT_OPERATING_HOURS,
    OperatingHours,
    is_within_operating_hours,
    parse_operating_hours,
    serialize_operating_hours,
)
from boothwatch.services.parsing import metadata_mode
from boothwatch.services.status import DerivedStatus, resolve_status
from boothwatch.services.store import BoothStore

logger = logging.getLogger(__name__)


def derive_booth_status(
    booth: Booth,
    latest: HealthLog | None,
    now: datetime,
    threshold_minutes: int,
) -> tuple[DerivedStatus, str, OperatingHours]:
    """(derived status, display mode, effective operating hours) for one booth."""
    parsed = parse_operating_hours(booth.operating_hours)
    if not parsed.ok:
        logger.debug("Booth %s has malformed operating hours; treating as always on: %s", booth.booth_id, parsed.error)
    hours = parsed.value if parsed.ok else None
    mode = metadata_mode(latest.metadata_json) if latest is not None else None
    derived = resolve_status(
        last_ping=booth.last_ping,
        latest_status=latest.status if latest is not None else None,
        latest_mode=mode,
        within_hours=is_within_operating_hours(hours, booth.timezone, now),
        now=now,
        threshold_minutes=threshold_minutes,
    )
    return derived, mode or MODE_UNKNOWN, hours or DEFAULT_OPERATING_HOURS


def booth_payload(
    booth: Booth,
    latest: HealthLog | None,
    now: datetime,
    threshold_minutes: int,
) -> dict[str, Any]:
    derived, mode, hours = derive_booth_status(booth, latest, now, threshold_minutes)
    return {
        "id": booth.id,
        "boothId": booth.booth_id,
        "name": booth.name,
        "status": derived.status,
        "mode": mode,
        "timezone": booth.timezone,
        "operatingHours": hours.model_dump(),
        "lastPing": to_iso(booth.last_ping),
        "minutesSinceLastPing": derived.minutes_since_last_ping,
        "isStale": derived.is_stale,
        "isMaintenance": mode == MODE_MAINTENANCE,
        "isWithinOperatingHours": derived.is_within_operating_hours,
        "hasIssue": derived.has_issue,
        "message": latest.message if latest is not None else None,
    }


def list_booths(store: BoothStore, now: datetime, threshold_minutes: int, issues_only: bool = False) -> list[dict[str, Any]]:
    """All booths, most recently pinged first. issues_only keeps the "booths with issues" subset."""
    out = []
    for booth in store.list_booths():
        payload = booth_payload(booth, store.latest_health_log(booth), now, threshold_minutes)
        if issues_only and not payload["hasIssue"]:
            continue
        out.append(payload)
    return out


def _get_booth(store: BoothStore, id: str) -> Booth:
    booth = store.find_booth_by_id(id)
    if booth is None:
        raise NotFoundError("Booth not found")
    return booth


def create_booth(store: BoothStore, booth_id: str, name: str | None, now: datetime) -> Booth:
    booth_id = (booth_id or "").strip()
    if not booth_id:
        raise ValidationError("boothId is required")
    if store.find_booth_by_external_id(booth_id) is not None:
        raise ConflictError(f"Booth {booth_id} already exists")
    booth = store.create_booth(booth_id, (name or "").strip() or None, now)
    logger.info("Created booth %s", booth_id)
    return booth


def rename_booth(store: BoothStore, id: str, name: str | None, now: datetime) -> Booth:
    booth = _get_booth(store, id)
    booth.name = (name or "").strip() or None
    return store.save_booth(booth, now)


def update_operating_hours(store: BoothStore, id: str, hours: OperatingHours, now: datetime) -> Booth:
    booth = _get_booth(store, id)
    booth.operating_hours = serialize_operating_hours(hours)
    return store.save_booth(booth, now)
