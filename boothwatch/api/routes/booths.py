"""
Operator booth API: list with derived status, create, rename, edit operating hours.

GET /booths?issues=true returns only booths that need attention (stale or warning while
inside operating hours, or any error).
"""
import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from boothwatch.api.deps import get_now, get_settings, get_store
from boothwatch.config import Settings
from boothwatch.core.clock import to_iso
from boothwatch.core.errors import BoothWatchError, domain_error_to_http
from boothwatch.services import booth_service
from boothwatch.services.operating_hours import DEFAULT_OPERATING_HOURS, OperatingHours, parse_operating_hours
from boothwatch.services.store import BoothStore

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateBoothBody(BaseModel):
    booth_id: str = Field(..., alias="boothId", min_length=1, max_length=128)
    name: str | None = Field(None, max_length=256)


class RenameBoothBody(BaseModel):
    name: str | None = Field(None, max_length=256)


class OperatingHoursBody(BaseModel):
    operating_hours: OperatingHours = Field(..., alias="operatingHours")


def _summary(booth) -> dict[str, Any]:
    parsed = parse_operating_hours(booth.operating_hours)
    hours = parsed.value if parsed.ok and parsed.value is not None else DEFAULT_OPERATING_HOURS
    return {
        "id": booth.id,
        "boothId": booth.booth_id,
        "name": booth.name,
        "timezone": booth.timezone,
        "operatingHours": hours.model_dump(),
        "lastPing": to_iso(booth.last_ping),
    }


@router.get("/booths")
def list_booths(
    issues: bool = Query(False, description="Only booths with issues"),
    store: BoothStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> list[dict[str, Any]]:
    return booth_service.list_booths(store, now, settings.stale_threshold_minutes, issues_only=issues)


@router.post("/booths", status_code=201)
def create_booth(
    body: CreateBoothBody,
    store: BoothStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> dict[str, Any]:
    try:
        booth = booth_service.create_booth(store, body.booth_id, body.name, now)
    except BoothWatchError as e:
        raise domain_error_to_http(e)
    return _summary(booth)


@router.put("/booths/{id}")
def rename_booth(
    id: str,
    body: RenameBoothBody,
    store: BoothStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> dict[str, Any]:
    try:
        booth = booth_service.rename_booth(store, id, body.name, now)
    except BoothWatchError as e:
        raise domain_error_to_http(e)
    return _summary(booth)


@router.put("/booths/{id}/operating-hours")
def update_operating_hours(
    id: str,
    body: OperatingHoursBody,
    store: BoothStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> dict[str, Any]:
    try:
        booth = booth_service.update_operating_hours(store, id, body.operating_hours, now)
    except BoothWatchError as e:
        raise domain_error_to_http(e)
    return _summary(booth)
