"""
Health ping ingestion: the single write path.

Upserts the booth (timezone taken from metadata.timezone when present), appends a health log,
and for error/warning pings fires the immediate Slack alert. The alert is best effort: the ping
is recorded and acknowledged even when notification fails.
"""
import logging
from datetime import datetime
from typing import Any

from boothwatch.core.clock import to_iso
from boothwatch.core.constants import ALERTING_PING_STATUSES
from boothwatch.core.errors import ValidationError
from boothwatch.services.alerting import AlertingCoordinator
from boothwatch.services.parsing import serialize_metadata
from boothwatch.services.store import BoothStore

logger = logging.getLogger(__name__)


def _metadata_timezone(metadata: dict[str, Any] | None) -> str | None:
    if not metadata:
        return None
    tz = metadata.get("timezone")
    if isinstance(tz, str) and tz.strip():
        return tz.strip()
    return None


def ingest_ping(
    store: BoothStore,
    coordinator: AlertingCoordinator,
    booth_id: str | None,
    status: str | None,
    now: datetime,
    name: str | None = None,
    message: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    booth_id = (booth_id or "").strip()
    status = (status or "").strip()
    if not booth_id or not status:
        raise ValidationError("boothId and status are required")

    booth, created = store.upsert_booth(
        booth_id,
        now,
        name=(name or "").strip() or None,
        timezone=_metadata_timezone(metadata),
    )
    log = store.append_health_log(
        booth,
        status,
        now,
        message=message,
        metadata_json=serialize_metadata(metadata),
    )
    logger.info(
        "Health ping received from booth %s: %s%s",
        booth_id,
        status,
        " (new booth)" if created else "",
    )

    if status in ALERTING_PING_STATUSES:
        coordinator.notify_health_update(booth, log)

    return {
        "success": True,
        "message": "Health ping processed",
        "timestamp": to_iso(now),
    }
