"""Health pings from booths. Authenticated by the shared X-API-Key, not per-booth credentials."""
import hmac
import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, Field

from boothwatch.api.deps import get_coordinator, get_now, get_settings, get_store
from boothwatch.config import Settings
from boothwatch.core.errors import AuthError, BoothWatchError, ConfigurationError, domain_error_to_http
from boothwatch.services.alerting import AlertingCoordinator
from boothwatch.services.ingestion import ingest_ping
from boothwatch.services.store import BoothStore

router = APIRouter()
logger = logging.getLogger(__name__)


class HealthPingBody(BaseModel):
    # Optional here so a missing field is reported as 400 by ingestion, not 422
    booth_id: str | None = Field(None, alias="boothId", max_length=128)
    name: str | None = Field(None, max_length=256)
    status: str | None = None
    message: str | None = None
    metadata: dict[str, Any] | None = None


def _check_api_key(settings: Settings, api_key: str | None) -> None:
    if not settings.api_key:
        raise ConfigurationError("API_KEY not configured")
    if not api_key or not hmac.compare_digest(api_key.encode(), settings.api_key.encode()):
        raise AuthError("Invalid API key")


@router.post("/health/ping")
def ping(
    body: HealthPingBody,
    x_api_key: str | None = Header(None, alias="X-API-Key"),
    store: BoothStore = Depends(get_store),
    coordinator: AlertingCoordinator = Depends(get_coordinator),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> dict[str, Any]:
    """Record one health ping. Error/warning pings also alert Slack (best effort)."""
    try:
        _check_api_key(settings, x_api_key)
        return ingest_ping(
            store,
            coordinator,
            booth_id=body.booth_id,
            status=body.status,
            now=now,
            name=body.name,
            message=body.message,
            metadata=body.metadata,
        )
    except BoothWatchError as e:
        if isinstance(e, AuthError):
            logger.warning("Rejected health ping for booth %s: %s", body.booth_id, e.detail)
        raise domain_error_to_http(e)
