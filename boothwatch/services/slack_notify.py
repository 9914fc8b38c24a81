"""
Send booth alerts to a Slack channel via chat.postMessage.
Requires SLACK_BOT_TOKEN in env. If not configured, send() logs and returns False.

Each alert kind (health_update, stale, non_normal_mode) maps to a Block Kit message built by
build_message(); the coordinator only hands over structured fields.
"""
import logging
from datetime import datetime
from typing import Any, Protocol

import httpx

from boothwatch.core.clock import to_utc
from boothwatch.core.constants import ALERT_HEALTH_UPDATE, ALERT_NON_NORMAL_MODE, ALERT_STALE
from boothwatch.core.errors import TransientNotifyError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, kind: str, fields: dict[str, Any]) -> bool:
        ...


def _fmt_time(value: Any) -> str:
    if isinstance(value, datetime):
        return to_utc(value).strftime("%Y-%m-%d %H:%M:%S UTC")
    return str(value) if value is not None else "N/A"


def _field(label: str, value: Any) -> dict[str, str]:
    return {"type": "mrkdwn", "text": f"*{label}:*\n{value}"}


def _header(text: str) -> dict[str, Any]:
    return {"type": "header", "text": {"type": "plain_text", "text": text, "emoji": True}}


def build_message(kind: str, fields: dict[str, Any]) -> tuple[str, list[dict[str, Any]]]:
    """(fallback text, blocks) for an alert kind. Unknown kinds raise ValueError."""
    name = fields.get("booth_name") or "N/A"
    if kind == ALERT_HEALTH_UPDATE:
        title = "📸 Photobooth Health Update"
        blocks = [
            _header(title),
            {
                "type": "section",
                "fields": [
                    _field("Booth ID", fields.get("booth_id")),
                    _field("Name", name),
                    _field("Status", fields.get("status")),
                    _field("Time", _fmt_time(fields.get("created_at"))),
                ],
            },
        ]
        if fields.get("message"):
            blocks.append({"type": "section", "text": {"type": "mrkdwn", "text": f"*Message:*\n{fields['message']}"}})
        return title, blocks
    if kind == ALERT_STALE:
        title = "⚠️ Photobooth Stale Alert"
        return title, [
            _header(title),
            {
                "type": "section",
                "fields": [
                    _field("Name", name),
                    _field("Booth ID", fields.get("booth_id")),
                    _field("Last Ping", _fmt_time(fields.get("last_ping"))),
                    _field("Minutes Since Last Ping", fields.get("minutes_since_last_ping")),
                ],
            },
        ]
    if kind == ALERT_NON_NORMAL_MODE:
        title = "⚠️ Photobooth Non-Normal Mode Alert"
        mode = fields.get("mode")
        hours = float(fields.get("hours_in_mode") or 0.0)
        threshold = fields.get("threshold_hours", 24)
        return title, [
            _header(title),
            {
                "type": "section",
                "fields": [
                    _field("Booth ID", fields.get("booth_id")),
                    _field("Name", name),
                    _field("Current Mode", mode),
                    _field("Hours in Mode", f"{hours:.1f}"),
                ],
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"This booth has been in *{mode}* mode for more than {threshold:g} hours. "
                    "Please check if this is expected.",
                },
            },
        ]
    raise ValueError(f"Unknown alert kind: {kind}")


class SlackNotifier:
    def __init__(
        self,
        token: str,
        channel: str,
        api_url: str = "https://slack.com/api/chat.postMessage",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.token = (token or "").strip()
        self.channel = channel
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.token)

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.token}"}
        if self._client is not None:
            return self._client.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.api_url, json=payload, headers=headers)

    def send(self, kind: str, fields: dict[str, Any]) -> bool:
        """Post one alert. Returns False when Slack is not configured.
        Raises TransientNotifyError when the request fails or Slack rejects it."""
        if not self.configured:
            logger.warning("SLACK_BOT_TOKEN not configured, skipping Slack notification (%s)", kind)
            return False
        text, blocks = build_message(kind, fields)
        try:
            resp = self._post({"channel": self.channel, "text": text, "blocks": blocks})
        except httpx.HTTPError as e:
            raise TransientNotifyError(f"Slack request failed: {e}") from e
        if resp.status_code != 200:
            raise TransientNotifyError(f"Slack returned {resp.status_code}: {resp.text[:200]}")
        try:
            body = resp.json()
        except ValueError as e:
            raise TransientNotifyError("Slack returned a non-JSON body") from e
        if not body.get("ok"):
            raise TransientNotifyError(f"Slack rejected message: {body.get('error')}")
        logger.info("Slack %s notification sent for booth %s", kind, fields.get("booth_id"))
        return True
