import json
from datetime import datetime, timezone

import httpx
import pytest

from boothwatch.core.errors import TransientNotifyError
from boothwatch.services.slack_notify import SlackNotifier, build_message

WHEN = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def field_texts(blocks):
    return [f["text"] for b in blocks for f in b.get("fields", [])]


def test_health_update_message_includes_optional_message():
    text, blocks = build_message(
        "health_update",
        {"booth_id": "b1", "booth_name": None, "status": "error", "message": "printer jam", "created_at": WHEN},
    )
    assert "Health Update" in text
    assert "*Name:*\nN/A" in field_texts(blocks)
    assert "*Time:*\n2024-01-01 10:00:00 UTC" in field_texts(blocks)
    assert blocks[-1]["text"]["text"] == "*Message:*\nprinter jam"


def test_stale_message_fields():
    _, blocks = build_message(
        "stale", {"booth_id": "b1", "booth_name": "Lobby", "last_ping": WHEN, "minutes_since_last_ping": 42}
    )
    assert "*Minutes Since Last Ping:*\n42" in field_texts(blocks)


def test_non_normal_mode_message_rounds_hours():
    _, blocks = build_message(
        "non_normal_mode", {"booth_id": "b1", "booth_name": "Lobby", "mode": "Attract", "hours_in_mode": 30.04}
    )
    assert "*Hours in Mode:*\n30.0" in field_texts(blocks)
    assert "*Attract* mode for more than 24 hours" in blocks[-1]["text"]["text"]


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        build_message("bogus", {})


def test_unconfigured_notifier_skips():
    assert SlackNotifier(token="", channel="health-alerts").send("stale", {"booth_id": "b1"}) is False


def _notifier(handler) -> SlackNotifier:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SlackNotifier(token="xoxb-test", channel="health-alerts", client=client)


def test_send_posts_to_channel():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    assert _notifier(handler).send("stale", {"booth_id": "b1", "minutes_since_last_ping": 31}) is True
    assert seen["auth"] == "Bearer xoxb-test"
    assert seen["body"]["channel"] == "health-alerts"
    assert seen["body"]["blocks"][0]["type"] == "header"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"ok": False, "error": "channel_not_found"}),
        httpx.Response(500, text="oops"),
        httpx.Response(200, text="not json"),
    ],
)
def test_send_raises_transient_error_on_rejection(response):
    with pytest.raises(TransientNotifyError):
        _notifier(lambda request: response).send("stale", {"booth_id": "b1"})


def test_send_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    with pytest.raises(TransientNotifyError):
        _notifier(handler).send("stale", {"booth_id": "b1"})
