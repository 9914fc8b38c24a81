import json
from datetime import timedelta

from boothwatch.models import HealthLog
from boothwatch.services.alerting import SWEEP_STALE

CLOSED_MONDAY = '{"enabled": true, "schedule": [{"day": 2, "start": "09:00", "end": "17:00"}]}'
OPEN_MONDAY = '{"enabled": true, "schedule": [{"day": 1, "start": "09:00", "end": "17:00"}]}'


def mode_json(mode: str) -> str:
    return json.dumps({"mode": mode})


# --- Stale sweep ---


def test_stale_sweep_alerts_silent_booths_within_hours(coordinator, notifier, add_booth):
    add_booth("silent", minutes_ago=45, name="Lobby", operating_hours=OPEN_MONDAY)
    add_booth("fresh", minutes_ago=10)

    result = coordinator.run_stale_sweep()

    assert notifier.booth_ids("stale") == ["silent"]
    fields = notifier.sent[0][1]
    assert fields["booth_name"] == "Lobby"
    assert fields["minutes_since_last_ping"] == 45
    assert result.matched == 1 and result.notified == 1


def test_stale_sweep_uses_its_own_threshold(coordinator, notifier, add_booth):
    # 20 minutes is stale for the dashboard (15) but not for the sweep (30)
    add_booth("b1", minutes_ago=20)
    coordinator.run_stale_sweep()
    assert notifier.sent == []


def test_stale_sweep_skips_booths_outside_operating_hours(coordinator, notifier, add_booth):
    add_booth("closed", minutes_ago=120, operating_hours=CLOSED_MONDAY)
    add_booth("broken-schedule", minutes_ago=120, operating_hours="{not json")

    coordinator.run_stale_sweep()

    # malformed schedule fails open: the booth counts as within hours
    assert notifier.booth_ids("stale") == ["broken-schedule"]


def test_stale_sweep_treats_folder_timezone_as_utc(coordinator, notifier, add_booth):
    add_booth("folder-tz", minutes_ago=60, operating_hours=OPEN_MONDAY, timezone_name="America/Argentina")

    result = coordinator.run_stale_sweep()

    assert notifier.booth_ids("stale") == ["folder-tz"]
    assert result.failed == 0


def test_stale_sweep_continues_past_notifier_failures(coordinator, notifier, add_booth):
    add_booth("a", minutes_ago=60)
    add_booth("b", minutes_ago=60)
    add_booth("c", minutes_ago=60)
    notifier.fail_for.add("b")

    result = coordinator.run_stale_sweep()

    assert sorted(notifier.booth_ids("stale")) == ["a", "c"]
    assert result.failed == 1
    assert result.notified == 2


def test_stale_alert_repeats_every_sweep_without_cooldown(coordinator, notifier, clock, add_booth):
    add_booth("a", minutes_ago=60)
    coordinator.run_stale_sweep()
    clock.advance(minutes=5)
    coordinator.run_stale_sweep()
    assert notifier.booth_ids("stale") == ["a", "a"]


def test_cooldown_suppresses_repeat_alerts(coordinator, notifier, settings, clock, add_booth):
    settings.alert_cooldown_minutes = 30
    add_booth("a", minutes_ago=60)

    coordinator.run_stale_sweep()
    clock.advance(minutes=5)
    second = coordinator.run_stale_sweep()
    clock.advance(minutes=30)
    coordinator.run_stale_sweep()

    assert second.suppressed == 1
    assert notifier.booth_ids("stale") == ["a", "a"]


def test_overlapping_sweep_is_skipped(coordinator, notifier, add_booth):
    add_booth("a", minutes_ago=60)
    nested = []

    def reenter(kind, fields):
        assert coordinator.is_running(SWEEP_STALE)
        nested.append(coordinator.run_stale_sweep())

    notifier.on_send = reenter
    result = coordinator.run_stale_sweep()

    assert result.notified == 1
    assert len(nested) == 1 and nested[0].skipped is True
    assert coordinator.is_running(SWEEP_STALE) is False


# --- Non-normal mode sweep ---


def test_mode_sweep_alerts_after_threshold(coordinator, notifier, add_booth, add_log):
    booth = add_booth("stuck", name="Atrium")
    add_log(booth, hours_ago=40, metadata_json=mode_json("Normal"))
    add_log(booth, hours_ago=30, metadata_json=mode_json("Attract"))
    add_log(booth, hours_ago=1, metadata_json=mode_json("Attract"))

    result = coordinator.run_mode_sweep()

    assert notifier.kinds() == ["non_normal_mode"]
    fields = notifier.sent[0][1]
    assert fields["booth_id"] == "stuck"
    assert fields["mode"] == "Attract"
    assert 29.9 < fields["hours_in_mode"] < 30.1
    assert result.matched == 1


def test_mode_sweep_ignores_short_runs_and_normal_modes(coordinator, notifier, add_booth, add_log):
    short = add_booth("short")
    add_log(short, hours_ago=30, metadata_json=mode_json("Normal"))
    add_log(short, hours_ago=5, metadata_json=mode_json("Attract"))

    normal = add_booth("normal")
    add_log(normal, hours_ago=48, metadata_json=mode_json("Normal"))
    add_log(normal, hours_ago=0, metadata_json=mode_json("Normal"))

    no_meta = add_booth("no-meta")
    add_log(no_meta, hours_ago=48)

    coordinator.run_mode_sweep()
    assert notifier.sent == []


def test_maintenance_counts_as_non_normal(coordinator, notifier, add_booth, add_log):
    booth = add_booth("maint")
    add_log(booth, hours_ago=25, metadata_json=mode_json("Maintenance"))
    coordinator.run_mode_sweep()
    assert notifier.booth_ids("non_normal_mode") == ["maint"]


def test_mode_alert_refires_every_run(coordinator, notifier, clock, add_booth, add_log):
    booth = add_booth("stuck")
    add_log(booth, hours_ago=30, metadata_json=mode_json("Attract"))
    coordinator.run_mode_sweep()
    clock.advance(hours=1)
    coordinator.run_mode_sweep()
    assert notifier.booth_ids("non_normal_mode") == ["stuck", "stuck"]


def test_mode_sweep_continues_past_failures(coordinator, notifier, add_booth, add_log):
    for bid in ("a", "b"):
        booth = add_booth(bid)
        add_log(booth, hours_ago=30, metadata_json=mode_json("Attract"))
    notifier.fail_for.add("a")

    result = coordinator.run_mode_sweep()

    assert notifier.booth_ids() == ["b"]
    assert result.failed == 1


# --- Retention ---


def test_retention_sweep_deletes_old_logs(db, coordinator, add_booth, add_log):
    booth = add_booth("a")
    add_log(booth, hours_ago=24 * 4)
    add_log(booth, hours_ago=24 * 3 + 1)
    keep = add_log(booth, hours_ago=24 * 2)

    result = coordinator.run_retention_sweep()

    assert result.deleted == 2
    db.expire_all()
    assert [log.id for log in db.query(HealthLog).all()] == [keep.id]


# --- Immediate alert ---


def test_notify_health_update_reports_failure_without_raising(coordinator, notifier, add_booth, add_log):
    booth = add_booth("a")
    log = add_log(booth, status="error", message="disk full")
    notifier.fail_for.add("a")
    assert coordinator.notify_health_update(booth, log) is False
    notifier.fail_for.clear()
    assert coordinator.notify_health_update(booth, log) is True
    assert notifier.sent[0][1]["message"] == "disk full"


def test_sweeps_read_the_injected_clock(coordinator, notifier, clock, add_booth):
    add_booth("a", minutes_ago=0)
    coordinator.run_stale_sweep()
    assert notifier.sent == []
    clock.advance(minutes=31)
    coordinator.run_stale_sweep()
    assert notifier.booth_ids() == ["a"]
    assert notifier.sent[0][1]["minutes_since_last_ping"] == 31


def test_last_ping_in_payload_is_the_booth_value(coordinator, notifier, clock, add_booth):
    add_booth("a", minutes_ago=90)
    coordinator.run_stale_sweep()
    last_ping = notifier.sent[0][1]["last_ping"]
    assert last_ping.replace(tzinfo=None) == (clock() - timedelta(minutes=90)).replace(tzinfo=None)
