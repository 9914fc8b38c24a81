"""
Alerting coordinator: fleet-wide sweeps plus the immediate ping-triggered alert.

One instance is built at startup (see main.py) with its collaborators: a session factory for
the store, a Notifier, the Settings and a clock. The scheduler calls the sweeps; ingestion calls
notify_health_update.

- Stale sweep: booths silent longer than SWEEP_STALE_THRESHOLD_MINUTES while inside operating hours.
- Mode sweep: booths continuously in a non-Normal/Unknown mode for MODE_ALERT_THRESHOLD_HOURS.
- Retention sweep: deletes health logs older than HEALTH_LOG_RETENTION_DAYS.

A notifier failure for one booth is logged and the sweep moves on to the next booth.
Each sweep holds its own non-blocking lock: if the previous run of the same sweep is still
active, the new run is skipped. ALERT_COOLDOWN_MINUTES > 0 suppresses re-sending the same
(kind, booth) alert inside the window; 0 re-sends on every sweep.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from sqlalchemy.orm import Session

from boothwatch.config import Settings
from boothwatch.core.clock import Clock, utc_now
from boothwatch.core.constants import ALERT_HEALTH_UPDATE, ALERT_NON_NORMAL_MODE, ALERT_STALE
from boothwatch.core.errors import TransientNotifyError
from boothwatch.models.booth import Booth
from boothwatch.models.health_log import HealthLog
from boothwatch.services.mode_duration import hours_in_mode, tracks_mode
from boothwatch.services.operating_hours import evaluate_stored_hours
from boothwatch.services.parsing import metadata_mode
from boothwatch.services.slack_notify import Notifier
from boothwatch.services.status import minutes_since
from boothwatch.services.store import BoothStore

logger = logging.getLogger(__name__)

SWEEP_STALE = "stale"
SWEEP_MODE = "non_normal_mode"
SWEEP_RETENTION = "retention"


@dataclass
class SweepResult:
    name: str
    checked: int = 0
    matched: int = 0
    notified: int = 0
    failed: int = 0
    suppressed: int = 0
    deleted: int = 0
    skipped: bool = False


class AlertingCoordinator:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: Notifier,
        settings: Settings,
        clock: Clock = utc_now,
    ):
        self.session_factory = session_factory
        self.notifier = notifier
        self.settings = settings
        self.clock = clock
        self._sweep_locks = {
            SWEEP_STALE: threading.Lock(),
            SWEEP_MODE: threading.Lock(),
            SWEEP_RETENTION: threading.Lock(),
        }
        self._last_sent: dict[tuple[str, str], datetime] = {}
        self._last_sent_lock = threading.Lock()

    # --- Sweep plumbing ---

    def is_running(self, sweep: str) -> bool:
        return self._sweep_locks[sweep].locked()

    def _run_guarded(self, sweep: str, body: Callable[[BoothStore, datetime, SweepResult], None]) -> SweepResult:
        lock = self._sweep_locks[sweep]
        if not lock.acquire(blocking=False):
            logger.warning("%s sweep still running from a previous tick; skipping this run", sweep)
            return SweepResult(name=sweep, skipped=True)
        result = SweepResult(name=sweep)
        try:
            db = self.session_factory()
            try:
                body(BoothStore(db), self.clock(), result)
            except Exception as e:
                logger.exception("%s sweep failed: %s", sweep, e)
                db.rollback()
            finally:
                db.close()
        finally:
            lock.release()
        logger.debug("%s sweep done: %s", sweep, result)
        return result

    def _cooldown_elapsed(self, kind: str, booth_id: str, now: datetime) -> bool:
        window = self.settings.alert_cooldown_minutes
        if window <= 0:
            return True
        with self._last_sent_lock:
            last = self._last_sent.get((kind, booth_id))
        return last is None or now - last >= timedelta(minutes=window)

    def _record_sent(self, kind: str, booth_id: str, now: datetime) -> None:
        if self.settings.alert_cooldown_minutes <= 0:
            return
        with self._last_sent_lock:
            self._last_sent[(kind, booth_id)] = now

    def _send(self, kind: str, fields: dict[str, Any]) -> bool | None:
        """Notifier call with failures logged. Returns None on failure."""
        try:
            return self.notifier.send(kind, fields)
        except TransientNotifyError as e:
            logger.warning("Notification %s for booth %s failed: %s", kind, fields.get("booth_id"), e)
        except Exception as e:
            logger.exception("Notification %s for booth %s failed: %s", kind, fields.get("booth_id"), e)
        return None

    def _dispatch(self, kind: str, booth: Booth, fields: dict[str, Any], now: datetime, result: SweepResult) -> None:
        if not self._cooldown_elapsed(kind, booth.booth_id, now):
            result.suppressed += 1
            return
        sent = self._send(kind, fields)
        if sent is None:
            result.failed += 1
        elif sent:
            result.notified += 1
            self._record_sent(kind, booth.booth_id, now)

    # --- Stale sweep ---

    def run_stale_sweep(self) -> SweepResult:
        return self._run_guarded(SWEEP_STALE, self._stale_sweep)

    def _stale_sweep(self, store: BoothStore, now: datetime, result: SweepResult) -> None:
        cutoff = now - timedelta(minutes=self.settings.sweep_stale_threshold_minutes)
        for booth in store.list_booths_pinged_before(cutoff):
            result.checked += 1
            try:
                within_hours = evaluate_stored_hours(booth.operating_hours, booth.timezone, now)
                logger.debug("Booth %s within operating hours: %s", booth.booth_id, within_hours)
                if not within_hours:
                    continue
                minutes = minutes_since(booth.last_ping, now)
                result.matched += 1
                logger.warning("Stale booth detected: %s (%s minutes since last ping)", booth.booth_id, minutes)
                self._dispatch(
                    ALERT_STALE,
                    booth,
                    {
                        "booth_name": booth.name,
                        "booth_id": booth.booth_id,
                        "last_ping": booth.last_ping,
                        "minutes_since_last_ping": minutes,
                    },
                    now,
                    result,
                )
            except Exception as e:
                result.failed += 1
                logger.exception("Stale check for booth %s failed (sweep continues): %s", booth.booth_id, e)

    # --- Non-normal mode sweep ---

    def run_mode_sweep(self) -> SweepResult:
        return self._run_guarded(SWEEP_MODE, self._mode_sweep)

    def _mode_sweep(self, store: BoothStore, now: datetime, result: SweepResult) -> None:
        threshold = self.settings.mode_alert_threshold_hours
        for booth in store.list_booths():
            result.checked += 1
            try:
                latest = store.latest_health_log(booth)
                mode = metadata_mode(latest.metadata_json) if latest is not None else None
                if not tracks_mode(mode):
                    continue
                hours = hours_in_mode(store.list_health_logs(booth), mode, now)
                if hours is None or hours < threshold:
                    continue
                result.matched += 1
                logger.warning("Non-normal mode detected: %s in %s mode for %.1f hours", booth.booth_id, mode, hours)
                self._dispatch(
                    ALERT_NON_NORMAL_MODE,
                    booth,
                    {
                        "booth_id": booth.booth_id,
                        "booth_name": booth.name,
                        "mode": mode,
                        "hours_in_mode": hours,
                        "threshold_hours": threshold,
                    },
                    now,
                    result,
                )
            except Exception as e:
                result.failed += 1
                logger.exception("Mode check for booth %s failed (sweep continues): %s", booth.booth_id, e)

    # --- Retention sweep ---

    def run_retention_sweep(self) -> SweepResult:
        return self._run_guarded(SWEEP_RETENTION, self._retention_sweep)

    def _retention_sweep(self, store: BoothStore, now: datetime, result: SweepResult) -> None:
        days = self.settings.health_log_retention_days
        result.deleted = store.delete_health_logs_older_than(now - timedelta(days=days))
        if result.deleted > 0:
            logger.info("Cleaned up %s health log(s) older than %s days", result.deleted, days)

    # --- Immediate alert from ingestion ---

    def notify_health_update(self, booth: Booth, log: HealthLog) -> bool:
        """Send the health-update alert for an error/warning ping. Ignores operating hours.
        Never raises; returns whether the notifier reported success."""
        sent = self._send(
            ALERT_HEALTH_UPDATE,
            {
                "booth_id": booth.booth_id,
                "booth_name": booth.name,
                "status": log.status,
                "message": log.message,
                "created_at": log.created_at,
            },
        )
        return bool(sent)
