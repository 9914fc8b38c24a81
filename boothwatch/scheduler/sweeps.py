"""
Wire the coordinator's sweeps onto a BackgroundScheduler.

Stale sweep every STALE_SWEEP_INTERVAL_MINUTES, mode sweep every MODE_SWEEP_INTERVAL_MINUTES,
retention daily at RETENTION_SWEEP_HOUR. Cadences are independent of the thresholds the sweeps
apply. max_instances=1 is a second line of defence; the coordinator already skips a sweep
whose previous run is still active.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from boothwatch.config import Settings
from boothwatch.core.constants import MODE_SWEEP_JOB_ID, RETENTION_SWEEP_JOB_ID, STALE_SWEEP_JOB_ID
from boothwatch.services.alerting import AlertingCoordinator

logger = logging.getLogger(__name__)


def build_scheduler(coordinator: AlertingCoordinator, settings: Settings) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        coordinator.run_stale_sweep,
        "interval",
        minutes=settings.stale_sweep_interval_minutes,
        id=STALE_SWEEP_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        coordinator.run_mode_sweep,
        "interval",
        minutes=settings.mode_sweep_interval_minutes,
        id=MODE_SWEEP_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        coordinator.run_retention_sweep,
        "cron",
        hour=settings.retention_sweep_hour,
        minute=0,
        id=RETENTION_SWEEP_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    logger.info(
        "Sweeps scheduled: stale every %sm, mode every %sm, retention daily at %02d:00 UTC",
        settings.stale_sweep_interval_minutes,
        settings.mode_sweep_interval_minutes,
        settings.retention_sweep_hour,
    )
    return scheduler
