#!/usr/bin/env python3
"""
Run one alerting sweep now, outside the scheduler (e.g. after an outage or to test Slack).
Run: python scripts/run_sweep.py stale|mode|retention [--dry-run]

--dry-run logs what would be sent instead of posting to Slack.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from boothwatch.config import settings
from boothwatch.db.session import SessionLocal
from boothwatch.services.alerting import AlertingCoordinator
from boothwatch.services.slack_notify import SlackNotifier


class _PrintNotifier:
    def send(self, kind: str, fields: dict[str, Any]) -> bool:
        print(f"[dry-run] {kind}: {fields}")
        return True


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("sweep", choices=["stale", "mode", "retention"])
    parser.add_argument("--dry-run", action="store_true", help="Print alerts instead of sending to Slack")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    notifier = _PrintNotifier() if args.dry_run else SlackNotifier(
        token=settings.slack_bot_token,
        channel=settings.slack_channel,
        api_url=settings.slack_api_url,
        timeout=settings.slack_timeout_seconds,
    )
    coordinator = AlertingCoordinator(SessionLocal, notifier, settings)
    run = {
        "stale": coordinator.run_stale_sweep,
        "mode": coordinator.run_mode_sweep,
        "retention": coordinator.run_retention_sweep,
    }[args.sweep]
    result = run()
    print(
        f"Done. checked={result.checked} matched={result.matched} notified={result.notified} "
        f"failed={result.failed} deleted={result.deleted}"
    )
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
