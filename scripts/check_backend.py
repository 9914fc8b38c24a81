#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from the project root:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

project_dir = Path(__file__).resolve().parent.parent
os.chdir(project_dir)
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))


def main():
    errors = []

    # 1) .env
    env_file = project_dir / ".env"
    if not env_file.exists():
        errors.append(".env missing. Set DATABASE_URL, API_KEY and SLACK_BOT_TOKEN.")
    else:
        print("OK  .env exists")

    # 2) Settings that the running service needs
    from boothwatch.config import settings

    if not settings.api_key:
        errors.append("API_KEY not set: booths will get 500 'API_KEY not configured' on every ping.")
        print("FAIL API_KEY")
    else:
        print("OK  API_KEY set")
    if not settings.slack_bot_token:
        print("WARN SLACK_BOT_TOKEN not set: alerts are logged but not sent")
    else:
        print(f"OK  Slack alerts go to #{settings.slack_channel}")

    # 3) DB connection and tables
    try:
        from sqlalchemy import inspect, text
        from boothwatch.db.session import engine
        from boothwatch.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names())
        if missing:
            errors.append(f"Tables missing: {sorted(missing)}. Run: alembic upgrade head")
            print("FAIL Tables missing:", sorted(missing))
        else:
            print("OK  Tables exist")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 4) App import (catches missing deps, bad imports)
    try:
        from boothwatch.main import app  # noqa: F401
        print("OK  App import (boothwatch.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn boothwatch.main:app --host 0.0.0.0 --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
