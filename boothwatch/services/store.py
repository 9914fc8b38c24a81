"""
Persistent store for booths and health logs over a SQLAlchemy Session.

Every operation touches single rows (or one bulk delete); no cross-row transactions are needed.
Methods commit their own writes.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from boothwatch.models.booth import Booth
from boothwatch.models.health_log import HealthLog

logger = logging.getLogger(__name__)


class BoothStore:
    def __init__(self, db: Session):
        self.db = db

    # --- Booths ---

    def find_booth_by_id(self, id: str) -> Booth | None:
        return self.db.get(Booth, id)

    def find_booth_by_external_id(self, booth_id: str) -> Booth | None:
        return self.db.query(Booth).filter(Booth.booth_id == booth_id).first()

    def create_booth(self, booth_id: str, name: str | None, now: datetime, timezone: str | None = None) -> Booth:
        booth = Booth(
            booth_id=booth_id,
            name=name,
            timezone=timezone,
            last_ping=now,
            created_at=now,
            updated_at=now,
        )
        self.db.add(booth)
        self.db.commit()
        self.db.refresh(booth)
        return booth

    def upsert_booth(
        self,
        booth_id: str,
        now: datetime,
        name: str | None = None,
        timezone: str | None = None,
    ) -> tuple[Booth, bool]:
        """Create on first sight, else bump last_ping. Timezone is overwritten only when given.
        Returns (booth, created)."""
        booth = self.find_booth_by_external_id(booth_id)
        if booth is None:
            return self.create_booth(booth_id, name, now, timezone=timezone), True
        booth.last_ping = now
        booth.updated_at = now
        if timezone:
            booth.timezone = timezone
        self.db.commit()
        self.db.refresh(booth)
        return booth, False

    def save_booth(self, booth: Booth, now: datetime) -> Booth:
        booth.updated_at = now
        self.db.commit()
        self.db.refresh(booth)
        return booth

    def list_booths(self) -> list[Booth]:
        """All booths, most recently pinged first."""
        return self.db.query(Booth).order_by(Booth.last_ping.desc()).all()

    def list_booths_pinged_before(self, cutoff: datetime) -> list[Booth]:
        return self.db.query(Booth).filter(Booth.last_ping < cutoff).all()

    # --- Health logs ---

    def append_health_log(
        self,
        booth: Booth,
        status: str,
        now: datetime,
        message: str | None = None,
        metadata_json: str | None = None,
    ) -> HealthLog:
        log = HealthLog(
            booth_pk=booth.id,
            status=status,
            message=message,
            metadata_json=metadata_json,
            created_at=now,
        )
        self.db.add(log)
        self.db.commit()
        self.db.refresh(log)
        return log

    def latest_health_log(self, booth: Booth) -> HealthLog | None:
        return (
            self.db.query(HealthLog)
            .filter(HealthLog.booth_pk == booth.id)
            .order_by(HealthLog.created_at.desc(), HealthLog.id.desc())
            .first()
        )

    def list_health_logs(self, booth: Booth, limit: int | None = None) -> list[HealthLog]:
        """Health logs for a booth, newest first."""
        q = (
            self.db.query(HealthLog)
            .filter(HealthLog.booth_pk == booth.id)
            .order_by(HealthLog.created_at.desc(), HealthLog.id.desc())
        )
        if limit is not None:
            q = q.limit(limit)
        return q.all()

    def delete_health_logs_older_than(self, cutoff: datetime) -> int:
        deleted = (
            self.db.query(HealthLog)
            .filter(HealthLog.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
