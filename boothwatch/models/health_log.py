"""One row per received ping. Append-only; pruned after HEALTH_LOG_RETENTION_DAYS."""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from boothwatch.db.base import Base


class HealthLog(Base):
    __tablename__ = "health_logs"
    __table_args__ = (Index("ix_health_logs_booth_created", "booth_pk", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    booth_pk = Column(String(36), ForeignKey("booths.id", ondelete="CASCADE"), nullable=False)
    status = Column(Text, nullable=False)  # healthy | warning | error | offline | unknown (not enforced)
    message = Column(Text, nullable=True)
    metadata_json = Column("metadata", Text, nullable=True)  # column name 'metadata' in DB; carries mode/timezone
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    booth = relationship("Booth", back_populates="health_logs")
