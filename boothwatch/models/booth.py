"""Registered photo booth. booth_id is the external id the device reports; id is internal."""
import uuid

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from boothwatch.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Booth(Base):
    __tablename__ = "booths"

    id = Column(String(36), primary_key=True, default=_new_id)
    booth_id = Column(String(128), nullable=False, unique=True, index=True)
    name = Column(String(256), nullable=True)
    timezone = Column(Text, nullable=True)  # IANA or Windows name, e.g. "Eastern Standard Time"
    operating_hours = Column(Text, nullable=True)  # serialized OperatingHours; parse via services.operating_hours
    last_ping = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    health_logs = relationship(
        "HealthLog",
        back_populates="booth",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
