from boothwatch.db.base import Base
from boothwatch.db.session import engine, SessionLocal
from boothwatch.db.tables import ALL_TABLE_NAMES

__all__ = ["engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
