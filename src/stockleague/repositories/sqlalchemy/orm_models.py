"""SQLAlchemy ORM model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text

from stockleague.repositories.sqlalchemy.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordORM(Base):
    """One keyed record of a partition; the payload is a JSON document."""

    __tablename__ = "records"

    partition = Column(String(32), primary_key=True)
    key = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
