"""Persisted state blob model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Text, DateTime

from attendance.db.base import Base


class StateBlob(Base):
    """One named snapshot of the session registry and attendance ledger."""

    __tablename__ = "state_blobs"

    storage_key = Column(String(100), primary_key=True)
    schema_version = Column(Integer, nullable=False)
    payload = Column(Text, nullable=False)  # JSON-encoded StateSnapshot
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )
