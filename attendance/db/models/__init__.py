"""Database models."""
from attendance.db.models.state_blob import StateBlob

__all__ = ["StateBlob"]
