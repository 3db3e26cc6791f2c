"""SQLAlchemy models for TrackLife."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime

from .database import Base


class StorageSlot(Base):
    """One named slot of the key-value namespace, holding a serialized collection."""

    __tablename__ = "storage_slots"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<StorageSlot(key='{self.key}', size={len(self.value or '')})>"
