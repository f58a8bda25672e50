"""
Event model.

Key design decisions:
- `slug` is derived from `title` by the repository and is unique
- `date`/`time` are stored as canonical strings (YYYY-MM-DD, HH:MM) so the
  value shown is exactly the value the organizer meant, with no timezone math
- Index on `created_at` backs the newest-first listing
- Composite index on (date, mode) backs filtered listings
"""

from sqlalchemy import JSON, CheckConstraint, Column, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from devevent.db.base import Base, TimestampMixin

EVENT_MODES = ("online", "offline", "hybrid")

JSONList = JSON().with_variant(JSONB(), "postgresql")


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    description = Column(String(1000), nullable=False)
    overview = Column(String(500), nullable=False)
    image = Column(String(2048), nullable=False)
    venue = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)
    time = Column(String(5), nullable=False)
    mode = Column(String(10), nullable=False)
    audience = Column(String(255), nullable=False)
    agenda = Column(JSONList, nullable=False)
    organizer = Column(String(255), nullable=False)
    tags = Column(JSONList, nullable=False)

    bookings = relationship("Booking", back_populates="event", lazy="noload")

    __table_args__ = (
        CheckConstraint("mode IN ('online', 'offline', 'hybrid')", name="check_event_mode"),
        Index("ix_events_created_at", "created_at"),
        Index("ix_events_date_mode", "date", "mode"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug}, date={self.date} {self.time})>"
