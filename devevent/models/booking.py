"""
Booking model: one email's reservation for an event.

Key design decisions:
- Unique constraint on (event_id, email) means one booking per person per event
- Separate indexes on event_id and email for "bookings per event" and
  "bookings per user" lookups
- Composite (event_id, created_at) index for chronological per-event listings
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from devevent.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    slug = Column(String(120), nullable=True)
    email = Column(String(320), nullable=False, index=True)

    event = relationship("Event", back_populates="bookings", lazy="noload")

    __table_args__ = (
        UniqueConstraint("event_id", "email", name="uq_booking_event_email"),
        Index("ix_bookings_event_created", "event_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, email={self.email})>"
