"""
Booking repository.

The event-existence check and the insert are two statements, not one atomic
step. If the event disappears in between, the foreign key rejects the insert
and the caller still sees EventNotFoundError. Duplicate (event, email) pairs
are caught by the uq_booking_event_email constraint.
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.logging import get_logger
from devevent.domain.errors import (
    DuplicateBookingError,
    EventNotFoundError,
    PersistError,
    SlugMismatchError,
)
from devevent.domain.normalization import requires_event_check
from devevent.models.booking import Booking
from devevent.models.event import Event
from devevent.repositories.base import is_foreign_key_violation, is_unique_violation
from devevent.schemas.booking import validate_booking_fields

logger = get_logger(__name__)


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event_id: Any, email: Any, slug: Optional[str] = None) -> Booking:
        data = validate_booking_fields({"event_id": event_id, "email": email, "slug": slug})
        event_slug = None
        # a new booking always counts as having its event_id set
        if requires_event_check():
            event_slug = await self._check_event(data.event_id, data.slug)

        booking = Booking(event_id=data.event_id, email=data.email, slug=data.slug or event_slug)
        self.session.add(booking)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if is_unique_violation(exc):
                logger.warning("booking_duplicate", event_id=data.event_id)
                raise DuplicateBookingError(data.event_id, data.email) from exc
            if is_foreign_key_violation(exc):
                raise EventNotFoundError(data.event_id) from exc
            raise PersistError("Booking could not be saved") from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistError("Booking could not be saved") from exc

        logger.info("booking_created", booking_id=booking.id, event_id=booking.event_id)
        return booking

    async def _check_event(self, event_id: int, slug: Optional[str]) -> str:
        """Verify the referenced event exists and return its slug."""
        result = await self.session.execute(
            select(Event.id, Event.slug).where(Event.id == event_id)
        )
        row = result.first()
        if row is None:
            logger.warning("booking_event_missing", event_id=event_id)
            raise EventNotFoundError(event_id)
        if slug and slug != row.slug:
            raise SlugMismatchError(event_id, slug)
        return row.slug

    async def list_for_event(self, event_id: int) -> list[Booking]:
        """Bookings for one event, newest first. Uses ix_bookings_event_created."""
        result = await self.session.execute(
            select(Booking)
            .where(Booking.event_id == event_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def list_for_email(self, email: str) -> list[Booking]:
        result = await self.session.execute(
            select(Booking)
            .where(Booking.email == email.strip().lower())
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())
