"""
Booking creation action.

A single-row write with no side effects elsewhere, so there is nothing to
compensate on failure. The action never raises: callers get a BookingResult
whose error carries the underlying DomainError.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from devevent.core.logging import get_logger
from devevent.core.metrics import record_booking_attempt
from devevent.domain.errors import DomainError, PersistError, ValidationError
from devevent.models.booking import Booking
from devevent.repositories.bookings import BookingRepository

logger = get_logger(__name__)


@dataclass
class BookingResult:
    success: bool
    booking: Optional[Booking] = None
    error: Optional[DomainError] = None


async def create_booking(repository: BookingRepository, payload: Any) -> BookingResult:
    """
    Book ``payload["email"]`` onto an event.

    Accepts ``event_id`` or ``eventId`` and an optional ``slug``; when the
    slug is omitted it is taken from the event. Anything other than a mapping
    (including ``None`` for an unreadable body) is a validation failure.
    """
    if not isinstance(payload, Mapping):
        error = ValidationError("Booking request must be a JSON object")
        record_booking_attempt(error.code.value)
        return BookingResult(success=False, error=error)

    event_id = payload.get("event_id", payload.get("eventId"))
    try:
        booking = await repository.create(
            event_id=event_id,
            email=payload.get("email"),
            slug=payload.get("slug"),
        )
    except DomainError as exc:
        logger.warning("booking_failed", event_id=event_id, code=exc.code.value)
        record_booking_attempt(exc.code.value)
        return BookingResult(success=False, error=exc)
    except Exception as exc:
        logger.exception("booking_crashed", event_id=event_id)
        error = PersistError(str(exc) or type(exc).__name__)
        record_booking_attempt(error.code.value)
        return BookingResult(success=False, error=error)

    record_booking_attempt("created")
    return BookingResult(success=True, booking=booking)
