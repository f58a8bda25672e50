from devevent.repositories.events import EventRepository
from devevent.repositories.bookings import BookingRepository

__all__ = ["EventRepository", "BookingRepository"]
