from devevent.schemas.event import EventCreate, EventForm, EventResponse
from devevent.schemas.booking import BookingCreate, BookingResponse

__all__ = [
    "EventCreate", "EventForm", "EventResponse",
    "BookingCreate", "BookingResponse",
]
