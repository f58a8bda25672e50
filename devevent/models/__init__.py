from devevent.models.event import Event, EVENT_MODES
from devevent.models.booking import Booking

__all__ = ["Event", "Booking", "EVENT_MODES"]
