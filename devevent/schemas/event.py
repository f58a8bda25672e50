"""
Pydantic schemas for event validation and serialization.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from devevent.domain.errors import EventValidationError

EventMode = Literal["online", "offline", "hybrid"]


class EventCreate(BaseModel):
    """Field rules checked before any normalization runs."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    overview: str = Field(..., min_length=1, max_length=500)
    image: str = Field(..., min_length=1)
    venue: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    mode: EventMode
    audience: str = Field(..., min_length=1, max_length=255)
    agenda: list[str] = Field(..., min_length=1)
    organizer: str = Field(..., min_length=1, max_length=255)
    tags: list[str] = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True, "extra": "ignore"}


class EventForm(BaseModel):
    """Every field the multipart event form may carry.

    Only shape is checked here; the content rules live in EventCreate and are
    applied when the event is persisted.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    organizer: Optional[str] = None
    tags: list[str]
    agenda: list[str]

    model_config = {"extra": "ignore"}

    def to_event_fields(self, image_url: str) -> dict[str, Any]:
        return {**self.model_dump(), "image": image_url}


StringList = TypeAdapter(list[str])


class EventResponse(BaseModel):
    id: int
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def validate_event_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Run the EventCreate rules, raising EventValidationError on failure."""
    try:
        return EventCreate.model_validate(fields).model_dump()
    except ValidationError as exc:
        raise EventValidationError(
            [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ]
        ) from exc
