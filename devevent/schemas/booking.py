"""
Pydantic schemas for booking validation and serialization.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, ValidationError, field_validator

from devevent.domain.errors import InvalidEmailError
from devevent.domain.errors import ValidationError as BookingValidationError


class BookingCreate(BaseModel):
    event_id: int = Field(..., validation_alias=AliasChoices("event_id", "eventId"))
    email: EmailStr
    slug: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _clean_email(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("email")
    @classmethod
    def _lowercase(cls, value: str) -> str:
        # email-validator keeps the local part's case; stored emails are all lowercase
        return value.lower()


class BookingResponse(BaseModel):
    id: int
    event_id: int
    slug: Optional[str]
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def validate_booking_fields(fields: dict[str, Any]) -> BookingCreate:
    try:
        return BookingCreate.model_validate(fields)
    except ValidationError as exc:
        failed = [str(err["loc"][0]) for err in exc.errors() if err["loc"]]
        if "email" in failed:
            raise InvalidEmailError() from exc
        raise BookingValidationError(
            f"Invalid booking fields: {', '.join(failed) or 'booking'}"
        ) from exc
